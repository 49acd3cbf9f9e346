# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from pathlib import Path, PurePath

import pytest

from thriftgen.fs.paths import to_path


def test_absolute_values_are_kept(tmp_path: Path) -> None:
    assert to_path("/src/a.thrift", tmp_path) == Path("/src/a.thrift")
    assert to_path(Path("/src/a.thrift"), tmp_path) == Path("/src/a.thrift")


def test_relative_values_resolve_against_base_dir(tmp_path: Path) -> None:
    assert to_path("idl/a.thrift", tmp_path) == tmp_path / "idl" / "a.thrift"
    assert to_path(PurePath("idl"), str(tmp_path)) == tmp_path / "idl"


def test_normalization(tmp_path: Path) -> None:
    assert to_path("idl/../other/./b.thrift", tmp_path) == tmp_path / "other" / "b.thrift"
    assert to_path("/a//b/../c", tmp_path) == Path("/a/c")


@pytest.mark.parametrize("bad", [None, 42, ["idl"]])
def test_rejects_other_types(tmp_path: Path, bad) -> None:
    with pytest.raises(TypeError):
        to_path(bad, tmp_path)
