# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import os
from pathlib import Path
from textwrap import dedent

import pytest

from thriftgen.bin.thriftgen_exe import create_parser, main
from thriftgen.util.logging import LogLevel
from thriftgen.version import THRIFTGEN_SEMVER

pytestmark = pytest.mark.skipif(os.name != "posix", reason="Requires an executable fake compiler.")


@pytest.fixture
def project(tmp_path: Path, fake_thrift) -> Path:
    (tmp_path / "idl" / "nested").mkdir(parents=True)
    (tmp_path / "idl" / "a.thrift").write_text("struct A {}\n")
    (tmp_path / "idl" / "nested" / "b.thrift").write_text("struct B {}\n")
    (tmp_path / "thriftgen.toml").write_text(
        dedent(
            f"""\
            [thrift-gen]
            executable = "{fake_thrift.path}"
            output_dir = "build/gen"
            source_dirs = ["idl"]
            """
        )
    )
    return tmp_path


def run(project: Path, *args: str) -> int:
    return main(["--base-dir", str(project), *args])


def test_parser_defaults() -> None:
    args = create_parser().parse_args([])
    assert args.config is None
    assert args.base_dir is None
    assert args.level is LogLevel.INFO
    assert not (args.full or args.clean or args.print_stacktrace)
    assert create_parser().parse_args(["-l", "debug"]).level is LogLevel.DEBUG


def test_compiles_only_what_changed(project: Path, fake_thrift, capsys) -> None:
    assert run(project) == 0
    assert fake_thrift.sources() == ["a.thrift", "b.thrift"]
    assert (project / "build" / "gen" / "a.java").is_file()
    assert (project / ".thriftgen.d" / "thrift-gen.fingerprints.json").is_file()
    assert "Compiled 2 thrift sources." in capsys.readouterr().err

    fake_thrift.reset()
    assert run(project) == 0
    assert fake_thrift.sources() == []
    assert "up to date" in capsys.readouterr().err

    (project / "idl" / "nested" / "b.thrift").write_text("struct B { 1: i32 x }\n")
    assert run(project) == 0
    assert fake_thrift.sources() == ["b.thrift"]


def test_full_recompiles_everything(project: Path, fake_thrift) -> None:
    assert run(project) == 0
    fake_thrift.reset()
    assert run(project, "--full") == 0
    assert fake_thrift.sources() == ["a.thrift", "b.thrift"]


def test_compile_failure(project: Path, fake_thrift, capsys) -> None:
    fake_thrift.fail_on("b.thrift")
    assert run(project) == 1
    err = capsys.readouterr().err
    assert "Failed to compile" in err
    assert "b.thrift" in err
    assert not (project / ".thriftgen.d" / "thrift-gen.fingerprints.json").exists()

    # Nothing was recorded, so the next run starts over.
    fake_thrift.reset()
    assert run(project) == 0
    assert fake_thrift.sources() == ["a.thrift", "b.thrift"]


def test_clean(project: Path, fake_thrift) -> None:
    assert run(project) == 0
    assert run(project, "--clean") == 0
    assert not (project / "build" / "gen").exists()
    assert not (project / ".thriftgen.d" / "thrift-gen.fingerprints.json").exists()
    assert len(fake_thrift.invocations()) == 2


def test_explicit_config_relative_to_base_dir(project: Path, fake_thrift) -> None:
    (project / "thriftgen.toml").rename(project / "other.toml")
    assert run(project, "--config", "other.toml") == 0
    assert fake_thrift.sources() == ["a.thrift", "b.thrift"]


def test_missing_config(tmp_path: Path, capsys) -> None:
    assert main(["--base-dir", str(tmp_path)]) == 1
    assert "could not be read" in capsys.readouterr().err


def test_missing_output_dir(tmp_path: Path, capsys) -> None:
    (tmp_path / "thriftgen.toml").write_text("[thrift-gen]\nrecurse = true\n")
    assert main(["--base-dir", str(tmp_path)]) == 1
    assert "No output_dir configured" in capsys.readouterr().err


def test_version(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--version"])
    assert exc.value.code == 0
    assert capsys.readouterr().out.strip() == f"thriftgen {THRIFTGEN_SEMVER}"
