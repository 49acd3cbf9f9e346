# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import pytest

from thriftgen.util.strutil import pluralize, safe_shlex_join, softwrap, stable_hash


def test_pluralize() -> None:
    assert pluralize(1, "source") == "1 source"
    assert pluralize(0, "source") == "0 sources"
    assert pluralize(2, "class") == "2 classes"
    assert pluralize(3, "dependency") == "3 dependencies"
    assert pluralize(2, "source", include_count=False) == "sources"


def test_safe_shlex_join() -> None:
    assert safe_shlex_join(["thrift", "-out", "/a b", "x.thrift"]) == "thrift -out '/a b' x.thrift"


def test_softwrap() -> None:
    assert (
        softwrap(
            """
            Could not find
            the thing.

            Try again.
            """
        )
        == "Could not find the thing.\n\nTry again."
    )


def test_stable_hash() -> None:
    assert stable_hash({"a": 1, "b": [1, 2]}) == stable_hash({"b": [1, 2], "a": 1})
    assert stable_hash({"a": 1}) != stable_hash({"a": 2})
    assert len(stable_hash("x")) == 40
    assert len(stable_hash("x", name="sha256")) == 64


def test_stable_hash_rejects_unserializable() -> None:
    with pytest.raises(TypeError):
        stable_hash(object())
