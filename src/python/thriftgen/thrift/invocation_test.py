# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from pathlib import Path

from thriftgen.thrift.compile_config import CompileConfig
from thriftgen.thrift.invocation import build_invocation, generator_arg


def test_argument_order() -> None:
    config = CompileConfig.create(
        Path("/out"),
        generators={"java": "", "html": "private-members"},
        include_dirs=[Path("/inc")],
        recurse=True,
    )
    invocation = build_invocation(config, Path("/src/a.thrift"))
    assert invocation.argv == (
        "thrift",
        "-out",
        "/out",
        "--gen",
        "java",
        "--gen",
        "html:private-members",
        "-I",
        "/inc",
        "-r",
        "/src/a.thrift",
    )
    assert invocation.source == Path("/src/a.thrift")


def test_generator_order_follows_insertion() -> None:
    config = CompileConfig.create(
        Path("/out"), generators=[("py", "new_style"), ("cpp", ""), ("java", "beans,hashcode")]
    )
    argv = build_invocation(config, Path("/a.thrift")).argv
    assert argv[3:9] == ("--gen", "py:new_style", "--gen", "cpp", "--gen", "java:beans,hashcode")


def test_create_gen_folder_uses_nested_output_flag() -> None:
    config = CompileConfig.create(Path("/out"), create_gen_folder=True)
    assert build_invocation(config, Path("/a.thrift")).argv == ("thrift", "-o", "/out", "/a.thrift")


def test_all_flags_in_fixed_order() -> None:
    config = CompileConfig.create(
        Path("/out"),
        executable="/opt/thrift/bin/thrift",
        include_dirs=[Path("/inc1"), Path("/inc2"), Path("/inc1")],
        debug=True,
        verbose=True,
        strict=True,
        nowarn=True,
        recurse=True,
        allow_neg_keys=True,
        allow_64bit_consts=True,
    )
    assert build_invocation(config, Path("/a.thrift")).argv == (
        "/opt/thrift/bin/thrift",
        "-out",
        "/out",
        "-I",
        "/inc1",
        "-I",
        "/inc2",
        "-r",
        "-nowarn",
        "-strict",
        "-v",
        "-debug",
        "/a.thrift",
    )


def test_str_is_shell_quoted() -> None:
    config = CompileConfig.create(Path("/out dir"), generators={"java": ""})
    invocation = build_invocation(config, Path("/src/a b.thrift"))
    assert str(invocation) == "thrift -out '/out dir' --gen java '/src/a b.thrift'"


def test_generator_arg() -> None:
    assert generator_arg(" java ", "") == "java"
    assert generator_arg("java", "   ") == "java"
    assert generator_arg("java", " beans ") == "java:beans"
