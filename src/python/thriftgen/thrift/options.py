# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

"""Maps the `[thrift-gen]` and `[java]` config sections onto a CompileThriftTask."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from thriftgen.fs.paths import to_path
from thriftgen.option.config import Config
from thriftgen.option.errors import ConfigError
from thriftgen.thrift.task import CompileThriftTask, JavaCompileStep

THRIFT_GEN_SCOPE = "thrift-gen"
JAVA_SCOPE = "java"

DEFAULT_CONFIG_FILE = "thriftgen.toml"
DEFAULT_WORKDIR = ".thriftgen.d"

BOOL_OPTIONS = (
    "recurse",
    "nowarn",
    "strict",
    "verbose",
    "debug",
    "allow_neg_keys",
    "allow_64bit_consts",
    "create_gen_folder",
)

VALID_OPTIONS = {
    THRIFT_GEN_SCOPE: {
        "executable",
        "output_dir",
        "source_files",
        "source_dirs",
        "include_dirs",
        "generators",
        "workdir",
        *BOOL_OPTIONS,
    },
    JAVA_SCOPE: {"source_dirs"},
}


def _get_typed(config: Config, section: str, option: str, expected: type, default: Any) -> Any:
    value = config.get(section, option, default)
    if not isinstance(value, expected):
        raise ConfigError(
            f"Option {option} under [{section}] must be of type {expected.__name__}, "
            f"but was {value!r}."
        )
    return value


def _get_str_list(config: Config, section: str, option: str) -> list[str]:
    values = _get_typed(config, section, option, list, [])
    for value in values:
        if not isinstance(value, str):
            raise ConfigError(
                f"Option {option} under [{section}] must be a list of strings, but contained "
                f"{value!r}."
            )
    return values


def _get_generators(config: Config) -> dict[str, list[str]]:
    generators = _get_typed(config, THRIFT_GEN_SCOPE, "generators", dict, {})
    result = {}
    for name, options in generators.items():
        if isinstance(options, str):
            result[name] = [options] if options.strip() else []
        elif isinstance(options, list) and all(isinstance(o, str) for o in options):
            result[name] = options
        else:
            raise ConfigError(
                f"Generator {name} under [{THRIFT_GEN_SCOPE}] must have a string or a list of "
                f"strings as options, but was {options!r}."
            )
    return result


def workdir(config: Config, base_dir: Path) -> Path:
    return to_path(_get_typed(config, THRIFT_GEN_SCOPE, "workdir", str, DEFAULT_WORKDIR), base_dir)


def create_task(config: Config, base_dir: Path) -> CompileThriftTask:
    """Create and configure a compile task from the given config.

    :raises: :class:`thriftgen.option.errors.ConfigError` if the config is invalid.
    """
    config.verify(VALID_OPTIONS)

    companion = None
    if config.has_section(JAVA_SCOPE):
        companion = JavaCompileStep(
            tuple(to_path(d, base_dir) for d in _get_str_list(config, JAVA_SCOPE, "source_dirs"))
        )
    task = CompileThriftTask(base_dir, companion=companion)

    if config.get(THRIFT_GEN_SCOPE, "output_dir") is None:
        raise ConfigError(f"No output_dir configured under [{THRIFT_GEN_SCOPE}].")
    task.executable = _get_typed(config, THRIFT_GEN_SCOPE, "executable", str, task.executable)
    for option in BOOL_OPTIONS:
        setattr(task, option, _get_typed(config, THRIFT_GEN_SCOPE, option, bool, False))
    task.output_dir = _get_typed(config, THRIFT_GEN_SCOPE, "output_dir", str, "")

    task.add_source_files(*_get_str_list(config, THRIFT_GEN_SCOPE, "source_files"))
    task.add_source_dirs(*_get_str_list(config, THRIFT_GEN_SCOPE, "source_dirs"))
    task.add_include_dirs(*_get_str_list(config, THRIFT_GEN_SCOPE, "include_dirs"))
    for name, options in _get_generators(config).items():
        task.generator(name, *options)
    return task
