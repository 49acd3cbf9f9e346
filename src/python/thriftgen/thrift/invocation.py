# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from thriftgen.thrift.compile_config import CompileConfig
from thriftgen.util.strutil import safe_shlex_join

# Boolean config fields and the compiler switch each one enables, in command line order.
_FLAG_SWITCHES = (
    ("recurse", "-r"),
    ("nowarn", "-nowarn"),
    ("strict", "-strict"),
    ("verbose", "-v"),
    ("debug", "-debug"),
)


@dataclass(frozen=True)
class Invocation:
    """A single thrift compiler command line for one source file."""

    source: Path
    argv: tuple[str, ...]

    def __str__(self) -> str:
        return safe_shlex_join(self.argv)


def generator_arg(name: str, options: str) -> str:
    name = name.strip()
    options = options.strip()
    return f"{name}:{options}" if options else name


def build_invocation(config: CompileConfig, source: Path) -> Invocation:
    """Assembles the compiler command line for the given source.

    The layout is:
      <exe> {-o|-out} <outdir> [--gen name[:opts]]* [-I dir]* [-r] [-nowarn] [-strict] [-v]
        [-debug] <source>
    """
    argv = [
        config.executable,
        "-o" if config.create_gen_folder else "-out",
        str(config.output_dir.absolute()),
    ]
    for name, options in config.generators:
        argv.extend(("--gen", generator_arg(name, options)))
    for include_dir in config.include_dirs:
        argv.extend(("-I", str(include_dir.absolute())))
    argv.extend(switch for field, switch in _FLAG_SWITCHES if getattr(config, field))
    argv.append(str(source.absolute()))
    return Invocation(source=source, argv=tuple(argv))
