# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping

from thriftgen.util.strutil import stable_hash

DEFAULT_THRIFT_EXECUTABLE = "thrift"

# The subdirectory the compiler creates for java sources when asked to nest its output.
GEN_JAVA_DIRNAME = "gen-java"


@dataclass(frozen=True)
class CompileConfig:
    """An immutable snapshot of everything needed to compile thrift sources for one run.

    `generators` is an ordered sequence of (name, comma-joined options) pairs; its order determines
    the order of `--gen` arguments on the compiler command line.

    NB: `allow_neg_keys` and `allow_64bit_consts` are accepted and fingerprinted, but no compiler
    switch is emitted for either.
    """

    output_dir: Path
    executable: str = DEFAULT_THRIFT_EXECUTABLE
    source_files: tuple[Path, ...] = ()
    source_dirs: tuple[Path, ...] = ()
    include_dirs: tuple[Path, ...] = ()
    generators: tuple[tuple[str, str], ...] = ()
    recurse: bool = False
    nowarn: bool = False
    strict: bool = False
    verbose: bool = False
    debug: bool = False
    allow_neg_keys: bool = False
    allow_64bit_consts: bool = False
    create_gen_folder: bool = False

    @classmethod
    def create(
        cls,
        output_dir: Path,
        *,
        source_files: Iterable[Path] = (),
        source_dirs: Iterable[Path] = (),
        include_dirs: Iterable[Path] = (),
        generators: Mapping[str, str] | Iterable[tuple[str, str]] = (),
        **kwargs: Any,
    ) -> CompileConfig:
        """Builds a config from arbitrary iterables, dropping duplicate paths but keeping order."""
        generator_items = generators.items() if isinstance(generators, Mapping) else generators
        return cls(
            output_dir=output_dir,
            source_files=tuple(dict.fromkeys(source_files)),
            source_dirs=tuple(dict.fromkeys(source_dirs)),
            include_dirs=tuple(dict.fromkeys(include_dirs)),
            generators=tuple(dict(generator_items).items()),
            **kwargs,
        )

    @property
    def sources(self) -> tuple[Path, ...]:
        """All configured source entries: explicit files followed by directories."""
        return (*self.source_files, *self.source_dirs)

    def fingerprint(self) -> str:
        """A stable digest of the config, used to detect configuration changes between runs."""
        return stable_hash(
            {
                field.name: _jsonify(getattr(self, field.name))
                for field in dataclasses.fields(self)
            }
        )


def _jsonify(value: Any) -> Any:
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, tuple):
        return [_jsonify(v) for v in value]
    return value
