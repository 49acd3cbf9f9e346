# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from thriftgen.fs.paths import PathLike, to_path
from thriftgen.util.dirutil import walk_files

logger = logging.getLogger(__name__)

THRIFT_EXTENSION = ".thrift"


def is_thrift_source(path: PathLike) -> bool:
    return Path(path).name.endswith(THRIFT_EXTENSION)


def resolve_sources(entries: Iterable[PathLike], base_dir: PathLike) -> frozenset[Path]:
    """Expands source entries into the set of absolute thrift source paths they name.

    Files are included as-is, without an extension check. Directories contribute every `.thrift`
    file found under them, recursively. Entries that are missing, or that are neither a file nor a
    directory, are logged and skipped.
    """
    resolved: set[Path] = set()
    for entry in entries:
        path = to_path(entry, base_dir)
        if path.is_file():
            resolved.add(path)
        elif path.is_dir():
            resolved.update(found for found in walk_files(path) if is_thrift_source(found))
        elif not path.exists():
            logger.warning(f"Could not find {path}. Will ignore it")
        else:
            logger.warning(f"Unable to handle {path}. Will ignore it")
    return frozenset(resolved)


@dataclass(frozen=True)
class SourceResolver:
    """Resolves source entries relative to a fixed base directory."""

    base_dir: Path

    def resolve(self, entries: Iterable[PathLike]) -> frozenset[Path]:
        return resolve_sources(entries, self.base_dir)

    def resolve_sorted(self, entries: Iterable[PathLike]) -> tuple[Path, ...]:
        """As `resolve`, but in a stable order for reproducible invocations and diagnostics."""
        return tuple(sorted(self.resolve(entries)))
