# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Mapping

from thriftgen.thrift.compile_config import CompileConfig
from thriftgen.thrift.driver import FULL, ChangeSet, IncrementalInputs
from thriftgen.util.dirutil import maybe_read_file, safe_delete, safe_file_dump, walk_files
from thriftgen.version import MAJOR_MINOR

logger = logging.getLogger(__name__)


# Bump this to invalidate all existing fingerprint files, e.g. after fixing a bug that caused bad
# outputs to be recorded as up to date.
GLOBAL_FINGERPRINT_VERSION = "1"


def fingerprint_file(path: Path) -> str:
    """Returns the sha1 hex digest of the file's contents."""
    hasher = hashlib.sha1()
    with open(path, "rb") as fp:
        for chunk in iter(lambda: fp.read(65536), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def tracked_inputs(config: CompileConfig) -> Iterator[Path]:
    """Yields every input whose change should trigger recompilation.

    Source files and source dirs are treated alike, as the resolver treats them: an entry that is
    a file is tracked itself, and an entry that is a directory contributes every regular file under
    it, regardless of extension. Missing entries are skipped.
    """
    for source in config.sources:
        if source.is_file():
            yield source
        elif source.is_dir():
            yield from walk_files(source)


@dataclass(frozen=True)
class InputSnapshot:
    """The fingerprints of a config and of all of its tracked inputs at one point in time."""

    config_hash: str
    output_dir: Path
    inputs: Mapping[str, str]

    @classmethod
    def capture(cls, config: CompileConfig) -> InputSnapshot:
        inputs = {str(path): fingerprint_file(path) for path in tracked_inputs(config)}
        return cls(config.fingerprint(), config.output_dir, inputs)


class BuildInvalidator:
    """Tracks the inputs of the last successful run so that the next run can be incremental.

    State is a single JSON file under `workdir`, only rewritten by `update` after success. When the
    state is missing, unreadable, written by a different version, or recorded for a different
    config, no incremental information is available and `changes` returns FULL.
    """

    def __init__(self, workdir: Path, name: str = "thrift-gen") -> None:
        self._state_file = workdir / f"{name}.fingerprints.json"

    @property
    def state_file(self) -> Path:
        return self._state_file

    def changes(self, snapshot: InputSnapshot) -> IncrementalInputs:
        """Compares the snapshot against the state recorded by the last successful run."""
        previous = self._read_state()
        if previous is None:
            logger.debug("No previous thrift fingerprints found: full rebuild.")
            return FULL
        if previous.get("config") != snapshot.config_hash:
            logger.info("Thrift compile configuration changed: full rebuild.")
            return FULL
        if not snapshot.output_dir.is_dir():
            logger.info(f"Output directory {snapshot.output_dir} is missing: full rebuild.")
            return FULL

        previous_inputs: dict[str, str] = previous.get("inputs", {})
        changed = tuple(
            Path(path)
            for path, digest in sorted(snapshot.inputs.items())
            if previous_inputs.get(path) != digest
        )
        removed = any(path not in snapshot.inputs for path in previous_inputs)
        return ChangeSet(changed=changed, removed=removed)

    def update(self, snapshot: InputSnapshot) -> None:
        """Records the snapshot as the state of the last successful run."""
        state = {
            "version": GLOBAL_FINGERPRINT_VERSION,
            "thriftgen": MAJOR_MINOR,
            "config": snapshot.config_hash,
            "inputs": dict(sorted(snapshot.inputs.items())),
        }
        safe_file_dump(self._state_file, json.dumps(state, indent=2) + "\n")

    def force_invalidate_all(self) -> None:
        """Forget all recorded state, so that the next run is a full rebuild."""
        safe_delete(self._state_file)

    def _read_state(self) -> dict[str, Any] | None:
        content = maybe_read_file(self._state_file)
        if content is None:
            return None
        try:
            state = json.loads(content)
        except ValueError as e:
            logger.warning(f"Ignoring corrupt fingerprint file {self._state_file}: {e}")
            return None
        if not isinstance(state, dict) or state.get("version") != GLOBAL_FINGERPRINT_VERSION:
            logger.debug(f"Ignoring fingerprint file {self._state_file} from another version.")
            return None
        if state.get("thriftgen") != MAJOR_MINOR:
            logger.debug(
                f"Ignoring fingerprint file {self._state_file} recorded by thriftgen "
                f"{state.get('thriftgen')}, not {MAJOR_MINOR}."
            )
            return None
        if not isinstance(state.get("inputs", {}), dict):
            logger.warning(f"Ignoring malformed fingerprint file {self._state_file}.")
            return None
        return state
