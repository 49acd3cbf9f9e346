# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Union

from thriftgen.base.exceptions import CompileError, OutputDirectoryError
from thriftgen.source.resolver import SourceResolver, is_thrift_source
from thriftgen.thrift.compile_config import CompileConfig
from thriftgen.thrift.invocation import build_invocation
from thriftgen.thrift.process import ProcessRunner, SubprocessRunner
from thriftgen.util.dirutil import rm_rf, safe_mkdir
from thriftgen.util.strutil import pluralize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeSet:
    """The tracked inputs that changed since the last successful run.

    :param changed: Absolute paths of inputs that were added or modified, of any extension.
    :param removed: Whether any previously tracked input has gone away.
    """

    changed: tuple[Path, ...] = ()
    removed: bool = False


class _FullRebuild:
    """Marks a run for which no incremental information is available."""

    def __repr__(self) -> str:
        return "FULL"


FULL = _FullRebuild()

IncrementalInputs = Union[ChangeSet, _FullRebuild]


class RunMode(Enum):
    FULL = "full"
    REMOVAL = "removal"
    INCREMENTAL = "incremental"

    @classmethod
    def for_inputs(cls, incremental: IncrementalInputs) -> RunMode:
        if not isinstance(incremental, ChangeSet):
            return cls.FULL
        if incremental.removed:
            return cls.REMOVAL
        return cls.INCREMENTAL


class CompilationDriver:
    """Regenerates thrift bindings by invoking the thrift compiler once per source file.

    Invocations run one at a time and the first failure aborts the run.
    """

    def __init__(
        self,
        config: CompileConfig,
        *,
        runner: ProcessRunner | None = None,
        resolver: SourceResolver | None = None,
    ) -> None:
        self._config = config
        self._runner = runner or SubprocessRunner()
        self._resolver = resolver or SourceResolver(Path.cwd())

    @property
    def config(self) -> CompileConfig:
        return self._config

    def run(self, incremental: IncrementalInputs = FULL) -> tuple[Path, ...]:
        """Compile the sources selected by the given change signal.

        * FULL: every resolved source is compiled.
        * A ChangeSet with removals: the output directory is wiped first, then as for FULL, since
          there is no mapping from a removed source to the files it generated.
        * Any other ChangeSet: only the changed `.thrift` files are compiled.

        :returns: The sources that were compiled, in invocation order.
        :raises: :class:`thriftgen.base.exceptions.TaskError` on the first failure.
        """
        mode = RunMode.for_inputs(incremental)
        logger.debug(f"Running thrift compilation in {mode.value} mode.")

        if mode is RunMode.REMOVAL:
            self._delete_output_dir()
        self._ensure_output_dir()

        if isinstance(incremental, ChangeSet) and mode is RunMode.INCREMENTAL:
            sources = tuple(path for path in incremental.changed if is_thrift_source(path))
        else:
            sources = self._resolver.resolve_sorted(self._config.sources)
            logger.debug(f"Files to be generated for: {[str(source) for source in sources]}")

        if sources:
            logger.info(f"Compiling {pluralize(len(sources), 'thrift source')} ({mode.value}).")
        for source in sources:
            self.compile(source)
        return sources

    def compile(self, source: Path) -> None:
        """Run the compiler for a single source, raising CompileError on failure."""
        invocation = build_invocation(self._config, source)
        logger.debug(f"Executing: {invocation}")
        try:
            exit_code = self._runner.run(invocation.argv)
        except OSError as e:
            raise CompileError(
                source, 127, reason=f"could not execute {self._config.executable}: {e}"
            ) from e
        if exit_code != 0:
            logger.error(f"Failed: {invocation}")
            raise CompileError(source, exit_code)

    def _ensure_output_dir(self) -> None:
        output_dir = self._config.output_dir
        try:
            safe_mkdir(output_dir)
        except OSError as e:
            raise OutputDirectoryError(output_dir.absolute(), "create") from e

    def _delete_output_dir(self) -> None:
        output_dir = self._config.output_dir
        logger.info(f"Sources were removed; deleting {output_dir}.")
        try:
            rm_rf(output_dir)
        except OSError as e:
            raise OutputDirectoryError(output_dir.absolute(), "delete") from e
