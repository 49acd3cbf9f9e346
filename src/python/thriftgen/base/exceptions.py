# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

from pathlib import Path


class ThriftGenException(Exception):
    """Base exception type for thriftgen."""


class TaskError(ThriftGenException):
    """Indicates a task has failed.

    :API: public
    """

    def __init__(self, *args, exit_code: int = 1, **kwargs) -> None:
        """
        :param int exit_code: an optional exit code (defaults to 1)
        """
        super().__init__(*args, **kwargs)
        self._exit_code = exit_code

    @property
    def exit_code(self) -> int:
        return self._exit_code


class OutputDirectoryError(TaskError):
    """The thrift output directory could not be created or deleted."""

    def __init__(self, path: Path, action: str) -> None:
        super().__init__(f"Could not {action} thrift output directory: {path}")
        self.path = path
        self.action = action


class CompileError(TaskError):
    """The thrift compiler failed for a single source file."""

    def __init__(self, source: Path, exit_code: int, reason: str | None = None) -> None:
        message = f"Failed to compile {source}, exit={exit_code}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, exit_code=exit_code if exit_code > 0 else 1)
        self.source = source
        self.returncode = exit_code
