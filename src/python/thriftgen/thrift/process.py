# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import subprocess
from abc import ABC, abstractmethod
from typing import Sequence


class ProcessRunner(ABC):
    """Runs a command line to completion and reports its exit code.

    See SubprocessRunner below for the real implementation.
    """

    @abstractmethod
    def run(self, argv: Sequence[str]) -> int:
        """Run the command and block until it exits.

        :returns: The process exit code.
        :raises: :class:`OSError` if the process could not be started.
        """


class SubprocessRunner(ProcessRunner):
    """A `ProcessRunner` that spawns a child process sharing this process's stdio, cwd and env."""

    def run(self, argv: Sequence[str]) -> int:
        process = subprocess.Popen(list(argv))
        return process.wait()
