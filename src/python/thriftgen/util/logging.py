# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging
from enum import Enum
from functools import total_ordering

# A custom log level for trace logging.
TRACE = 5


@total_ordering
class LogLevel(Enum):
    """Exposes an enum of the Python `logging` module's levels, with the addition of TRACE.

    Ordering is by verbosity: TRACE < DEBUG < INFO < WARN < ERROR.
    """

    TRACE = ("trace", TRACE)
    DEBUG = ("debug", logging.DEBUG)
    INFO = ("info", logging.INFO)
    WARN = ("warn", logging.WARN)
    ERROR = ("error", logging.ERROR)

    _level: int

    def __new__(cls, value: str, level: int) -> LogLevel:
        member: LogLevel = object.__new__(cls)
        member._value_ = value
        member._level = level
        return member

    @property
    def level(self) -> int:
        return self._level

    def set_level_for(self, logger: logging.Logger):
        logger.setLevel(self.level)

    def __lt__(self, other):
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self._level < other._level
