# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from logging import Formatter, LogRecord, StreamHandler
from typing import Callable, Iterator, TextIO

from colors import blue, cyan, magenta, red, yellow

import thriftgen.util.logging as thriftgen_logging
from thriftgen.util.logging import LogLevel

# Although logging supports the WARN level, its not documented and could conceivably be yanked.
# Register a 'WARN' level name so that log lines read `[WARN]` rather than `[WARNING]`.
logging.addLevelName(logging.WARNING, "WARN")
logging.addLevelName(thriftgen_logging.TRACE, "TRACE")

_LEVEL_COLORS: dict[int, Callable[[str], str]] = {
    thriftgen_logging.TRACE: magenta,
    logging.DEBUG: blue,
    logging.INFO: cyan,
    logging.WARNING: yellow,
    logging.ERROR: red,
    logging.CRITICAL: red,
}


class _LevelFormatter(Formatter):
    """Renders `HH:MM:SS.ss [LEVEL] message`, optionally colorizing the level and stacktrace."""

    def __init__(self, *, use_color: bool, print_stacktrace: bool) -> None:
        super().__init__(None)
        self.use_color = use_color
        self.print_stacktrace = print_stacktrace

    def format(self, record: LogRecord) -> str:
        level_name = f"[{record.levelname}]"
        if self.use_color:
            level_name = _LEVEL_COLORS.get(record.levelno, str)(level_name)
        timestamp = self.formatTime(record, "%H:%M:%S")
        centis = int(record.msecs / 10)
        message = f"{timestamp}.{centis:02d} {level_name} {record.getMessage()}"
        if record.exc_info and self.print_stacktrace:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message

    def formatException(self, exc_info) -> str:
        stacktrace = super().formatException(exc_info)
        return red(stacktrace) if self.use_color else stacktrace


@contextmanager
def initialize_logging(
    level: LogLevel,
    *,
    print_stacktrace: bool = False,
    stream: TextIO | None = None,
    use_color: bool | None = None,
) -> Iterator[None]:
    """Installs a single stream handler on the root logger for the duration of the context.

    Any existing root handlers are removed and restored afterward.

    :param use_color: True or False force color on or off; None colors only on a TTY.
    """
    stream = stream or sys.stderr
    if use_color is None:
        use_color = hasattr(stream, "isatty") and stream.isatty()

    def trace_fn(self, message, *args, **kwargs):
        if self.isEnabledFor(LogLevel.TRACE.level):
            self._log(LogLevel.TRACE.level, message, *args, **kwargs)

    logging.Logger.trace = trace_fn  # type: ignore[attr-defined]
    logger = logging.getLogger(None)
    prior_handlers = tuple(logger.handlers)
    prior_level = logger.level
    for handler in prior_handlers:
        logger.removeHandler(handler)

    handler = StreamHandler(stream)
    handler.setFormatter(_LevelFormatter(use_color=use_color, print_stacktrace=print_stacktrace))
    logger.addHandler(handler)
    level.set_level_for(logger)
    # This routes warnings through our loggers instead of straight to raw stderr.
    logging.captureWarnings(True)
    try:
        yield
    finally:
        logging.captureWarnings(False)
        handler.flush()
        logger.removeHandler(handler)
        for prior in prior_handlers:
            logger.addHandler(prior)
        logger.setLevel(prior_level)
