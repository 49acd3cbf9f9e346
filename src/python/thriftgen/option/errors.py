# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from thriftgen.base.exceptions import ThriftGenException
from thriftgen.util.strutil import softwrap


class OptionsError(ThriftGenException):
    """An options system-related error."""


class ConfigError(OptionsError):
    """An error encountered while parsing a config file."""


class ConfigValidationError(ConfigError):
    """A config file is invalid."""


class InterpolationMissingOptionError(ConfigError):
    def __init__(self, option: str, section: str, rawval: str, reference: str) -> None:
        super().__init__(
            softwrap(
                f"""
                Bad value substitution: option {option} in section {section} contains an
                interpolation key {reference} which is not a valid option name.

                Raw value: {rawval}
                """
            )
        )
