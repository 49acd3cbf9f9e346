# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import getpass
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping

import toml

from thriftgen.option.errors import (
    ConfigError,
    ConfigValidationError,
    InterpolationMissingOptionError,
)
from thriftgen.util.strutil import softwrap

logger = logging.getLogger(__name__)


DEFAULT_SECTION = "DEFAULT"

_INTERPOLATION_RE = re.compile(r"%\(([a-zA-Z_0-9.]+)\)s")


@dataclass(frozen=True)
class ConfigSource:
    """The raw bytes of a config file, along with the path they were read from."""

    path: str
    content: bytes

    @classmethod
    def read(cls, path: str | Path) -> ConfigSource:
        try:
            with open(path, "rb") as fp:
                return cls(str(path), fp.read())
        except OSError as e:
            raise ConfigError(f"Config file {path} could not be read: {e}") from e


@dataclass(frozen=True, eq=False)
class Config:
    """Encapsulates config file loading and access, including encapsulation of support for multiple
    config files.

    Supports variable substitution using old-style Python format strings. E.g., %(var_name)s will be
    replaced with the value of var_name, looked up in the same section, then in the DEFAULT
    section, then among the seed values.
    """

    values: tuple[_ConfigValues, ...]

    @classmethod
    def load(
        cls,
        file_contents: Iterable[ConfigSource],
        *,
        seed_values: Mapping[str, str] | None = None,
    ) -> Config:
        """Loads config from the given payloads, with later payloads overriding earlier ones.

        A handful of seed values (`buildroot`, `homedir` and `user`), plus the values in the DEFAULT
        section, are available for use in substitutions. The caller may override the seed values.
        """
        normalized_seed_values = cls._determine_seed_values(seed_values=seed_values)
        config_values = []
        for file_content in file_contents:
            try:
                toml_values = toml.loads(file_content.content.decode())
            except Exception as e:
                raise ConfigError(
                    f"Config file {file_content.path} could not be parsed as TOML:\n  {e}"
                ) from e
            seed = {**normalized_seed_values, **toml_values.get(DEFAULT_SECTION, {})}
            config_values.append(_ConfigValues(file_content.path, toml_values, seed))
        return cls(tuple(config_values))

    @staticmethod
    def _determine_seed_values(*, seed_values: Mapping[str, str] | None = None) -> dict[str, Any]:
        safe_seed_values = seed_values or {}
        return {
            "buildroot": safe_seed_values.get("buildroot", os.getcwd()),
            # Note that expanduser will return the root dir when running with a uid
            # not associated with a user.
            "homedir": safe_seed_values.get("homedir", os.path.expanduser("~")),
            "user": safe_seed_values.get("user") or _getuser(),
        }

    def verify(self, section_to_valid_options: Mapping[str, set[str]]) -> None:
        error_log = []
        for config_values in self.values:
            error_log.extend(config_values.get_verification_errors(section_to_valid_options))
        if error_log:
            for error in error_log:
                logger.error(error)
            raise ConfigValidationError(
                softwrap(
                    """
                    Invalid config entries detected. See log for details on which entries to update
                    or remove.
                    """
                )
            )

    def has_section(self, section: str) -> bool:
        return any(section in vals.section_to_values for vals in self.values)

    def get(self, section: str, option: str, default: Any = None) -> Any:
        """Retrieves an interpolated option value; the last config file defining it wins."""
        for vals in reversed(self.values):
            value = vals.get_value(section, option)
            if value is not None:
                return value
        return default

    def sources(self) -> list[str]:
        """Returns the sources of this config as a list of filenames."""
        return [vals.path for vals in self.values]


def _getuser() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return ""


@dataclass(frozen=True)
class _ConfigValues:
    """The parsed contents of a TOML config file."""

    path: str
    section_to_values: dict[str, dict[str, Any]]
    seed_values: dict[str, Any]

    def _possibly_interpolate_value(
        self, raw_value: str, *, option: str, section: str, section_values: dict
    ) -> str:
        """For any values with %(foo)s, substitute it with the corresponding value from the same
        section, DEFAULT or the seed values."""

        def replace(match: re.Match) -> str:
            reference = match.group(1)
            possible_interpolations = {**self.seed_values, **section_values}
            if reference not in possible_interpolations:
                raise InterpolationMissingOptionError(option, section, raw_value, reference)
            return str(possible_interpolations[reference])

        value = raw_value
        # It's possible to interpolate with a value that itself has an interpolation.
        for _ in range(32):
            interpolated = _INTERPOLATION_RE.sub(replace, value)
            if interpolated == value:
                return interpolated
            value = interpolated
        raise ConfigError(
            f"Recursive interpolation in option {option} in section {section}: {raw_value}"
        )

    def get_value(self, section: str, option: str) -> Any:
        section_values = self.section_to_values.get(section)
        if section_values is None or option not in section_values:
            return None

        def interpolate(raw_val: Any) -> Any:
            if isinstance(raw_val, str):
                return self._possibly_interpolate_value(
                    raw_val, option=option, section=section, section_values=section_values
                )
            if isinstance(raw_val, list):
                return [interpolate(v) for v in raw_val]
            if isinstance(raw_val, dict):
                return {k: interpolate(v) for k, v in raw_val.items()}
            return raw_val

        return interpolate(section_values[option])

    def get_verification_errors(
        self, section_to_valid_options: Mapping[str, set[str]]
    ) -> list[str]:
        error_log = []
        for section, vals in self.section_to_values.items():
            if section == DEFAULT_SECTION:
                continue
            try:
                valid_options_in_section = section_to_valid_options[section]
            except KeyError:
                error_log.append(f"Invalid section [{section}] in {self.path}")
            else:
                for option in sorted(set(vals.keys()) - valid_options_in_section):
                    error_log.append(f"Invalid option '{option}' under [{section}] in {self.path}")
        return error_log
