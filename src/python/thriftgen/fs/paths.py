# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

PathLike = Union[str, "os.PathLike[str]"]


def to_path(value: PathLike, base_dir: PathLike) -> Path:
    """Convert a configured path-like value to a normalized absolute path.

    Absolute values are kept as-is (modulo normalization); relative values are interpreted relative
    to `base_dir`. Symlinks are not resolved.

    :raises: TypeError if the value is neither a string nor a path.
    """
    if not isinstance(value, (str, os.PathLike)):
        raise TypeError(
            f"Expected a path or a string, but got {value!r} of type {type(value).__name__}."
        )
    path = os.fspath(value)
    if not os.path.isabs(path):
        path = os.path.join(os.fspath(base_dir), path)
    return Path(os.path.normpath(os.path.abspath(path)))
