# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import errno
import os
import shutil
from pathlib import Path
from typing import Iterator


def safe_mkdir(directory: str | Path, clean: bool = False) -> None:
    """Ensure a directory is present, creating any missing parents.

    If it's already there this is a no-op. If clean is True, ensure the dir is empty.

    :raises: OSError if the directory could not be created.
    """
    if clean:
        rm_rf(directory)
    try:
        os.makedirs(directory)
    except OSError as e:
        if e.errno != errno.EEXIST or not os.path.isdir(directory):
            raise


def safe_mkdir_for(path: str | Path) -> None:
    """Ensure that the parent directory for a file is present."""
    dirname = os.path.dirname(path)
    if dirname:
        safe_mkdir(dirname)


def safe_delete(filename: str | Path) -> None:
    """Delete a file safely.

    If it's not present, no-op.
    """
    try:
        os.unlink(filename)
    except OSError as e:
        if e.errno != errno.ENOENT:
            raise


def rm_rf(name: str | Path) -> None:
    """Remove a file or a directory similarly to running `rm -rf <name>` in a UNIX shell.

    Symlinks are unlinked rather than followed.

    :raises: OSError on error.
    """
    if not os.path.lexists(name):
        return
    if os.path.islink(name):
        safe_delete(name)
        return

    try:
        # Avoid using ignore_errors so we can detect failures.
        shutil.rmtree(name)
    except OSError as e:
        if e.errno == errno.ENOTDIR:
            # 'Not a directory', but a file: unlink it, raising OSError on failure.
            safe_delete(name)
        elif e.errno != errno.ENOENT:
            raise


def safe_file_dump(filename: str | Path, payload: str, mode: str = "w") -> None:
    """Write a string to a file, creating the parent directory first.

    The payload is written to a sibling temp file and renamed into place so readers never observe a
    partially written file.
    """
    safe_mkdir_for(filename)
    tmp = f"{filename}.tmp.{os.getpid()}"
    with open(tmp, mode) as f:
        f.write(payload)
    os.replace(tmp, filename)


def maybe_read_file(filename: str | Path) -> str | None:
    """Read and return the contents of a file, or None if it doesn't exist."""
    try:
        with open(filename) as f:
            return f.read()
    except FileNotFoundError:
        return None


def walk_files(directory: str | Path) -> Iterator[Path]:
    """Yield every regular file under the given directory, recursively, in sorted order.

    Directory symlinks are not followed.
    """
    for dirpath, dirnames, filenames in os.walk(directory):
        dirnames.sort()
        for filename in sorted(filenames):
            path = Path(dirpath, filename)
            if path.is_file():
                yield path
