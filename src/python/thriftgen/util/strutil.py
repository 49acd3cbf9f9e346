# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import hashlib
import json
import re
import shlex
from typing import Any, Iterable


def safe_shlex_join(arg_list: Iterable[str]) -> str:
    """Join a list of strings into a shell-quoted command line, suitable for logging."""
    return " ".join(shlex.quote(arg) for arg in arg_list)


def pluralize(count: int, item_type: str, include_count: bool = True) -> str:
    """Pluralizes the item_type if the count does not equal one.

    For example `pluralize(1, 'source')` returns '1 source',
    while `pluralize(0, 'source') returns '0 sources'.
    """

    def pluralize_string(x: str) -> str:
        if x.endswith("s"):
            return x + "es"
        elif x.endswith("y"):
            return x[:-1] + "ies"
        else:
            return x + "s"

    pluralized_item = item_type if count == 1 else pluralize_string(item_type)
    if not include_count:
        return pluralized_item
    return f"{count} {pluralized_item}"


_super_space_re = re.compile(r"(\S)  +(\S)")
_more_than_2_newlines = re.compile(r"\n{2}\n+")
_leading_whitespace_re = re.compile(r"(^[ ]*)(?:[^ \n])", re.MULTILINE)


def softwrap(text: str) -> str:
    """Turns a multiline-ish string into a softwrapped string.

    The text is dedented, runs of spaces inside a sentence are squashed and single newlines are
    joined into one long line. Double newlines and indented lines are preserved.
    """
    if not text:
        return text
    if text[0] == "\n":
        text = text[1:]

    text = _more_than_2_newlines.sub("\n\n", text)
    margin = _leading_whitespace_re.search(text)
    if margin:
        text = re.sub(r"(?m)^" + margin[1], "", text)

    lines = text.splitlines(keepends=True)
    result_strs = []
    for i, line in enumerate(lines):
        line = _super_space_re.sub(r"\1 \2", line)
        next_line = lines[i + 1] if i + 1 < len(lines) else ""
        if "\n" in (line, next_line) or line.startswith(" ") or next_line.startswith(" "):
            result_strs.append(line)
        else:
            result_strs.append(line.rstrip())
            result_strs.append(" ")

    return "".join(result_strs).rstrip()


def stable_hash(value: Any, *, name: str = "sha1") -> str:
    """Attempts to return a stable hash of the value stable across processes.

    The value is rendered as canonical JSON, so it must be composed of JSON-compatible types.
    """
    return hashlib.new(
        name,
        json.dumps(value, sort_keys=True, separators=(",", ":")).encode("utf-8"),
    ).hexdigest()
