# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import json
import os
import stat
import sys
from dataclasses import dataclass
from pathlib import Path
from textwrap import dedent

import pytest

_FAKE_THRIFT_BODY = dedent(
    """\
    import json
    import sys
    from pathlib import Path

    here = Path(__file__).parent
    args = sys.argv[1:]
    with open(here / "invocations.jsonl", "a") as log:
        log.write(json.dumps(args) + "\\n")

    source = Path(args[-1])
    fail_list = here / "fail"
    if fail_list.exists() and source.name in fail_list.read_text().split():
        print(f"[ERROR:{source}] fake thrift refused to compile", file=sys.stderr)
        sys.exit(2)

    flag = "-out" if "-out" in args else "-o"
    output_dir = Path(args[args.index(flag) + 1])
    (output_dir / f"{source.stem}.java").write_text(f"// generated from {source}\\n")
    """
)


@dataclass(frozen=True)
class FakeThrift:
    """An executable standing in for the thrift compiler.

    Every invocation is logged, and a `<stem>.java` file is written into the output directory.
    """

    path: Path

    @property
    def _log(self) -> Path:
        return self.path.parent / "invocations.jsonl"

    def invocations(self) -> list[list[str]]:
        if not self._log.exists():
            return []
        return [json.loads(line) for line in self._log.read_text().splitlines()]

    def sources(self) -> list[str]:
        return [Path(argv[-1]).name for argv in self.invocations()]

    def fail_on(self, *names: str) -> None:
        (self.path.parent / "fail").write_text("\n".join(names))

    def reset(self) -> None:
        for name in ("invocations.jsonl", "fail"):
            (self.path.parent / name).unlink(missing_ok=True)


@pytest.fixture
def fake_thrift(tmp_path_factory: pytest.TempPathFactory) -> FakeThrift:
    bindir = tmp_path_factory.mktemp("fake_thrift")
    path = bindir / "thrift"
    path.write_text(f"#!{sys.executable}\n{_FAKE_THRIFT_BODY}")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    assert os.access(path, os.X_OK)
    return FakeThrift(path)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo[None]):
    outcome = yield
    rep = outcome.get_result()

    if (
        item.config.getoption("--noskip")
        and rep.skipped
        and (call.excinfo and call.excinfo.errisinstance(pytest.skip.Exception))
        and "no_error_if_skipped" not in item.keywords
    ):
        rep.outcome = "failed"
        assert call.excinfo is not None
        r = call.excinfo._getreprcrash()
        rep.longrepr = f"Forbidden skipped test - {r.message}"


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "no_error_if_skipped: Don't error if this test is skipped when using --noskip"
    )


def pytest_addoption(parser):
    parser.addoption(
        "--noskip", action="store_true", default=False, help="Treat skipped tests as errors"
    )
