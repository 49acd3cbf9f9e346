# Copyright 2024 Pants project contributors (see CONTRIBUTORS.md).
# Licensed under the Apache License, Version 2.0 (see LICENSE).

from __future__ import annotations

import logging
from pathlib import Path

from thriftgen.base.exceptions import TaskError
from thriftgen.fs.paths import PathLike, to_path
from thriftgen.invalidation.build_invalidator import BuildInvalidator, InputSnapshot
from thriftgen.source.resolver import SourceResolver
from thriftgen.thrift.compile_config import (
    DEFAULT_THRIFT_EXECUTABLE,
    GEN_JAVA_DIRNAME,
    CompileConfig,
)
from thriftgen.thrift.driver import FULL, CompilationDriver
from thriftgen.thrift.process import ProcessRunner

logger = logging.getLogger(__name__)


class JavaCompileStep:
    """A java compilation step that consumes the generated java sources.

    Its source directories are kept in insertion order, without duplicates.
    """

    def __init__(self, source_dirs: tuple[Path, ...] = ()) -> None:
        self._source_dirs: dict[Path, None] = dict.fromkeys(source_dirs)
        self._dependencies: list[object] = []

    @property
    def source_dirs(self) -> tuple[Path, ...]:
        return tuple(self._source_dirs)

    @property
    def dependencies(self) -> tuple[object, ...]:
        return tuple(self._dependencies)

    def add_source_dir(self, source_dir: Path) -> None:
        self._source_dirs[source_dir] = None

    def remove_source_dir(self, source_dir: Path) -> None:
        self._source_dirs.pop(source_dir, None)

    def depends_on(self, step: object) -> None:
        if step not in self._dependencies:
            self._dependencies.append(step)


class CompileThriftTask:
    """The configuration-time definition of a thrift compile step.

    Setters are only expected to be called before `execute`, which snapshots the settings into an
    immutable CompileConfig.

    When a companion JavaCompileStep is given, it gets a `java` generator by default, depends on
    this task, and is kept pointed at the directory the java sources are generated into: any change
    of `output_dir` or `create_gen_folder` swaps the old directory for the new one in its sources.
    """

    def __init__(self, base_dir: PathLike, *, companion: JavaCompileStep | None = None) -> None:
        self._base_dir = Path(base_dir)
        self._companion = companion

        self._executable = DEFAULT_THRIFT_EXECUTABLE
        self._output_dir: Path | None = None
        self._create_gen_folder = False
        self._source_files: dict[Path, None] = {}
        self._source_dirs: dict[Path, None] = {}
        self._include_dirs: dict[Path, None] = {}
        self._generators: dict[str, str] = {}

        self.recurse = False
        self.nowarn = False
        self.strict = False
        self.verbose = False
        self.debug = False
        self.allow_neg_keys = False
        self.allow_64bit_consts = False

        if companion is not None:
            self._generators["java"] = ""
            companion.depends_on(self)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    @property
    def companion(self) -> JavaCompileStep | None:
        return self._companion

    @property
    def executable(self) -> str:
        return self._executable

    @executable.setter
    def executable(self, value: object) -> None:
        self._executable = str(value)

    @property
    def output_dir(self) -> Path | None:
        return self._output_dir

    @output_dir.setter
    def output_dir(self, value: PathLike) -> None:
        output_dir = to_path(value, self._base_dir)
        if output_dir == self._output_dir:
            return
        old_output_dir = self.current_output_dir()
        self._output_dir = output_dir
        self._republish_output_dir(old_output_dir)

    @property
    def create_gen_folder(self) -> bool:
        return self._create_gen_folder

    @create_gen_folder.setter
    def create_gen_folder(self, value: bool) -> None:
        if value == self._create_gen_folder:
            return
        old_output_dir = self.current_output_dir()
        self._create_gen_folder = value
        self._republish_output_dir(old_output_dir)

    @property
    def source_files(self) -> tuple[Path, ...]:
        return tuple(self._source_files)

    @property
    def source_dirs(self) -> tuple[Path, ...]:
        return tuple(self._source_dirs)

    @property
    def include_dirs(self) -> tuple[Path, ...]:
        return tuple(self._include_dirs)

    @property
    def generators(self) -> dict[str, str]:
        return dict(self._generators)

    def add_source_files(self, *items: PathLike) -> None:
        self._source_files.update((to_path(item, self._base_dir), None) for item in items)

    def add_source_dirs(self, *items: PathLike) -> None:
        self._source_dirs.update((to_path(item, self._base_dir), None) for item in items)

    def add_include_dirs(self, *items: PathLike) -> None:
        self._include_dirs.update((to_path(item, self._base_dir), None) for item in items)

    def generator(self, name: object, *options: object) -> None:
        """Enable a generator, with its options joined as `opt1,opt2`.

        Re-registering a generator replaces its options, keeping its original position.
        """
        self._generators[str(name).strip()] = ",".join(str(option).strip() for option in options)

    def current_output_dir(self) -> Path | None:
        """Where java sources are generated: under `gen-java` in create-gen-folder mode."""
        if self._output_dir is None:
            return None
        if self._create_gen_folder:
            return self._output_dir / GEN_JAVA_DIRNAME
        return self._output_dir

    def _republish_output_dir(self, old_output_dir: Path | None) -> None:
        if self._companion is None:
            return
        # The companion compiles what the java generator emits, so keep it enabled.
        self._generators.setdefault("java", "")
        new_output_dir = self.current_output_dir()
        if new_output_dir == old_output_dir:
            return
        if old_output_dir is not None:
            self._companion.remove_source_dir(old_output_dir)
        if new_output_dir is not None:
            logger.debug(f"Adding {new_output_dir} to the java source directories.")
            self._companion.add_source_dir(new_output_dir)

    def config(self) -> CompileConfig:
        """Snapshot the current settings.

        :raises: :class:`thriftgen.base.exceptions.TaskError` if no output directory is configured.
        """
        if self._output_dir is None:
            raise TaskError("No thrift output directory was configured.")
        return CompileConfig(
            output_dir=self._output_dir,
            executable=self._executable,
            source_files=self.source_files,
            source_dirs=self.source_dirs,
            include_dirs=self.include_dirs,
            generators=tuple(self._generators.items()),
            recurse=self.recurse,
            nowarn=self.nowarn,
            strict=self.strict,
            verbose=self.verbose,
            debug=self.debug,
            allow_neg_keys=self.allow_neg_keys,
            allow_64bit_consts=self.allow_64bit_consts,
            create_gen_folder=self._create_gen_folder,
        )

    def execute(
        self,
        invalidator: BuildInvalidator | None = None,
        *,
        runner: ProcessRunner | None = None,
    ) -> tuple[Path, ...]:
        """Compile whatever is out of date, then record the inputs as up to date.

        Without an invalidator every run is a full rebuild. Nothing is recorded if compilation
        fails, so the next run retries the same work.

        :returns: The sources that were compiled.
        """
        config = self.config()
        if config.allow_neg_keys or config.allow_64bit_consts:
            logger.debug(
                "The allow_neg_keys and allow_64bit_consts settings have no thrift compiler switch "
                "and are ignored."
            )
        driver = CompilationDriver(config, runner=runner, resolver=SourceResolver(self._base_dir))
        if invalidator is None:
            return driver.run(FULL)

        snapshot = InputSnapshot.capture(config)
        compiled = driver.run(invalidator.changes(snapshot))
        invalidator.update(snapshot)
        return compiled
