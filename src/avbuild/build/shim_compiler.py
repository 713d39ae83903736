"""Shim Compiler.

Compiles the small local adapter sources (cbits) against the staged tree's
headers into one static archive and registers it with the consuming build
system. Always runs; it is cheap next to the vendored build.
"""

import logging
from pathlib import Path
from typing import Dict, List, Sequence

from ..config.environment import BuildConfig
from ..errors import ConfigurationError
from .archive_creator import ArchiveCreator
from .compilation_executor import CompilationExecutor
from .link_descriptor import Directive, DirectiveWriter
from .process import ProcessRunner


class ShimCompiler:
    """Builds lib<name>.a from the shim sources."""

    def __init__(
        self,
        config: BuildConfig,
        runner: ProcessRunner,
        writer: DirectiveWriter,
        sources: Sequence[Path],
        archive_name: str,
        out_dir: Path
    ):
        self.writer = writer
        self.sources = list(sources)
        self.archive_name = archive_name
        self.out_dir = out_dir
        self.executor = CompilationExecutor(config, runner, out_dir / archive_name)
        self.archiver = ArchiveCreator(config, runner)

    def _check_object_names(self) -> None:
        """Objects are named after source stems, so stems must be unique."""
        seen: Dict[str, Path] = {}
        for source in self.sources:
            if source.stem in seen:
                raise ConfigurationError(
                    f"Shim sources {seen[source.stem]} and {source} "
                    f"would both compile to {source.stem}.o"
                )
            seen[source.stem] = source

    @property
    def archive_path(self) -> Path:
        return self.out_dir / f"lib{self.archive_name}.a"

    def compile(self, staged_root: Path) -> Path:
        """Compile and archive the shim sources.

        Args:
            staged_root: Staged source root, used as the include path

        Returns:
            Path to the shim archive

        Raises:
            ConfigurationError: If two shim sources share a file stem
            CompilationError: If any source fails to compile
            ArchiveError: If archiving fails
        """
        self._check_object_names()

        objects: List[Path] = []
        for source in self.sources:
            objects.append(self.executor.compile_source(source, [staged_root]))

        archive = self.archiver.create_archive(self.archive_path, objects)

        self.writer.emit(Directive.link_search(self.out_dir))
        self.writer.emit(Directive.link_lib(self.archive_name))

        logging.info(f"Shim archive ready: {archive}")
        return archive
