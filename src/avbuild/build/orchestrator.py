"""
Build orchestration for avbuild.

This module coordinates the entire pipeline, from the environment snapshot
to the final shim archive:
- Artifact cache check (reuse of previously built static archives)
- Source staging (pristine tree -> OUT_DIR working copy)
- Configure (with the one signature-matched retry)
- Parallel make
- Link descriptor emission
- Binding generation
- Shim compilation

Every step raises on failure; run() maps the first failure to a failed
PipelineResult and does not execute any later step.
"""

import logging
import time
import traceback
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..config.environment import BuildConfig
from ..config.layout import IGNORED_MACROS, SEARCH_PATHS, STATIC_LIBS, BuildLayout
from ..config.project_config import ProjectConfig
from ..errors import AvbuildError
from .artifact_cache import ArtifactCacheChecker
from .bindings import BindingGenerator
from .configure_runner import ConfigureRunner
from .link_descriptor import DirectiveWriter, LinkDescriptorEmitter
from .make_runner import MakeRunner
from .process import ProcessRunner
from .shim_compiler import ShimCompiler
from .source_stager import SourceStager

TOTAL_PHASES = 7


@dataclass
class PipelineResult:
    """Result of a complete pipeline run."""

    success: bool
    message: str
    directives: List[str] = field(default_factory=list)
    build_skipped: bool = False
    bindings_skipped: bool = False
    bindings_path: Optional[Path] = None
    shim_archive: Optional[Path] = None
    build_time: float = 0.0


class BuildOrchestrator:
    """
    Orchestrates the vendored library build and binding generation.

    Example usage:
        config = BuildConfig.from_environ()
        orchestrator = BuildOrchestrator(config, project_dir=Path.cwd())
        result = orchestrator.run()
        if not result.success:
            print(result.message, file=sys.stderr)
    """

    def __init__(
        self,
        config: BuildConfig,
        project_dir: Path,
        project: Optional[ProjectConfig] = None,
        writer: Optional[DirectiveWriter] = None,
        runner: Optional[ProcessRunner] = None,
        jobs: Optional[int] = None
    ):
        """
        Initialize build orchestrator.

        Args:
            config: Environment snapshot taken at pipeline start
            project_dir: Project root holding the pristine sources, headers and shims
            project: Project layout settings (loaded from avbuild.ini if None)
            writer: Directive writer (stdout if None)
            runner: Process runner (built from the config snapshot if None)
            jobs: Parallel make job count (logical CPU count if None)
        """
        self.config = config
        self.project = project if project is not None else ProjectConfig.load(project_dir)
        self.layout = BuildLayout.resolve(config, self.project, project_dir)
        self.writer = writer if writer is not None else DirectiveWriter(
            prefix=self.project.directive_prefix
        )
        self.runner = runner if runner is not None else ProcessRunner(
            config.environ, search_path=config.search_path
        )
        self.jobs = jobs

    def _phase(self, number: int, title: str) -> None:
        logging.info(f"[{number}/{TOTAL_PHASES}] {title}")

    def run(self) -> PipelineResult:
        """
        Execute the complete pipeline.

        Returns:
            PipelineResult; on failure, message carries the full diagnostic
            text of the failing step
        """
        start_time = time.time()
        build_skipped = False

        try:
            layout = self.layout
            layout.out_dir.mkdir(parents=True, exist_ok=True)

            # Phase 1: Artifact cache
            self._phase(1, "Checking artifact cache...")
            decision = ArtifactCacheChecker(STATIC_LIBS).check(layout.staged_root, self.config)
            build_skipped = decision.skip_build

            # Phase 2: Source staging
            self._phase(2, "Staging source tree...")
            SourceStager(self.runner).stage(
                layout.pristine_root, layout.staged_root, decision.skip_build
            )

            if not decision.skip_build:
                # Phase 3: Configure
                self._phase(3, "Configuring...")
                outcome = ConfigureRunner(self.config, self.runner, self.writer).run(
                    layout.staged_root
                )
                logging.info(f"Configure succeeded after {outcome.attempts} attempt(s)")

                # Phase 4: Compile
                self._phase(4, "Compiling vendored libraries...")
                MakeRunner(self.config, self.runner, jobs=self.jobs).run(layout.staged_root)
            else:
                self._phase(3, "Configure skipped (cached artifacts)")
                self._phase(4, "Compile skipped (cached artifacts)")

            # Phase 5: Link descriptor
            self._phase(5, "Emitting link descriptor...")
            LinkDescriptorEmitter(STATIC_LIBS, SEARCH_PATHS, self.writer).emit(
                layout.staged_root
            )

            # Phase 6: Bindings
            self._phase(6, "Generating bindings...")
            bindings = BindingGenerator(
                self.config,
                self.runner,
                self.writer,
                IGNORED_MACROS,
                layout.bindings_file
            ).generate(layout.staged_root, layout.headers_file)

            # Phase 7: Shims
            self._phase(7, "Compiling shims...")
            shim_archive = ShimCompiler(
                self.config,
                self.runner,
                self.writer,
                layout.shim_sources,
                layout.shim_archive,
                layout.out_dir
            ).compile(layout.staged_root)

            build_time = time.time() - start_time
            logging.info(f"Build complete in {build_time:.2f}s")

            return PipelineResult(
                success=True,
                message="Build successful",
                directives=self.writer.rendered(),
                build_skipped=build_skipped,
                bindings_skipped=bindings.skipped,
                bindings_path=bindings.output_path,
                shim_archive=shim_archive,
                build_time=build_time
            )

        except AvbuildError as e:
            return PipelineResult(
                success=False,
                message=str(e),
                directives=self.writer.rendered(),
                build_skipped=build_skipped,
                build_time=time.time() - start_time
            )
        except Exception as e:
            return PipelineResult(
                success=False,
                message=f"Unexpected error: {e}\n\n{traceback.format_exc()}",
                directives=self.writer.rendered(),
                build_skipped=build_skipped,
                build_time=time.time() - start_time
            )
