"""Compiler Runner.

Runs the vendored library's Makefile over the staged tree. Parallelism is
delegated to make; the orchestrator only supplies the job count.
"""

import logging
from pathlib import Path
from typing import Optional

import psutil

from ..config.environment import BuildConfig
from ..errors import ExternalToolFailure
from .process import ProcessResult, ProcessRunner


class MakeError(ExternalToolFailure):
    """Raised when the vendored build fails."""
    pass


def detect_jobs() -> int:
    """Logical processor count, falling back to 1 when undetectable."""
    return psutil.cpu_count(logical=True) or 1


class MakeRunner:
    """Runs `make -C <root> -f Makefile -j<N>` without retry."""

    def __init__(
        self,
        config: BuildConfig,
        runner: ProcessRunner,
        jobs: Optional[int] = None
    ):
        """Initialize make runner.

        Args:
            config: Build configuration snapshot (provides the make executable)
            runner: Process runner
            jobs: Parallel job count (defaults to logical CPU count)
        """
        self.config = config
        self.runner = runner
        self.jobs = jobs if jobs is not None else detect_jobs()

    def run(self, staged_root: Path) -> ProcessResult:
        """Build the staged tree.

        Raises:
            MakeError: On any nonzero exit, with output attached verbatim
        """
        cmd = [
            self.config.make,
            "-C", str(staged_root),
            "-f", "Makefile",
            f"-j{self.jobs}",
        ]
        logging.info(f"Building {staged_root} with {self.jobs} jobs")
        result = self.runner.run(cmd)
        if not result.success:
            raise MakeError(f"make -C {staged_root} failed", result)
        return result
