"""
Entry point for avbuild.

avbuild takes no arguments. It is invoked by the consuming build system
with the build configuration in the environment and the project
directory as the working directory. Directives are written to stdout;
progress and diagnostics go to stderr.
"""

import sys
from pathlib import Path
from typing import Mapping, Optional

from avbuild.build import BuildOrchestrator
from avbuild.cli_utils import ErrorFormatter, setup_logging
from avbuild.config import BuildConfig
from avbuild.errors import AvbuildError


def run(environ: Optional[Mapping[str, str]] = None, project_dir: Optional[Path] = None) -> int:
    """Run the pipeline once and return the process exit status."""
    try:
        config = BuildConfig.from_environ(environ)
        orchestrator = BuildOrchestrator(config, project_dir or Path.cwd())
    except AvbuildError as e:
        ErrorFormatter.print_error("Build configuration error", str(e))
        return 1

    result = orchestrator.run()

    if not result.success:
        ErrorFormatter.print_error("Build failed", result.message)
        return 1

    ErrorFormatter.print_success(f"avbuild finished in {result.build_time:.2f}s")
    return 0


def main() -> None:
    """Console script entry point."""
    setup_logging()
    sys.exit(run())


if __name__ == "__main__":
    main()
