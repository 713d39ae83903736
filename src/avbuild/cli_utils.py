"""CLI utility functions for avbuild.

This module provides common utilities used by the entry point:
- Logging setup (stderr only; stdout is reserved for directives)
- Error handling and formatting
"""

import logging
import os
import sys
from typing import Mapping, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
VERBOSE_VAR = "AVBUILD_VERBOSE"


def setup_logging(environ: Optional[Mapping[str, str]] = None) -> None:
    """Setup logging for a pipeline run.

    Logs go to stderr at INFO, or DEBUG when AVBUILD_VERBOSE=1.
    """
    environ = os.environ if environ is None else environ
    level = logging.DEBUG if environ.get(VERBOSE_VAR) == "1" else logging.INFO

    logger = logging.getLogger()
    logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str) -> None:
        """Print formatted error message to stderr.

        Args:
            title: Error title (e.g., "Build failed")
            message: Error message details (full captured tool output)
        """
        print(file=sys.stderr)
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}", file=sys.stderr)
        print(file=sys.stderr)
        print(message, file=sys.stderr)

    @staticmethod
    def print_success(message: str) -> None:
        """Print formatted success message to stderr.

        Args:
            message: Success message to display
        """
        print(f"{ErrorFormatter.GREEN}✓ {message}{ErrorFormatter.RESET}", file=sys.stderr)
