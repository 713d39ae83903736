"""Compilation Executor.

This module handles compiling individual C shim sources via the process
primitive with support for response files and proper error handling.

Design:
    - Builds `cc -c` commands from BuildConfig (optimization, debug info)
    - Generates response files for include paths (avoids command line length limits)
    - Provides clear error messages for compilation failures
"""

import logging
from pathlib import Path
from typing import List, Optional

from ..config.environment import BuildConfig
from ..errors import ExternalToolFailure
from .process import ProcessRunner


class CompilationError(ExternalToolFailure):
    """Raised when compilation operations fail."""
    pass


def quote_response_arg(arg: str) -> str:
    """Quote one argument for a GCC/Clang @file response file.

    The compiler splits response files on unquoted whitespace.
    """
    escaped = arg.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class CompilationExecutor:
    """Executes compilation commands with response file support.

    This class handles:
    - Running compiler commands through the process runner
    - Generating response files for include paths
    - Handling compilation errors with clear messages
    """

    def __init__(self, config: BuildConfig, runner: ProcessRunner, build_dir: Path):
        """Initialize compilation executor.

        Args:
            config: Build configuration snapshot (compiler, opt level, profile)
            runner: Process runner
            build_dir: Build directory for object files and response files
        """
        self.config = config
        self.runner = runner
        self.build_dir = build_dir

    def compile_flags(self) -> List[str]:
        """Get compilation flags derived from the build configuration.

        Returns:
            List of compiler flags
        """
        flags = ["-fPIC"]
        if self.config.opt_level:
            flags.append(f"-O{self.config.opt_level}")
        if self.config.is_debug:
            flags.append("-g")
        return flags

    def compile_source(
        self,
        source_path: Path,
        include_paths: List[Path],
        output_path: Optional[Path] = None
    ) -> Path:
        """Compile a single source file.

        Args:
            source_path: Path to source file
            include_paths: Include directory paths
            output_path: Path for output object file (defaults to build_dir/<stem>.o)

        Returns:
            Path to generated object file

        Raises:
            CompilationError: If compilation fails
        """
        if not source_path.exists():
            raise CompilationError(f"Source file not found: {source_path}")

        if output_path is None:
            output_path = self.build_dir / f"{source_path.stem}.o"

        # Ensure output directory exists
        output_path.parent.mkdir(parents=True, exist_ok=True)

        include_flags = [
            quote_response_arg(f"-I{str(inc).replace(chr(92), '/')}") for inc in include_paths
        ]
        response_file = self._write_response_file(include_flags)

        cmd = [self.config.cc]
        cmd.extend(self.compile_flags())
        cmd.append(f"@{response_file}")
        cmd.extend(["-c", str(source_path)])
        cmd.extend(["-o", str(output_path)])

        logging.info(f"Compiling {source_path.name}...")

        result = self.runner.run(cmd)
        if not result.success:
            raise CompilationError(f"Compilation failed for {source_path.name}", result)

        if result.stderr:
            logging.warning(result.stderr.rstrip())

        return output_path

    def _write_response_file(self, include_flags: List[str]) -> Path:
        """Write include paths to response file.

        Args:
            include_flags: List of -I include flags

        Returns:
            Path to generated response file
        """
        response_file = self.build_dir / "includes.rsp"
        response_file.parent.mkdir(parents=True, exist_ok=True)

        with open(response_file, "w", encoding="utf-8") as f:
            f.write("\n".join(include_flags))

        return response_file
