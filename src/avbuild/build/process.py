"""External process execution.

Every external invocation in the pipeline (source copy, configure, make,
bindgen, cc, ar) goes through ProcessRunner.run so that output capture,
environment handling and error reporting exist in exactly one place.

Design:
    - Wraps subprocess.run with captured text output
    - Child environment is the BuildConfig snapshot, never os.environ
    - PATH is always set explicitly on the child environment
    - Launch failures (missing executable, timeout) become a failed
      ProcessResult instead of leaking OSError/TimeoutExpired
"""

import logging
import shlex
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence


@dataclass
class ProcessResult:
    """Result of one external command."""

    returncode: int
    stdout: str
    stderr: str
    command: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def combined_output(self) -> str:
        """Standard output followed by standard error."""
        return self.stdout + self.stderr

    @property
    def command_line(self) -> str:
        return shlex.join(self.command)


class ProcessRunner:
    """Runs external commands against a fixed environment snapshot."""

    def __init__(
        self,
        environ: Mapping[str, str],
        search_path: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        """Initialize process runner.

        Args:
            environ: Environment snapshot handed to every child process
            search_path: Value for PATH in the child environment
            timeout: Optional per-command timeout in seconds
        """
        self.environ = dict(environ)
        if search_path is not None:
            self.environ["PATH"] = search_path
        self.timeout = timeout

    def run(
        self,
        cmd: Sequence[str],
        cwd: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None
    ) -> ProcessResult:
        """Run a command to completion and capture its output.

        Args:
            cmd: Command and arguments
            cwd: Working directory for the command
            env: Extra variables layered over the snapshot environment

        Returns:
            ProcessResult with exit status and both output streams
        """
        command = [str(part) for part in cmd]
        child_env: Dict[str, str] = dict(self.environ)
        if env:
            child_env.update(env)

        logging.debug(f"Running: {shlex.join(command)} (cwd={cwd})")

        try:
            completed = subprocess.run(
                command,
                cwd=str(cwd) if cwd is not None else None,
                env=child_env,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired as e:
            return ProcessResult(
                returncode=-1,
                stdout=_as_text(e.stdout),
                stderr=_as_text(e.stderr) + f"\ntimed out after {self.timeout}s",
                command=command
            )
        except OSError as e:
            return ProcessResult(
                returncode=-1,
                stdout="",
                stderr=f"failed to launch {command[0]}: {e}",
                command=command
            )

        return ProcessResult(
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
            command=command
        )


def _as_text(data) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
