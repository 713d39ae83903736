"""Error taxonomy for avbuild.

Every fatal condition in the pipeline is one of three kinds:

    ConfigurationError     - malformed or stale declarative input
                             (header list, project config, missing sources)
    ExternalToolFailure    - an external command exited unsuccessfully
    BuildEnvironmentError  - a required environment value is absent

Component-specific failures (ConfigureError, MakeError, ...) subclass these
and live next to the component that raises them.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .build.process import ProcessResult


class AvbuildError(Exception):
    """Base exception for all avbuild pipeline errors."""
    pass


class ConfigurationError(AvbuildError):
    """Raised when declarative build input is malformed or stale."""
    pass


class BuildEnvironmentError(AvbuildError):
    """Raised when a required environment variable is absent."""

    def __init__(self, variable: str, reason: str = ""):
        self.variable = variable
        message = f"Required environment variable {variable} is not set"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class ExternalToolFailure(AvbuildError):
    """Raised when an external tool exits unsuccessfully.

    The full captured output of the failing invocation is kept on the
    exception and rendered into its message so the top-level runner can
    report it verbatim.
    """

    def __init__(self, summary: str, result: Optional["ProcessResult"] = None):
        self.summary = summary
        self.result = result
        super().__init__(self._format())

    def _format(self) -> str:
        if self.result is None:
            return self.summary

        lines = [self.summary]
        if self.result.command:
            lines.append(f"command: {self.result.command_line}")
        lines.append(f"exit status: {self.result.returncode}")
        lines.append(f"* stderr:\n{self.result.stderr}")
        lines.append(f"* stdout:\n{self.result.stdout}")
        return "\n".join(lines)
