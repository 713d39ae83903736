"""Configure Runner.

Composes the vendored library's configure flags from the build
configuration and runs its configure script in the staged tree.

Design:
    - Flags are built fresh per run from BuildConfig (ConfigureFlagBuilder)
    - External codec integration splices its pkg-config directory ahead of
      PKG_CONFIG_PATH and registers its link directives
    - One signature-matched retry: a configure failure whose output reports
      a missing or outdated assembler is retried once with
      --disable-x86asm; every other failure aborts

Known limitation: the retry trigger matches configure's human-readable
output text. A change in that wording silently turns the recoverable case
into a hard failure.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from ..config.environment import BuildConfig
from ..errors import BuildEnvironmentError, ExternalToolFailure
from .link_descriptor import Directive, DirectiveWriter
from .process import ProcessResult, ProcessRunner

BASELINE_FLAGS = ("--disable-programs", "--disable-doc", "--disable-autodetect")
GPL_FLAG = "--enable-gpl"
X264_FLAG = "--enable-libx264"
X264_LIB = "x264"
DEBUG_FLAGS = ("--disable-optimizations", "--enable-debug", "--disable-stripping")
DISABLE_ASM_FLAG = "--disable-x86asm"

MISSING_ASSEMBLER_SIGNATURE = "nasm/yasm not found or too old"


class ConfigureError(ExternalToolFailure):
    """Raised when the configure step fails."""
    pass


class FailureSignature(Enum):
    """Classification of a failed configure run."""

    MISSING_ASSEMBLER = "missing_assembler"
    UNCLASSIFIED = "unclassified"


def classify_configure_failure(result: ProcessResult) -> FailureSignature:
    """Match captured configure output against the one recoverable failure."""
    output = (result.stdout + "\n" + result.stderr).lower()
    if MISSING_ASSEMBLER_SIGNATURE in output:
        return FailureSignature.MISSING_ASSEMBLER
    return FailureSignature.UNCLASSIFIED


@dataclass
class ConfigurePlan:
    """Flags, environment and directives for one configure run."""

    flags: List[str]
    pkg_config_path: Optional[str] = None
    directives: List[Directive] = field(default_factory=list)

    def env(self) -> Dict[str, str]:
        if self.pkg_config_path is None:
            return {}
        return {"PKG_CONFIG_PATH": self.pkg_config_path}


@dataclass
class ConfigureOutcome:
    """Result of the configure step."""

    flags: List[str]
    attempts: int
    result: ProcessResult


class ConfigureFlagBuilder:
    """Builds the configure flag set from a BuildConfig."""

    def __init__(self, config: BuildConfig):
        self.config = config

    def build(self) -> ConfigurePlan:
        """Compose configure flags.

        Returns:
            ConfigurePlan with flags, pkg-config path and codec directives

        Raises:
            BuildEnvironmentError: If codec integration is enabled but its
                link or pkg-config directory is not provided
        """
        plan = ConfigurePlan(
            flags=list(BASELINE_FLAGS),
            pkg_config_path=self.config.pkg_config_path
        )

        if self.config.gpl:
            plan.flags.append(GPL_FLAG)

        if self.config.x264:
            self._add_x264(plan)

        # Shorter compile cycles for unoptimized debug builds
        if self.config.is_debug and self.config.opt_level_eq(0):
            plan.flags.extend(DEBUG_FLAGS)

        return plan

    def _add_x264(self, plan: ConfigurePlan) -> None:
        if self.config.x264_libs is None:
            raise BuildEnvironmentError("DEP_X264_LIBS", "required when x264 is enabled")
        if self.config.x264_pkgconfig is None:
            raise BuildEnvironmentError("DEP_X264_PKGCONFIG", "required when x264 is enabled")

        plan.flags.append(X264_FLAG)
        plan.directives.append(Directive.link_search(Path(self.config.x264_libs)))
        plan.directives.append(Directive.link_lib(X264_LIB))

        # x264's pkg-config directory takes precedence on name collisions
        if plan.pkg_config_path:
            plan.pkg_config_path = os.pathsep.join(
                [self.config.x264_pkgconfig, plan.pkg_config_path]
            )
        else:
            plan.pkg_config_path = self.config.x264_pkgconfig


class ConfigureRunner:
    """Runs the vendored configure script with one signature-matched retry."""

    def __init__(
        self,
        config: BuildConfig,
        runner: ProcessRunner,
        writer: DirectiveWriter
    ):
        self.config = config
        self.runner = runner
        self.writer = writer

    def _configure(self, staged_root: Path, plan: ConfigurePlan) -> ProcessResult:
        cmd = ["bash", "./configure"] + plan.flags
        logging.info(f"Configuring with: {' '.join(plan.flags)}")
        return self.runner.run(cmd, cwd=staged_root, env=plan.env())

    def run(self, staged_root: Path) -> ConfigureOutcome:
        """Run configure in the staged tree.

        Args:
            staged_root: Staged source root containing ./configure

        Returns:
            ConfigureOutcome with the final flags and attempt count

        Raises:
            BuildEnvironmentError: If required codec variables are missing
            ConfigureError: If configure fails and cannot be recovered
        """
        plan = ConfigureFlagBuilder(self.config).build()
        self.writer.emit_all(plan.directives)

        result = self._configure(staged_root, plan)
        if result.success:
            return ConfigureOutcome(flags=plan.flags, attempts=1, result=result)

        signature = classify_configure_failure(result)
        if signature is not FailureSignature.MISSING_ASSEMBLER:
            raise ConfigureError("configure failed", result)

        logging.warning(
            f"configure reported '{MISSING_ASSEMBLER_SIGNATURE}', "
            f"retrying with {DISABLE_ASM_FLAG}"
        )
        plan.flags.append(DISABLE_ASM_FLAG)

        result = self._configure(staged_root, plan)
        if not result.success:
            raise ConfigureError(
                f"configure failed (retried with {DISABLE_ASM_FLAG})", result
            )

        return ConfigureOutcome(flags=plan.flags, attempts=2, result=result)
