"""Artifact cache checking.

Decides whether the static archives from a previous vendored build can be
reused. The reuse signal is artifact existence only; no fingerprint of the
configuration that produced them is recorded or compared. Changing feature
toggles between runs without clearing OUT_DIR therefore reuses archives
built under the old toggles.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence, Tuple

from ..config.environment import BuildConfig


@dataclass
class CacheDecision:
    """Outcome of an artifact cache check."""

    skip_build: bool
    reason: str
    missing: List[Path] = field(default_factory=list)


class ArtifactCacheChecker:
    """Checks prior vendored build outputs for reuse."""

    def __init__(self, static_libs: Sequence[Tuple[str, str]]):
        """Initialize cache checker.

        Args:
            static_libs: (library name, artifact path relative to staged root) pairs
        """
        self.static_libs = tuple(static_libs)

    def expected_artifacts(self, staged_root: Path) -> List[Path]:
        return [staged_root / rel_path for _, rel_path in self.static_libs]

    def missing_artifacts(self, staged_root: Path) -> List[Path]:
        return [path for path in self.expected_artifacts(staged_root) if not path.exists()]

    def check(self, staged_root: Path, config: BuildConfig) -> CacheDecision:
        """Decide whether the vendored build can be skipped.

        Skipping requires that every artifact exists, the profile is not
        release, and no force-rebuild override is set.

        Args:
            staged_root: Staged source root holding the archives
            config: Build configuration snapshot

        Returns:
            CacheDecision with skip flag and reason
        """
        missing = self.missing_artifacts(staged_root)

        if missing:
            decision = CacheDecision(
                skip_build=False,
                reason=f"{len(missing)} of {len(self.static_libs)} artifacts missing",
                missing=missing
            )
        elif config.is_release:
            decision = CacheDecision(
                skip_build=False,
                reason="release profile never reuses cached artifacts"
            )
        elif config.force_rebuild:
            decision = CacheDecision(
                skip_build=False,
                reason="force rebuild requested"
            )
        else:
            decision = CacheDecision(
                skip_build=True,
                reason="all artifacts present"
            )

        logging.info(
            f"Artifact cache: {'reuse' if decision.skip_build else 'rebuild'} ({decision.reason})"
        )
        return decision
