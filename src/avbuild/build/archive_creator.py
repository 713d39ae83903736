"""Archive Creator.

This module handles creating static library archives (.a files) from compiled
shim object files using the archiver tool (ar).

Design:
    - Wraps `ar rcs` execution through the process primitive
    - Replaces any previous archive so stale members never survive
    - Validates that the archive was actually produced
"""

import logging
from pathlib import Path
from typing import List

from ..config.environment import BuildConfig
from ..errors import ExternalToolFailure
from .process import ProcessRunner


class ArchiveError(ExternalToolFailure):
    """Raised when archive creation operations fail."""
    pass


class ArchiveCreator:
    """Creates static library archives from object files."""

    def __init__(self, config: BuildConfig, runner: ProcessRunner):
        self.config = config
        self.runner = runner

    def create_archive(self, archive_path: Path, object_files: List[Path]) -> Path:
        """Create static library archive from object files.

        Args:
            archive_path: Path for output .a file
            object_files: List of object file paths to archive

        Returns:
            Path to generated archive file

        Raises:
            ArchiveError: If archive creation fails
        """
        if not object_files:
            raise ArchiveError("No object files provided for archive")

        archive_path.parent.mkdir(parents=True, exist_ok=True)
        if archive_path.exists():
            archive_path.unlink()

        # 'rcs' flags: r=insert/replace, c=create, s=index (ranlib)
        cmd = [self.config.ar, "rcs", str(archive_path)]
        cmd.extend(str(obj) for obj in object_files)

        logging.info(
            f"Creating {archive_path.name} archive from {len(object_files)} object files..."
        )

        result = self.runner.run(cmd)
        if not result.success:
            raise ArchiveError(f"Archive creation failed for {archive_path.name}", result)

        if not archive_path.exists():
            raise ArchiveError(f"Archive was not created: {archive_path}", result)

        size = archive_path.stat().st_size
        logging.info(f"Created {archive_path.name}: {size:,} bytes")

        return archive_path
