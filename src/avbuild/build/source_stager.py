"""Source Stager.

Materializes a working copy of the pristine vendored source tree under the
build output directory, where configure and make are allowed to write.

Design:
    - Full recursive copy through the process primitive (cp -R <src>/. <dst>)
    - No incremental diffing: every invalidation triggers a full re-copy
    - Falls back to extracting <source_dir>.tar.gz when the pristine
      directory is not checked out
    - Verifies the copy reported success and the staged root exists
"""

import logging
import shutil
import tarfile
from pathlib import Path
from typing import Optional

from ..errors import ConfigurationError, ExternalToolFailure
from .process import ProcessResult, ProcessRunner

ARCHIVE_SUFFIXES = (".tar.gz", ".tgz")


class StagingError(ExternalToolFailure):
    """Raised when copying or extracting the source tree fails."""
    pass


class SourceStager:
    """Copies the pristine source tree into the staged root."""

    def __init__(self, runner: ProcessRunner):
        self.runner = runner

    @staticmethod
    def needs_staging(staged_root: Path, skip_build: bool) -> bool:
        return not staged_root.exists() or not skip_build

    def find_archive(self, pristine_root: Path) -> Optional[Path]:
        """Locate a source archive sitting next to the pristine directory."""
        for suffix in ARCHIVE_SUFFIXES:
            candidate = pristine_root.parent / f"{pristine_root.name}{suffix}"
            if candidate.is_file():
                return candidate
        return None

    def stage(self, pristine_root: Path, staged_root: Path, skip_build: bool) -> bool:
        """Stage the source tree if needed.

        Args:
            pristine_root: Vendored source tree (read-only input)
            staged_root: Working copy location under the output directory
            skip_build: Whether the artifact cache allows skipping the build

        Returns:
            True if a copy was made, False if the existing staged tree was kept

        Raises:
            ConfigurationError: If no pristine source tree or archive exists
            StagingError: If the copy fails or leaves no staged root
        """
        if not self.needs_staging(staged_root, skip_build):
            logging.info(f"Reusing staged source tree at {staged_root}")
            return False

        if pristine_root.is_dir():
            result = self._copy_tree(pristine_root, staged_root)
        else:
            archive = self.find_archive(pristine_root)
            if archive is None:
                raise ConfigurationError(
                    f"Pristine source tree not found: {pristine_root} "
                    f"(no {pristine_root.name}.tar.gz either)"
                )
            result = self._extract_archive(archive, staged_root)

        if not result.success:
            raise StagingError(f"Staging of {pristine_root.name} failed", result)

        if not staged_root.exists():
            raise StagingError(
                f"Staged source tree missing after copy: {staged_root}", result
            )

        return True

    def _copy_tree(self, pristine_root: Path, staged_root: Path) -> ProcessResult:
        logging.info(f"Copying {pristine_root} -> {staged_root}")
        staged_root.mkdir(parents=True, exist_ok=True)
        # Trailing "/." copies the contents, so an existing staged root is
        # overwritten in place instead of gaining a nested copy.
        return self.runner.run(["cp", "-R", f"{pristine_root}/.", str(staged_root)])

    def _extract_archive(self, archive_path: Path, staged_root: Path) -> ProcessResult:
        """Extract a .tar.gz source archive into the staged root.

        Handles archives that extract to a single top-level directory or
        directly to multiple files.
        """
        logging.info(f"Extracting {archive_path} -> {staged_root}")
        command = ["extract", str(archive_path), str(staged_root)]
        temp_extract = staged_root.parent / f"temp_extract_{archive_path.name}"
        if temp_extract.exists():
            shutil.rmtree(temp_extract)
        temp_extract.mkdir(parents=True)

        try:
            with tarfile.open(archive_path, "r:gz") as tar:
                if hasattr(tarfile, "data_filter"):
                    tar.extractall(temp_extract, filter="data")
                else:
                    tar.extractall(temp_extract)

            extracted_items = list(temp_extract.iterdir())
            if len(extracted_items) == 1 and extracted_items[0].is_dir():
                source_dir = extracted_items[0]
            else:
                source_dir = temp_extract

            staged_root.mkdir(parents=True, exist_ok=True)
            for item in source_dir.iterdir():
                dest = staged_root / item.name
                if item.is_dir():
                    if dest.exists():
                        shutil.rmtree(dest)
                    shutil.copytree(item, dest)
                else:
                    if dest.exists():
                        dest.unlink()
                    shutil.copy2(item, dest)
        except (OSError, tarfile.TarError) as e:
            return ProcessResult(
                returncode=1,
                stdout="",
                stderr=f"Failed to extract {archive_path}: {e}",
                command=command
            )
        finally:
            shutil.rmtree(temp_extract, ignore_errors=True)

        return ProcessResult(returncode=0, stdout="", stderr="", command=command)
