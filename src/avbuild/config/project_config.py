"""
avbuild.ini project configuration parser.

The project configuration is optional. When present, its [avbuild]
section overrides the default file layout of the project.

Example avbuild.ini:
    [avbuild]
    source_dir = ffmpeg-src
    headers_file = headers
    bindings_file = bindings_ffmpeg.rs
    shim_sources =
        cbits/defs.c
        cbits/img_utils.c
    shim_archive = cbits
    directive_prefix = cargo:

Usage:
    project = ProjectConfig.load(Path("."))
    print(project.source_dir)
"""

import configparser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple

from ..errors import ConfigurationError

CONFIG_FILENAME = "avbuild.ini"
SECTION = "avbuild"

DEFAULT_SHIM_SOURCES: Tuple[str, ...] = ("cbits/defs.c", "cbits/img_utils.c")


class ProjectConfigError(ConfigurationError):
    """Exception raised for avbuild.ini configuration errors."""

    pass


@dataclass(frozen=True)
class ProjectConfig:
    """File layout settings for one project."""

    source_dir: str = "ffmpeg-src"
    headers_file: str = "headers"
    bindings_file: str = "bindings_ffmpeg.rs"
    shim_sources: Tuple[str, ...] = field(default=DEFAULT_SHIM_SOURCES)
    shim_archive: str = "cbits"
    directive_prefix: str = "cargo:"

    KNOWN_KEYS = (
        "source_dir",
        "headers_file",
        "bindings_file",
        "shim_sources",
        "shim_archive",
        "directive_prefix",
    )

    @classmethod
    def load(cls, project_dir: Path) -> "ProjectConfig":
        """
        Load avbuild.ini from a project directory.

        Args:
            project_dir: Directory that may contain avbuild.ini

        Returns:
            ProjectConfig with defaults for anything not configured

        Raises:
            ProjectConfigError: If the file cannot be parsed or has unknown keys
        """
        ini_path = Path(project_dir) / CONFIG_FILENAME
        if not ini_path.exists():
            return cls()

        parser = configparser.ConfigParser(
            allow_no_value=True, interpolation=configparser.ExtendedInterpolation()
        )

        try:
            parser.read(ini_path, encoding="utf-8")
        except configparser.Error as e:
            raise ProjectConfigError(f"Failed to parse {ini_path}: {e}") from e

        if not parser.has_section(SECTION):
            return cls()

        try:
            values: Dict[str, str] = dict(parser.items(SECTION))
        except configparser.Error as e:
            raise ProjectConfigError(f"Failed to read [{SECTION}] in {ini_path}: {e}") from e

        unknown = sorted(set(values) - set(cls.KNOWN_KEYS))
        if unknown:
            raise ProjectConfigError(
                f"Unknown key(s) in [{SECTION}] of {ini_path}: {', '.join(unknown)}"
            )

        kwargs: Dict[str, object] = {}
        for key, value in values.items():
            if value is None or not value.strip():
                raise ProjectConfigError(f"Empty value for '{key}' in {ini_path}")
            if key == "shim_sources":
                kwargs[key] = tuple(cls._parse_list(value))
            else:
                kwargs[key] = value.strip()

        return cls(**kwargs)  # type: ignore[arg-type]

    @staticmethod
    def _parse_list(value: str) -> List[str]:
        """Parse a multi-line or comma-separated list value."""
        items = []
        for line in value.splitlines():
            for item in line.split(","):
                item = item.strip()
                if item:
                    items.append(item)
        return items
