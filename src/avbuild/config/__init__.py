"""Configuration for avbuild: environment snapshot, project settings, layout."""

from .environment import BuildConfig, EnvironmentProbe
from .header_list import HeaderList, HeaderListError
from .layout import IGNORED_MACROS, SEARCH_PATHS, STATIC_LIBS, BuildLayout
from .project_config import ProjectConfig, ProjectConfigError

__all__ = [
    "BuildConfig",
    "EnvironmentProbe",
    "HeaderList",
    "HeaderListError",
    "BuildLayout",
    "ProjectConfig",
    "ProjectConfigError",
    "STATIC_LIBS",
    "SEARCH_PATHS",
    "IGNORED_MACROS",
]
