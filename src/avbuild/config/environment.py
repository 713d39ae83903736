"""
Build environment probing.

The consuming build system communicates with avbuild only through
environment variables. This module reads them once, at pipeline start,
into an immutable BuildConfig that every component receives explicitly.

Variables read:
    PROFILE              release / debug
    OPT_LEVEL            optimization level ("0", "1", "2", "3", "s", "z")
    CARGO_FEATURE_GPL    license-bearing build (presence enables)
    CARGO_FEATURE_X264   external codec integration (presence enables)
    FFDEV1=1             force rebuild, even if artifacts exist
    FFDEV2=2             force regeneration of bindings
    PKG_CONFIG_PATH      package-metadata search path
    DEP_X264_LIBS        codec link directory
    DEP_X264_PKGCONFIG   codec package-metadata directory
    PATH                 process search path (required)
    OUT_DIR              build output directory (required)
    CC, AR, MAKE, BINDGEN  tool overrides
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from ..errors import BuildEnvironmentError

RELEASE = "release"
DEBUG = "debug"

FORCE_REBUILD_VAR = "FFDEV1"
FORCE_REBUILD_VALUE = "1"
FORCE_REGENERATE_VAR = "FFDEV2"
FORCE_REGENERATE_VALUE = "2"


class EnvironmentProbe:
    """Pure queries over an environment mapping.

    Absence of a variable is always a negative answer, never an error.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def get(self, name: str) -> Optional[str]:
        return self.environ.get(name)

    def is_set(self, name: str) -> bool:
        return name in self.environ

    def has_value(self, name: str, value: str) -> bool:
        """Case-insensitive check that variable `name` equals `value`."""
        current = self.environ.get(name)
        if current is None:
            return False
        return current.lower() == value.lower()

    def is_profile(self, profile: str) -> bool:
        return self.has_value("PROFILE", profile)

    def opt_level_eq(self, level: int) -> bool:
        return self.has_value("OPT_LEVEL", str(level))


@dataclass(frozen=True)
class BuildConfig:
    """Immutable snapshot of the build environment."""

    out_dir: Path
    search_path: str
    profile: Optional[str] = None
    opt_level: Optional[str] = None
    gpl: bool = False
    x264: bool = False
    force_rebuild: bool = False
    force_regenerate: bool = False
    pkg_config_path: Optional[str] = None
    x264_libs: Optional[str] = None
    x264_pkgconfig: Optional[str] = None
    cc: str = "cc"
    ar: str = "ar"
    make: str = "make"
    bindgen: str = "bindgen"
    environ: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "BuildConfig":
        """Snapshot the environment into a BuildConfig.

        Args:
            environ: Mapping to read (defaults to os.environ)

        Returns:
            Frozen BuildConfig

        Raises:
            BuildEnvironmentError: If OUT_DIR or PATH is missing
        """
        snapshot = dict(os.environ if environ is None else environ)
        probe = EnvironmentProbe(snapshot)

        out_dir = probe.get("OUT_DIR")
        if not out_dir:
            raise BuildEnvironmentError("OUT_DIR", "build output directory")

        search_path = probe.get("PATH")
        if search_path is None:
            raise BuildEnvironmentError("PATH", "needed to locate external tools")

        profile = probe.get("PROFILE")

        return cls(
            out_dir=Path(out_dir),
            search_path=search_path,
            profile=profile.lower() if profile else None,
            opt_level=probe.get("OPT_LEVEL"),
            gpl=probe.is_set("CARGO_FEATURE_GPL"),
            x264=probe.is_set("CARGO_FEATURE_X264"),
            force_rebuild=probe.has_value(FORCE_REBUILD_VAR, FORCE_REBUILD_VALUE),
            force_regenerate=probe.has_value(FORCE_REGENERATE_VAR, FORCE_REGENERATE_VALUE),
            pkg_config_path=probe.get("PKG_CONFIG_PATH"),
            x264_libs=probe.get("DEP_X264_LIBS"),
            x264_pkgconfig=probe.get("DEP_X264_PKGCONFIG"),
            cc=probe.get("CC") or "cc",
            ar=probe.get("AR") or "ar",
            make=probe.get("MAKE") or "make",
            bindgen=probe.get("BINDGEN") or "bindgen",
            environ=MappingProxyType(snapshot),
        )

    @property
    def is_release(self) -> bool:
        return self.profile == RELEASE

    @property
    def is_debug(self) -> bool:
        return self.profile == DEBUG

    def opt_level_eq(self, level: int) -> bool:
        if self.opt_level is None:
            return False
        return self.opt_level.lower() == str(level)
