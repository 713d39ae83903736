"""Static build layout for the vendored FFmpeg tree.

Declares which static archives the vendored build must produce, which
directories are exposed to the linker, which macros are kept out of the
generated bindings, and where every input and output lives on disk.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Tuple

from .environment import BuildConfig
from .project_config import ProjectConfig

# Logical library name -> artifact path relative to the staged root.
STATIC_LIBS: Tuple[Tuple[str, str], ...] = (
    ("avcodec", "libavcodec/libavcodec.a"),
    ("avdevice", "libavdevice/libavdevice.a"),
    ("avfilter", "libavfilter/libavfilter.a"),
    ("avformat", "libavformat/libavformat.a"),
    ("avutil", "libavutil/libavutil.a"),
    ("swresample", "libswresample/libswresample.a"),
    ("swscale", "libswscale/libswscale.a"),
)

SEARCH_PATHS: Tuple[str, ...] = (
    "libavcodec",
    "libavdevice",
    "libavfilter",
    "libavformat",
    "libavresample",
    "libavutil",
    "libpostproc",
    "libswresample",
    "libswscale",
)

# Macros that produce unparseable or duplicate definitions in bindgen output
# (math.h classification constants and netinet/in.h).
IGNORED_MACROS: FrozenSet[str] = frozenset({
    "FP_INFINITE",
    "FP_NAN",
    "FP_NORMAL",
    "FP_SUBNORMAL",
    "FP_ZERO",
    "IPPORT_RESERVED",
})


@dataclass(frozen=True)
class BuildLayout:
    """Absolute locations of every pipeline input and output."""

    project_dir: Path
    out_dir: Path
    pristine_root: Path
    staged_root: Path
    headers_file: Path
    bindings_file: Path
    shim_sources: Tuple[Path, ...]
    shim_archive: str

    @property
    def shim_build_dir(self) -> Path:
        return self.out_dir / self.shim_archive

    @property
    def shim_archive_path(self) -> Path:
        return self.out_dir / f"lib{self.shim_archive}.a"

    @classmethod
    def resolve(
        cls,
        config: BuildConfig,
        project: ProjectConfig,
        project_dir: Path
    ) -> "BuildLayout":
        """Resolve project settings against the project and output directories."""
        project_dir = Path(project_dir).resolve()
        out_dir = Path(config.out_dir).resolve()

        return cls(
            project_dir=project_dir,
            out_dir=out_dir,
            pristine_root=project_dir / project.source_dir,
            staged_root=out_dir / project.source_dir,
            headers_file=project_dir / project.headers_file,
            bindings_file=out_dir / project.bindings_file,
            shim_sources=tuple(project_dir / src for src in project.shim_sources),
            shim_archive=project.shim_archive,
        )
