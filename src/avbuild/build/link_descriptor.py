"""Link descriptor emission.

Directives are the only channel back to the consuming build system. They
are written to stdout, one per line, in the form

    cargo:rustc-link-search=native=<dir>
    cargo:rustc-link-lib=static=<name>
    cargo:rerun-if-changed=<path>

The emission order for the vendored libraries is derived solely from the
declaration order of SEARCH_PATHS and STATIC_LIBS.
"""

import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, TextIO, Tuple


class DirectiveKind(Enum):
    LINK_SEARCH = "rustc-link-search"
    LINK_LIB = "rustc-link-lib"
    RERUN_IF_CHANGED = "rerun-if-changed"


@dataclass(frozen=True)
class Directive:
    """A single instruction for the consuming build system."""

    kind: DirectiveKind
    value: str

    @classmethod
    def link_search(cls, path: Path) -> "Directive":
        return cls(DirectiveKind.LINK_SEARCH, f"native={path}")

    @classmethod
    def link_lib(cls, name: str) -> "Directive":
        return cls(DirectiveKind.LINK_LIB, f"static={name}")

    @classmethod
    def rerun_if_changed(cls, path: Path) -> "Directive":
        return cls(DirectiveKind.RERUN_IF_CHANGED, str(path))

    def render(self, prefix: str = "cargo:") -> str:
        return f"{prefix}{self.kind.value}={self.value}"


class DirectiveWriter:
    """Writes directives to a stream and records them in emission order."""

    def __init__(self, stream: Optional[TextIO] = None, prefix: str = "cargo:"):
        self.stream = stream
        self.prefix = prefix
        self.emitted: List[Directive] = []

    def emit(self, directive: Directive) -> None:
        self.emitted.append(directive)
        stream = self.stream if self.stream is not None else sys.stdout
        stream.write(directive.render(self.prefix) + "\n")
        stream.flush()

    def emit_all(self, directives: Sequence[Directive]) -> None:
        for directive in directives:
            self.emit(directive)

    def rendered(self) -> List[str]:
        return [directive.render(self.prefix) for directive in self.emitted]


class LinkDescriptorEmitter:
    """Emits link-search and link-lib directives for the staged tree."""

    def __init__(
        self,
        static_libs: Sequence[Tuple[str, str]],
        search_paths: Sequence[str],
        writer: DirectiveWriter
    ):
        self.static_libs = tuple(static_libs)
        self.search_paths = tuple(search_paths)
        self.writer = writer

    def describe(self, staged_root: Path) -> List[Directive]:
        """Build the link descriptor without emitting it.

        Order: staged root, each declared search subdirectory, then each
        declared static library.
        """
        directives = [Directive.link_search(staged_root)]
        directives.extend(
            Directive.link_search(staged_root / sub_dir) for sub_dir in self.search_paths
        )
        directives.extend(Directive.link_lib(name) for name, _ in self.static_libs)
        return directives

    def emit(self, staged_root: Path) -> List[Directive]:
        directives = self.describe(staged_root)
        self.writer.emit_all(directives)
        return directives
