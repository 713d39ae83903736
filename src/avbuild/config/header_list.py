"""Declarative header list loading.

The header list is a newline-separated file of header paths relative to
the staged source root, e.g.:

    libavcodec/avcodec.h
    libavformat/avformat.h
    libavutil/imgutils.h

Blank lines (after trimming) are invalid and rejected at load time.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Tuple

from ..errors import ConfigurationError


class HeaderListError(ConfigurationError):
    """Raised when the header list file is unreadable or malformed."""
    pass


@dataclass(frozen=True)
class HeaderList:
    """Ordered sequence of header paths relative to the staged root."""

    entries: Tuple[str, ...]
    source: Path

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def resolve(self, root: Path) -> List[Path]:
        """Join every entry to `root`, preserving declaration order."""
        return [root / entry for entry in self.entries]

    @classmethod
    def parse(cls, text: str, source: Path) -> "HeaderList":
        """Parse header list text.

        Raises:
            HeaderListError: If any line is blank once trimmed
        """
        lines = text.splitlines()
        blank = [number for number, line in enumerate(lines, start=1) if not line.strip()]
        if blank:
            raise HeaderListError(
                f"Blank entries in header list {source} at line(s): "
                + ", ".join(str(n) for n in blank)
            )
        return cls(entries=tuple(line.strip() for line in lines), source=source)

    @classmethod
    def load(cls, path: Path) -> "HeaderList":
        """Load and validate the header list file.

        Raises:
            HeaderListError: If the file cannot be read or has blank entries
        """
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise HeaderListError(f"Unable to read header list {path}: {e}") from e
        return cls.parse(text, path)
