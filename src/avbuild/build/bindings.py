"""Binding Generator.

Drives bindgen over the declared header list to produce a single combined
bindings file for the compiled libraries.

Design:
    - Header list is validated at load time (no blank entries)
    - Generation is skipped when the bindings file already exists, unless
      FFDEV2=2 forces regeneration
    - Every declared header must exist in the staged tree; all missing
      headers are reported together and nothing is generated
    - Headers are combined through a deterministic wrapper header so
      bindgen runs exactly once
    - Output is written to a temporary file and moved into place only on
      success
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import AbstractSet, List, Optional

from ..config.environment import BuildConfig
from ..config.header_list import HeaderList
from ..errors import ConfigurationError, ExternalToolFailure
from .link_descriptor import Directive, DirectiveWriter
from .process import ProcessRunner


class MissingHeadersError(ConfigurationError):
    """Raised when declared headers do not exist in the staged tree."""

    def __init__(self, missing: List[str]):
        self.missing = missing
        listing = "\n".join(f"  {path}" for path in missing)
        super().__init__(f"missing headers ({len(missing)}):\n{listing}")


class BindingGenerationError(ExternalToolFailure):
    """Raised when bindgen fails."""
    pass


@dataclass
class BindingOptions:
    """bindgen settings for one generation run."""

    include_paths: List[Path]
    ignored_macros: AbstractSet[str] = field(default_factory=frozenset)
    layout_tests: bool = False
    generate_comments: bool = True
    detect_include_paths: bool = True

    def to_args(self) -> List[str]:
        """Render bindgen options (before the `--` clang separator)."""
        args: List[str] = []
        for macro in sorted(self.ignored_macros):
            args.extend(["--blocklist-item", macro])
        if not self.layout_tests:
            args.append("--no-layout-tests")
        if not self.generate_comments:
            args.append("--no-doc-comments")
        if not self.detect_include_paths:
            args.append("--no-include-path-detection")
        return args

    def clang_args(self) -> List[str]:
        return [f"-I{path}" for path in self.include_paths]


@dataclass
class BindingResult:
    """Outcome of the binding generation step."""

    output_path: Path
    skipped: bool
    headers: List[Path] = field(default_factory=list)


class BindingGenerator:
    """Generates bindings from the declared header list."""

    def __init__(
        self,
        config: BuildConfig,
        runner: ProcessRunner,
        writer: DirectiveWriter,
        ignored_macros: AbstractSet[str],
        output_path: Path
    ):
        self.config = config
        self.runner = runner
        self.writer = writer
        self.ignored_macros = frozenset(ignored_macros)
        self.output_path = output_path

    @property
    def wrapper_path(self) -> Path:
        return self.output_path.with_name(self.output_path.stem + "_wrapper.h")

    def should_skip(self) -> bool:
        return self.output_path.exists() and not self.config.force_regenerate

    def resolve_headers(self, headers: HeaderList, staged_root: Path) -> List[Path]:
        """Resolve declared headers against the staged root.

        Raises:
            MissingHeadersError: If any declared header does not exist
        """
        resolved = headers.resolve(staged_root)
        missing = [str(path) for path in resolved if not path.exists()]
        if missing:
            raise MissingHeadersError(missing)
        return resolved

    def write_wrapper(self, headers: List[Path]) -> Path:
        """Write a wrapper header including every declared header in order."""
        lines = ["/* Generated by avbuild. Do not edit. */"]
        lines.extend(f'#include "{header}"' for header in headers)
        self.wrapper_path.parent.mkdir(parents=True, exist_ok=True)
        self.wrapper_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return self.wrapper_path

    def generate(
        self,
        staged_root: Path,
        header_list_path: Path,
        headers: Optional[HeaderList] = None
    ) -> BindingResult:
        """Generate bindings unless a cached output can be reused.

        Args:
            staged_root: Staged source root (sole include path)
            header_list_path: Declarative header list file
            headers: Already-loaded header list (loaded from file if None)

        Returns:
            BindingResult describing the output

        Raises:
            HeaderListError: If the header list has blank entries
            MissingHeadersError: If declared headers are absent
            BindingGenerationError: If bindgen fails
        """
        self.writer.emit(Directive.rerun_if_changed(header_list_path))

        if headers is None:
            headers = HeaderList.load(header_list_path)

        if self.should_skip():
            logging.info(f"Bindings up to date: {self.output_path}")
            return BindingResult(output_path=self.output_path, skipped=True)

        resolved = self.resolve_headers(headers, staged_root)
        wrapper = self.write_wrapper(resolved)

        options = BindingOptions(
            include_paths=[staged_root],
            ignored_macros=self.ignored_macros,
        )

        temp_output = self.output_path.with_name(self.output_path.name + ".tmp")
        cmd = [self.config.bindgen, str(wrapper), "-o", str(temp_output)]
        cmd.extend(options.to_args())
        cmd.append("--")
        cmd.extend(options.clang_args())

        logging.info(f"Generating bindings for {len(resolved)} headers")
        result = self.runner.run(cmd)

        if not result.success or not temp_output.exists():
            if temp_output.exists():
                temp_output.unlink()
            raise BindingGenerationError("Unable to generate bindings", result)

        os.replace(temp_output, self.output_path)
        logging.info(f"Wrote bindings: {self.output_path}")

        return BindingResult(output_path=self.output_path, skipped=False, headers=resolved)
