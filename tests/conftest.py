"""Shared fixtures for avbuild tests."""

import io
from pathlib import Path
from unittest.mock import Mock

import pytest

from avbuild.build.link_descriptor import DirectiveWriter
from avbuild.build.process import ProcessResult, ProcessRunner
from avbuild.config.environment import BuildConfig


def make_result(returncode: int = 0, stdout: str = "", stderr: str = "") -> ProcessResult:
    return ProcessResult(returncode=returncode, stdout=stdout, stderr=stderr, command=["tool"])


@pytest.fixture
def result_factory():
    """Factory for ProcessResult values."""
    return make_result


@pytest.fixture
def make_config(tmp_path):
    """Factory for BuildConfig snapshots rooted in tmp_path."""

    def _make(**overrides) -> BuildConfig:
        values = {
            "out_dir": tmp_path / "out",
            "search_path": "/usr/bin:/bin",
            "profile": "debug",
            "opt_level": "0",
        }
        values.update(overrides)
        return BuildConfig(**values)

    return _make


@pytest.fixture
def mock_runner():
    """ProcessRunner mock that succeeds unless told otherwise."""
    runner = Mock(spec=ProcessRunner)
    runner.run = Mock(return_value=make_result())
    return runner


@pytest.fixture
def directive_stream():
    return io.StringIO()


@pytest.fixture
def writer(directive_stream):
    return DirectiveWriter(stream=directive_stream)


@pytest.fixture
def staged_root(tmp_path) -> Path:
    root = tmp_path / "out" / "ffmpeg-src"
    root.mkdir(parents=True)
    return root
