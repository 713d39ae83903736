"""Tests for the avbuild entry point and its logging and error output."""

import logging
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from avbuild.build.orchestrator import PipelineResult
from avbuild.cli import run
from avbuild.cli_utils import ErrorFormatter, setup_logging


@pytest.fixture
def environ(tmp_path):
    return {"OUT_DIR": str(tmp_path / "out"), "PATH": "/usr/bin:/bin", "PROFILE": "debug"}


@pytest.fixture
def mock_orchestrator():
    with patch("avbuild.cli.BuildOrchestrator") as mock_orch_class:
        mock_instance = MagicMock()
        mock_orch_class.return_value = mock_instance
        yield mock_orch_class, mock_instance


@pytest.fixture
def root_logger():
    logger = logging.getLogger()
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)


class TestRun:
    """Tests for avbuild.cli.run."""

    def test_success(self, environ, tmp_path, mock_orchestrator, capsys):
        mock_class, mock_instance = mock_orchestrator
        mock_instance.run.return_value = PipelineResult(success=True, message="Build successful")

        assert run(environ, project_dir=tmp_path) == 0

        config, project_dir = mock_class.call_args.args
        assert config.out_dir == Path(environ["OUT_DIR"])
        assert config.is_debug
        assert project_dir == tmp_path
        captured = capsys.readouterr()
        assert "avbuild finished" in captured.err
        assert captured.out == ""

    def test_build_failure(self, environ, tmp_path, mock_orchestrator, capsys):
        _, mock_instance = mock_orchestrator
        mock_instance.run.return_value = PipelineResult(
            success=False, message="configure failed\n* stderr:\nnasm missing"
        )

        assert run(environ, project_dir=tmp_path) == 1

        captured = capsys.readouterr()
        assert "Build failed" in captured.err
        assert "nasm missing" in captured.err
        assert captured.out == ""

    def test_missing_out_dir(self, tmp_path, mock_orchestrator, capsys):
        mock_class, _ = mock_orchestrator

        assert run({"PATH": "/bin"}, project_dir=tmp_path) == 1

        mock_class.assert_not_called()
        captured = capsys.readouterr()
        assert "Build configuration error" in captured.err
        assert "OUT_DIR" in captured.err

    def test_bad_project_config(self, environ, tmp_path, capsys):
        (tmp_path / "avbuild.ini").write_text("[avbuild]\nunknown_key = 1\n")

        assert run(environ, project_dir=tmp_path) == 1

        assert "unknown_key" in capsys.readouterr().err


class TestErrorFormatter:

    def test_print_error(self, capsys):
        ErrorFormatter.print_error("Build failed", "details here")

        captured = capsys.readouterr()
        assert "✗ Build failed" in captured.err
        assert "details here" in captured.err
        assert captured.out == ""

    def test_print_success(self, capsys):
        ErrorFormatter.print_success("done")

        captured = capsys.readouterr()
        assert "✓ done" in captured.err
        assert captured.out == ""


class TestSetupLogging:

    def test_info_by_default(self, root_logger):
        setup_logging({})

        assert root_logger.level == logging.INFO
        assert root_logger.handlers[-1].level == logging.INFO

    def test_verbose(self, root_logger):
        setup_logging({"AVBUILD_VERBOSE": "1"})

        assert root_logger.level == logging.DEBUG

    def test_logs_go_to_stderr(self, root_logger):
        setup_logging({})

        assert root_logger.handlers[-1].stream is sys.stderr
