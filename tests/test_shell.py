"""Tests for monobump.shell."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from monobump.shell import debug, git, info, set_verbose, step


class TestGit:
    @patch("monobump.shell.subprocess.run")
    def test_returns_stripped_stdout(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(stdout="v1.0.0\n")

        assert git("describe", "--tags", cwd="/repo") == "v1.0.0"
        mock_run.assert_called_once_with(
            ["git", "describe", "--tags"],
            capture_output=True,
            text=True,
            check=True,
            cwd="/repo",
        )

    @patch("monobump.shell.subprocess.run")
    def test_check_false_is_forwarded(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(stdout="")

        git("describe", check=False)

        assert mock_run.call_args.kwargs["check"] is False

    @patch("monobump.shell.subprocess.run")
    def test_failure_propagates(self, mock_run: MagicMock) -> None:
        mock_run.side_effect = subprocess.CalledProcessError(128, ["git", "log"])

        with pytest.raises(subprocess.CalledProcessError):
            git("log")


class TestOutput:
    def test_step(self, capsys: pytest.CaptureFixture[str]) -> None:
        step("Reading commit history")

        out = capsys.readouterr().out
        assert "Reading commit history" in out
        assert "─" * 60 in out

    def test_info_is_indented(self, capsys: pytest.CaptureFixture[str]) -> None:
        info("core: 1.0.0 → 1.1.0")

        assert capsys.readouterr().out == "  core: 1.0.0 → 1.1.0\n"

    def test_debug_hidden_by_default(self, capsys: pytest.CaptureFixture[str]) -> None:
        debug("details")

        assert capsys.readouterr().out == ""

    def test_debug_shown_when_verbose(self, capsys: pytest.CaptureFixture[str]) -> None:
        set_verbose(True)

        debug("details")

        assert capsys.readouterr().out == "  [debug] details\n"
