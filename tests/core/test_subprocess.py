"""Tests for subprocess wrappers used by the host tool integrations."""

import subprocess
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from rosmanifest.core.subprocess import run_optional, run_subprocess_with_context


def test_success_case_returns_completed_process() -> None:
    """Test that successful subprocess execution returns CompletedProcess."""
    with patch("rosmanifest.core.subprocess.subprocess.run") as mock_run:
        mock_result = Mock(spec=subprocess.CompletedProcess)
        mock_result.returncode = 0
        mock_result.stdout = "amd64\n"
        mock_run.return_value = mock_result

        result = run_subprocess_with_context(
            ["dpkg", "--print-architecture"],
            operation_context="determine the Debian architecture",
            cwd=Path("/build"),
        )

        assert result == mock_result
        mock_run.assert_called_once_with(
            ["dpkg", "--print-architecture"],
            cwd=Path("/build"),
            env=None,
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=True,
        )


def test_failure_includes_command_and_stderr() -> None:
    with patch("rosmanifest.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = subprocess.CalledProcessError(
            returncode=2,
            cmd=["rospack", "find", "missing"],
            stderr="[rospack] Error: package 'missing' not found",
        )

        with pytest.raises(RuntimeError) as exc_info:
            run_subprocess_with_context(
                ["rospack", "find", "missing"], operation_context="find package missing"
            )

        error_message = str(exc_info.value)
        assert "Failed to find package missing" in error_message
        assert "Command: rospack find missing" in error_message
        assert "Exit code: 2" in error_message
        assert "stderr: [rospack] Error: package 'missing' not found" in error_message


def test_missing_executable_raises_runtime_error() -> None:
    with patch("rosmanifest.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = FileNotFoundError("dpkg")

        with pytest.raises(RuntimeError, match="Command not found while trying to query dpkg"):
            run_subprocess_with_context(["dpkg", "-S", "/x"], operation_context="query dpkg")


def test_run_optional_returns_stripped_stdout() -> None:
    with patch("rosmanifest.core.subprocess.subprocess.run") as mock_run:
        mock_run.return_value = subprocess.CompletedProcess(
            args=["rospack", "find", "roscpp"],
            returncode=0,
            stdout="/opt/ros/hydro/share/roscpp\n",
            stderr="",
        )

        output = run_optional(["rospack", "find", "roscpp"], env={"ROS_PACKAGE_PATH": "/ros"})

        assert output == "/opt/ros/hydro/share/roscpp"
        assert mock_run.call_args.kwargs["env"] == {"ROS_PACKAGE_PATH": "/ros"}
        assert mock_run.call_args.kwargs["check"] is False


def test_run_optional_treats_failure_as_no_answer() -> None:
    with patch("rosmanifest.core.subprocess.subprocess.run") as mock_run:
        mock_run.return_value = subprocess.CompletedProcess(
            args=["rospack", "find", "missing"], returncode=1, stdout="", stderr="not found"
        )

        assert run_optional(["rospack", "find", "missing"]) is None


def test_run_optional_without_executable() -> None:
    with patch("rosmanifest.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = FileNotFoundError("rosdep")

        assert run_optional(["rosdep", "resolve", "boost"]) is None
