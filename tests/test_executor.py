"""Tests for the command executor."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from buildgate.errors import CommandFailure
from buildgate.executor import CommandExecutor


def test_executor_passes_command_to_runner(tmp_path: Path, recording_runner) -> None:
    executor = CommandExecutor(tmp_path, runner=recording_runner)

    executor.run(["git", "status"])

    assert recording_runner.calls == [["git", "status"]]
    assert recording_runner.cwds == [tmp_path]


def test_executor_returns_captured_output(tmp_path: Path, recording_runner) -> None:
    recording_runner.outputs["git tag"] = "v1.0.0\n"
    executor = CommandExecutor(tmp_path, runner=recording_runner)

    assert executor.run(["git", "tag"], capture_output=True) == "v1.0.0\n"


def test_executor_dry_run_skips_runner(tmp_path: Path, recording_runner) -> None:
    executor = CommandExecutor(tmp_path, runner=recording_runner, dry_run=True)

    assert executor.run(["npm", "publish"]) == ""
    assert recording_runner.calls == []


def test_executor_rejects_empty_command(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        CommandExecutor(tmp_path).run([])


def test_default_runner_raises_on_non_zero_exit(tmp_path: Path) -> None:
    executor = CommandExecutor(tmp_path)

    with pytest.raises(CommandFailure) as excinfo:
        executor.run([sys.executable, "-c", "import sys; sys.exit(3)"])

    assert excinfo.value.returncode == 3


def test_default_runner_captures_stdout(tmp_path: Path) -> None:
    executor = CommandExecutor(tmp_path)

    output = executor.run([sys.executable, "-c", "print('hello')"], capture_output=True)

    assert output.strip() == "hello"


def test_default_runner_reports_missing_executable(tmp_path: Path) -> None:
    executor = CommandExecutor(tmp_path)

    with pytest.raises(CommandFailure) as excinfo:
        executor.run(["buildgate-definitely-not-installed"])

    assert excinfo.value.returncode == 127


def test_default_runner_keeps_captured_stderr_on_failure(tmp_path: Path) -> None:
    executor = CommandExecutor(tmp_path)
    script = "import sys; sys.stderr.write('disk full\\n'); sys.exit(2)"

    with pytest.raises(CommandFailure) as excinfo:
        executor.run([sys.executable, "-c", script], capture_output=True)

    assert excinfo.value.returncode == 2
    assert excinfo.value.stderr == "disk full\n"
    assert "disk full" in str(excinfo.value)


def test_command_failure_message_omits_blank_stderr() -> None:
    failure = CommandFailure(["npm", "publish"], 1, "  \n")

    assert str(failure) == "Command failed with exit status 1: npm publish"
