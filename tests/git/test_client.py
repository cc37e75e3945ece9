"""Tests for the git client wrapper."""

from __future__ import annotations

from pathlib import Path

from buildgate.executor import CommandExecutor
from buildgate.git.client import GitClient


def test_client_builds_git_commands(tmp_path: Path, recording_runner) -> None:
    site = tmp_path / "site"
    git = GitClient(CommandExecutor(tmp_path, runner=recording_runner))

    git.add(["-A", "."], cwd=site)
    git.commit("docs: refresh", cwd=site)
    git.fetch("origin", cwd=site)
    git.rebase("origin/master", cwd=site)
    git.push("origin", "master", cwd=site)
    git.push("origin", "master", tags=True)

    assert recording_runner.commands() == [
        "git add -A .",
        "git commit -m docs: refresh",
        "git fetch origin",
        "git rebase origin/master",
        "git push origin master",
        "git push origin master --tags",
    ]
    assert recording_runner.cwds[:5] == [site] * 5
    assert recording_runner.cwds[5] == tmp_path


def test_client_parses_tags(tmp_path: Path, recording_runner) -> None:
    recording_runner.outputs["/usr/bin/git tag"] = "\nv1.0.0\n  v1.1.0  \n"
    git = GitClient(CommandExecutor(tmp_path, runner=recording_runner), executable="/usr/bin/git")

    assert git.tags() == ["v1.0.0", "v1.1.0"]
