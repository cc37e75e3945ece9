"""Thin git wrapper over the command executor."""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from ..executor import CommandExecutor


class GitClient:
    """Issues git commands in a working tree and parses their text output."""

    def __init__(self, executor: CommandExecutor, *, executable: str = "git") -> None:
        self.executor = executor
        self.executable = executable

    def tags(self, *, cwd: Path | None = None) -> List[str]:
        """Return tag names ordered oldest to newest by creation date."""
        output = self._git(["tag", "--sort=creatordate"], cwd=cwd, capture_output=True)
        return [line.strip() for line in output.splitlines() if line.strip()]

    def log(self, revision_range: str, *, pretty: str, cwd: Path | None = None) -> List[str]:
        output = self._git(
            ["log", f"--pretty=format:{pretty}", revision_range], cwd=cwd, capture_output=True
        )
        return output.splitlines()

    def add(self, paths: Sequence[str], *, cwd: Path | None = None) -> None:
        self._git(["add", *paths], cwd=cwd)

    def commit(self, message: str, *, cwd: Path | None = None) -> None:
        self._git(["commit", "-m", message], cwd=cwd)

    def amend(self, *, cwd: Path | None = None) -> None:
        self._git(["commit", "--amend", "--no-edit"], cwd=cwd)

    def fetch(self, remote: str, *, cwd: Path | None = None) -> None:
        self._git(["fetch", remote], cwd=cwd)

    def rebase(self, upstream: str, *, cwd: Path | None = None) -> None:
        self._git(["rebase", upstream], cwd=cwd)

    def push(
        self, remote: str, branch: str, *, tags: bool = False, cwd: Path | None = None
    ) -> None:
        args = ["push", remote, branch]
        if tags:
            args.append("--tags")
        self._git(args, cwd=cwd)

    # ------------------------------------------------------------------
    # Helpers

    def _git(self, args: Sequence[str], *, cwd: Path | None, capture_output: bool = False) -> str:
        return self.executor.run([self.executable, *args], cwd=cwd, capture_output=capture_output)


__all__ = ["GitClient"]
