"""Synchronous execution of external commands."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Iterable, Mapping

from .errors import CommandFailure
from .logging import get_logger

Runner = Callable[..., str]


class CommandExecutor:
    """Runs external tools one at a time and turns non-zero exits into failures."""

    def __init__(
        self,
        cwd: Path | None = None,
        *,
        runner: Runner | None = None,
        dry_run: bool = False,
    ) -> None:
        self.cwd = cwd
        self.dry_run = dry_run
        self._runner = runner or self._default_runner
        self.logger = get_logger("executor")

    def run(
        self,
        args: Iterable[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        capture_output: bool = False,
    ) -> str:
        """Run ``args`` and return captured stdout (empty unless ``capture_output``)."""
        command = [str(arg) for arg in args]
        if not command:
            raise ValueError("Cannot run an empty command")
        workdir = cwd or self.cwd or Path.cwd()
        if self.dry_run:
            self.logger.info("(dry-run) %s", " ".join(command))
            return ""
        self.logger.debug("Running %s (cwd=%s)", " ".join(command), workdir)
        return self._runner(
            command,
            cwd=workdir,
            env=dict(env) if env is not None else None,
            capture_output=capture_output,
        )

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        env: dict[str, str] | None = None,
        capture_output: bool = False,
    ) -> str:
        command = list(args)
        try:
            completed = subprocess.run(
                command,
                cwd=str(cwd),
                env=env,
                check=False,
                text=True,
                capture_output=capture_output,
            )
        except FileNotFoundError as exc:
            raise CommandFailure(command, 127, str(exc)) from exc
        if completed.returncode != 0:
            raise CommandFailure(command, completed.returncode, completed.stderr)
        if capture_output:
            return completed.stdout
        return ""


__all__ = ["CommandExecutor", "Runner"]
