"""Browser bundle assembly around an external bundler."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import List

from jinja2 import Environment

from .config import BundleConfig
from .errors import BuildError
from .executor import CommandExecutor
from .files import resolve_file_set
from .logging import get_logger


class BundleBuilder:
    """Stages the library with a static rule index and hands it to the bundler."""

    def __init__(
        self,
        executor: CommandExecutor,
        lib_dir: Path,
        root: Path,
        config: BundleConfig,
        *,
        extension: str = "js",
        dry_run: bool = False,
    ) -> None:
        self.executor = executor
        self.lib_dir = lib_dir
        self.root = root
        self.config = config
        self.extension = extension
        self.dry_run = dry_run
        self.temp_dir = root / config.temp_dir
        self.build_dir = root / config.build_dir
        self._env = Environment(autoescape=False, keep_trailing_newline=True)
        self.logger = get_logger("bundle")

    @property
    def output_path(self) -> Path:
        return self.build_dir / self.config.output

    def generate_rules_index(self, basedir: Path) -> Path:
        """Write a loader that names every rule explicitly instead of scanning a directory."""
        rules_dir = basedir / self.config.rules_subdir
        rules = resolve_file_set(rules_dir, self.extension).names()
        template = self._env.from_string(self.config.index_template)
        target = basedir / self.config.loader
        target.write_text(
            template.render(rules=rules, rules_subdir=self.config.rules_subdir), encoding="utf-8"
        )
        self.logger.debug("Generated rule index with %d rule(s) at %s", len(rules), target)
        return target

    def bundler_command(self) -> List[str]:
        return [
            *self.config.command,
            self._relative(self.temp_dir / self.config.entry),
            "-o",
            self._relative(self.output_path),
            *self.config.extra_args,
        ]

    def build(self) -> Path:
        if not self.lib_dir.is_dir():
            raise BuildError(f"Library directory not found: {self.lib_dir}")
        if self.dry_run:
            self.logger.info(
                "(dry-run) would stage %s in %s and run %s",
                self.lib_dir,
                self.temp_dir,
                " ".join(self.bundler_command()),
            )
            return self.output_path
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        self.build_dir.mkdir(parents=True, exist_ok=True)
        try:
            shutil.copytree(self.lib_dir, self.temp_dir, dirs_exist_ok=True)
            (self.temp_dir / self.config.loader).unlink(missing_ok=True)
            self.generate_rules_index(self.temp_dir)
            self.executor.run(self.bundler_command(), cwd=self.root)
        finally:
            shutil.rmtree(self.temp_dir, ignore_errors=True)
        self.logger.info("Bundle written to %s", self.output_path)
        return self.output_path

    def _relative(self, path: Path) -> str:
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()


__all__ = ["BundleBuilder"]
