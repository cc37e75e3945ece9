"""Republishes the documentation tree into the website repository."""

from __future__ import annotations

import re
import shutil
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Tuple

from jinja2 import Environment

from .config import SiteConfig
from .errors import BuildError
from .git.client import GitClient
from .logging import get_logger

_MD_LINK_PATTERN = re.compile(r"\.md\)")


def rewrite_document(text: str, front_matter: str) -> str:
    """Prefix ``front_matter`` and point markdown links at the rendered pages."""
    body = front_matter + text
    body = _MD_LINK_PATTERN.sub(".html)", body)
    return body.replace("README.html", "index.html")


class SitePublisher:
    """Copies docs into the site checkout, rewrites them, then commits and pushes."""

    def __init__(
        self,
        git: GitClient,
        docs_dir: Path,
        target_dir: Path,
        *,
        title: str = "ESLint",
        layout: str = "doc",
        front_matter_template: str,
        remote: str = "origin",
        branch: str = "master",
        now: Callable[[], datetime] | None = None,
        dry_run: bool = False,
    ) -> None:
        self.git = git
        self.docs_dir = docs_dir
        self.target_dir = target_dir
        self.remote = remote
        self.branch = branch
        self._now = now or datetime.now
        self.dry_run = dry_run
        self._env = Environment(autoescape=False, keep_trailing_newline=True)
        self.front_matter = self._env.from_string(front_matter_template).render(
            title=title, layout=layout
        )
        self.logger = get_logger("site")

    @classmethod
    def from_config(
        cls,
        git: GitClient,
        docs_dir: Path,
        target_dir: Path,
        config: SiteConfig,
        *,
        remote: str,
        branch: str,
        dry_run: bool = False,
    ) -> "SitePublisher":
        return cls(
            git,
            docs_dir,
            target_dir,
            title=config.title,
            layout=config.layout,
            front_matter_template=config.front_matter,
            remote=remote,
            branch=branch,
            dry_run=dry_run,
        )

    def plan(self) -> List[Tuple[Path, Path]]:
        """Return ``(source, destination)`` pairs relative to the docs and site roots.

        ``README.md`` becomes ``index.md`` unless the same folder already holds an
        ``index.md``, in which case the README keeps its name.
        """
        pairs: List[Tuple[Path, Path]] = []
        for path in sorted(self.docs_dir.rglob("*")):
            if not path.is_file():
                continue
            relative = path.relative_to(self.docs_dir)
            destination = relative
            if path.name == "README.md":
                if path.with_name("index.md").exists():
                    self.logger.warning(
                        "Both README.md and index.md exist in %s; keeping README.md as is",
                        path.parent,
                    )
                else:
                    destination = relative.with_name("index.md")
            pairs.append((relative, destination))
        return pairs

    def stage(self) -> List[Path]:
        """Replace the target directory with a rewritten copy of the docs tree."""
        if not self.docs_dir.is_dir():
            raise BuildError(f"Documentation directory not found: {self.docs_dir}")
        pairs = self.plan()
        if self.dry_run:
            self.logger.info("(dry-run) would replace %s with %s", self.target_dir, self.docs_dir)
        else:
            if self.target_dir.exists():
                shutil.rmtree(self.target_dir)
            shutil.copytree(self.docs_dir, self.target_dir)

        written: List[Path] = []
        for relative, destination in pairs:
            try:
                text = (self.docs_dir / relative).read_text(encoding="utf-8")
            except UnicodeDecodeError:
                self.logger.debug("Leaving binary file %s untouched", relative)
                continue
            target = self.target_dir / destination
            written.append(target)
            if self.dry_run:
                self.logger.debug("(dry-run) would write %s", target)
                continue
            target.write_text(rewrite_document(text, self.front_matter), encoding="utf-8")
            if destination != relative:
                (self.target_dir / relative).unlink()
        return written

    def publish(self) -> List[Path]:
        self.logger.info("Generating site in %s", self.target_dir)
        written = self.stage()
        site_repo = self.target_dir
        if self.dry_run:
            self.logger.info("(dry-run) would commit and push %d file(s) from %s", len(written), site_repo)
            return written
        stamp = self._now().strftime("%a %b %d %Y %H:%M:%S")
        self.git.add(["-A", "."], cwd=site_repo)
        self.git.commit(f"Autogenerated new docs at {stamp}", cwd=site_repo)
        self.git.fetch(self.remote, cwd=site_repo)
        self.git.rebase(f"{self.remote}/{self.branch}", cwd=site_repo)
        self.git.push(self.remote, self.branch, cwd=site_repo)
        self.logger.info("Published %d documentation file(s)", len(written))
        return written


__all__ = ["SitePublisher", "rewrite_document"]
