"""Changelog generation from the commits between the two latest tags."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, List, Sequence

from ..errors import ChangelogError
from ..logging import get_logger
from .client import GitClient

LOG_FORMAT = "* %s (%an)"
MERGE_MARKERS = ("Merge pull request", "Merge branch")


def format_date(day: date) -> str:
    """Render ``day`` as ``October 19, 2026``."""
    return f"{day:%B} {day.day}, {day.year}"


def filter_log(lines: Sequence[str]) -> List[str]:
    """Drop merge-commit noise and blank lines, keeping order."""
    kept: List[str] = []
    for line in lines:
        text = line.rstrip()
        if not text.strip():
            continue
        if any(marker in text for marker in MERGE_MARKERS):
            continue
        kept.append(text)
    return kept


@dataclass(frozen=True)
class ChangelogEntry:
    """A block of filtered commit lines headed by the release boundary and date."""

    previous_tag: str
    current_tag: str
    day: date
    lines: Sequence[str]

    @property
    def header(self) -> str:
        return f"{self.previous_tag} - {format_date(self.day)}"

    def render(self) -> str:
        return "\n".join([self.header, "", *self.lines, "", ""])


class ChangelogGenerator:
    """Mines commit history and prepends a new entry to the changelog file."""

    def __init__(
        self,
        git: GitClient,
        changelog_path: Path,
        *,
        repo_path: Path | None = None,
        today: Callable[[], date] | None = None,
        dry_run: bool = False,
    ) -> None:
        self.git = git
        self.changelog_path = changelog_path
        self.repo_path = repo_path or changelog_path.parent
        self._today = today or date.today
        self.dry_run = dry_run
        self.logger = get_logger("git.changelog")

    def tag_range(self) -> tuple[str, str]:
        tags = self.git.tags(cwd=self.repo_path)
        if len(tags) < 2:
            raise ChangelogError(
                f"At least two tags are required to build a changelog entry (found {len(tags)})"
            )
        return tags[-2], tags[-1]

    def build_entry(self) -> ChangelogEntry:
        previous, current = self.tag_range()
        raw = self.git.log(f"{previous}..{current}", pretty=LOG_FORMAT, cwd=self.repo_path)
        lines = filter_log(raw)
        if not lines:
            raise ChangelogError(f"No changes found between {previous} and {current}")
        self.logger.debug("Collected %d changelog line(s) for %s..%s", len(lines), previous, current)
        return ChangelogEntry(previous_tag=previous, current_tag=current, day=self._today(), lines=lines)

    def prepend(self, entry: ChangelogEntry) -> None:
        """Write ``entry`` before the existing changelog content."""
        try:
            existing = self.changelog_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            existing = ""
        self.changelog_path.write_text(entry.render() + existing, encoding="utf-8")

    def update(self, *, commit: bool = True) -> ChangelogEntry | None:
        """Prepend a fresh entry; with ``commit`` fold it into the current commit.

        Entries are not deduplicated, so callers must run this once per release. In
        dry-run mode nothing is read from git or written, and ``None`` is returned.
        """
        if self.dry_run:
            self.logger.info(
                "(dry-run) would prepend an entry for the two latest tags to %s", self.changelog_path
            )
            return None
        entry = self.build_entry()
        self.prepend(entry)
        self.logger.info("Added changelog entry '%s' (%d change(s))", entry.header, len(entry.lines))
        if commit:
            self.git.add([self._relative_changelog()], cwd=self.repo_path)
            self.git.amend(cwd=self.repo_path)
        return entry

    def _relative_changelog(self) -> str:
        try:
            return self.changelog_path.relative_to(self.repo_path).as_posix()
        except ValueError:
            return self.changelog_path.as_posix()


__all__ = ["ChangelogEntry", "ChangelogGenerator", "filter_log", "format_date"]
