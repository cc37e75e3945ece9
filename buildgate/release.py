"""Release sequencing: gate, bump, changelog, tags, publish, site."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Sequence

from .logging import get_logger


class ReleaseType(str, Enum):
    """Version increment handed to the package manager."""

    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"


RELEASE_STEPS = (
    "validate-and-test",
    "bump-version",
    "update-changelog",
    "push-tags",
    "publish-package",
    "republish-site",
)


@dataclass
class ReleaseOutcome:
    """Steps completed by a successful release."""

    release_type: ReleaseType
    completed: List[str] = field(default_factory=list)


class ReleasePipeline:
    """Runs the release steps strictly in order and stops at the first failure.

    Steps after a failure never run. Nothing already done is undone: a pushed tag or
    a published package stays published if a later step fails.
    """

    def __init__(
        self,
        *,
        validate: Callable[[], object],
        bump_version: Callable[[ReleaseType], object],
        update_changelog: Callable[[], object],
        push_tags: Callable[[], object],
        publish_package: Callable[[], object],
        republish_site: Callable[[], object],
    ) -> None:
        self._validate = validate
        self._bump_version = bump_version
        self._update_changelog = update_changelog
        self._push_tags = push_tags
        self._publish_package = publish_package
        self._republish_site = republish_site
        self.logger = get_logger("release")

    def steps(self, release_type: ReleaseType) -> Sequence[tuple[str, Callable[[], object]]]:
        return (
            ("validate-and-test", self._validate),
            ("bump-version", lambda: self._bump_version(release_type)),
            ("update-changelog", self._update_changelog),
            ("push-tags", self._push_tags),
            ("publish-package", self._publish_package),
            ("republish-site", self._republish_site),
        )

    def run(self, release_type: ReleaseType | str) -> ReleaseOutcome:
        kind = ReleaseType(release_type)
        outcome = ReleaseOutcome(release_type=kind)
        steps = self.steps(kind)
        for index, (name, action) in enumerate(steps, start=1):
            self.logger.info("Release step %d/%d: %s", index, len(steps), name)
            try:
                action()
            except Exception:
                self.logger.error(
                    "Release aborted at %s; completed steps: %s",
                    name,
                    ", ".join(outcome.completed) or "none",
                )
                raise
            outcome.completed.append(name)
        self.logger.info("Released %s", kind.value)
        return outcome


__all__ = ["RELEASE_STEPS", "ReleaseOutcome", "ReleasePipeline", "ReleaseType"]
