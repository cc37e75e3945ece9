"""Tests for the release pipeline."""

from __future__ import annotations

import pytest

from buildgate.errors import CommandFailure
from buildgate.release import RELEASE_STEPS, ReleasePipeline, ReleaseType


def _pipeline(log: list[str], *, fail_at: str | None = None) -> ReleasePipeline:
    def step(name):
        def action(*args) -> None:
            log.append(name if not args else f"{name}:{args[0].value}")
            if name == fail_at:
                raise CommandFailure([name], 1)

        return action

    return ReleasePipeline(
        validate=step("validate-and-test"),
        bump_version=step("bump-version"),
        update_changelog=step("update-changelog"),
        push_tags=step("push-tags"),
        publish_package=step("publish-package"),
        republish_site=step("republish-site"),
    )


def test_release_runs_every_step_in_order() -> None:
    log: list[str] = []

    outcome = _pipeline(log).run(ReleaseType.MINOR)

    assert log == [
        "validate-and-test",
        "bump-version:minor",
        "update-changelog",
        "push-tags",
        "publish-package",
        "republish-site",
    ]
    assert outcome.completed == list(RELEASE_STEPS)
    assert outcome.release_type is ReleaseType.MINOR


def test_failed_gate_halts_before_side_effects() -> None:
    log: list[str] = []

    with pytest.raises(CommandFailure):
        _pipeline(log, fail_at="validate-and-test").run("patch")

    assert log == ["validate-and-test"]


def test_failed_publish_does_not_undo_pushed_tags() -> None:
    log: list[str] = []

    with pytest.raises(CommandFailure):
        _pipeline(log, fail_at="publish-package").run(ReleaseType.MAJOR)

    assert log[-2:] == ["push-tags", "publish-package"]
    assert "republish-site" not in log


def test_unknown_release_type_is_rejected_before_any_step() -> None:
    log: list[str] = []

    with pytest.raises(ValueError):
        _pipeline(log).run("huge")

    assert log == []
