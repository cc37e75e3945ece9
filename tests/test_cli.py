"""CLI parser and exit status tests."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from buildgate import cli
from buildgate.cli import _build_parser


def test_cli_defaults_to_all_task() -> None:
    parser = _build_parser()
    args = parser.parse_args([])
    assert args.tasks == ["all"]
    assert args.verbose is False


def test_cli_accepts_multiple_tasks_and_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "--dry-run", "lint", "release:patch"])
    assert args.verbose is True
    assert args.dry_run is True
    assert args.tasks == ["lint", "release:patch"]


def test_cli_lists_tasks(tmp_path: Path, capsys) -> None:
    cli.main(["--root", str(tmp_path), "--list"])
    output = capsys.readouterr().out
    assert "check-rule-files" in output
    assert "release:minor" in output


def test_cli_exits_with_status_one_on_validation_failure(tmp_path: Path) -> None:
    (tmp_path / "lib" / "rules").mkdir(parents=True)
    (tmp_path / "lib" / "rules" / "semi.js").write_text("", encoding="utf-8")
    (tmp_path / "conf").mkdir()
    (tmp_path / "conf" / "eslint.json").write_text(json.dumps({"rules": {}}), encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--root", str(tmp_path), "check-rule-files"])

    assert excinfo.value.code == 1


def test_cli_exits_with_status_one_on_unknown_task(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--root", str(tmp_path), "does-not-exist"])
    assert excinfo.value.code == 1


def test_cli_succeeds_when_rules_are_consistent(repo_builder) -> None:
    repo_builder.write_rules(["semi", "quotes"])
    cli.main(["--root", str(repo_builder.path()), "check-rule-files"])


def test_cli_reports_workload_stderr_when_perf_workload_fails(tmp_path: Path, capsys, monkeypatch) -> None:
    monkeypatch.setattr("buildgate.perf.detect_cpu_speed", lambda: 3000.0)
    (tmp_path / "work.py").write_text(
        "import sys\nsys.stderr.write('WORKLOAD-EXPLODED\\n')\nsys.exit(2)\n", encoding="utf-8"
    )
    (tmp_path / ".buildgate.yml").write_text(
        f"perf:\n  workload: [{json.dumps(sys.executable)}, work.py]\n", encoding="utf-8"
    )

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--root", str(tmp_path), "perf"])

    assert excinfo.value.code == 1
    assert "WORKLOAD-EXPLODED" in capsys.readouterr().err


def test_cli_dry_run_gensite_leaves_site_untouched(tmp_path: Path) -> None:
    (tmp_path / "project" / "docs").mkdir(parents=True)
    (tmp_path / "project" / "docs" / "README.md").write_text("# Docs\n", encoding="utf-8")
    site = tmp_path / "site" / "docs"
    site.mkdir(parents=True)
    (site / "keep.md").write_text("keep me\n", encoding="utf-8")
    (tmp_path / "project" / ".buildgate.yml").write_text(
        "site:\n  target_dir: ../site/docs\n", encoding="utf-8"
    )

    cli.main(["--root", str(tmp_path / "project"), "--dry-run", "gensite"])

    assert (site / "keep.md").read_text(encoding="utf-8") == "keep me\n"
    assert sorted(path.name for path in site.iterdir()) == ["keep.md"]
