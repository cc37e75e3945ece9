"""Cross-checks rule implementations against their docs, tests and defaults."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping

from ..config import BuildConfig
from ..errors import ConfigError, ConsistencyViolation
from ..files import FileSet, resolve_file_set
from ..logging import get_logger


@dataclass(frozen=True)
class RuleRecord:
    """Artifacts a single rule implementation is expected to ship with."""

    name: str
    source: Path
    doc_path: Path
    test_path: Path
    config_key: str


@dataclass
class ConsistencyIssue:
    """Represents one missing artifact for a rule."""

    rule: str
    kind: str
    message: str


@dataclass
class ConsistencyReport:
    """Outcome of a full consistency pass."""

    rules_checked: int = 0
    issues: List[ConsistencyIssue] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.issues)

    @property
    def ok(self) -> bool:
        return not self.issues

    def for_rule(self, name: str) -> List[ConsistencyIssue]:
        return [issue for issue in self.issues if issue.rule == name]


class RuleConsistencyValidator:
    """Checks every rule for documentation, an index link, a default setting and tests.

    The scan is exhaustive: each missing artifact is logged as soon as it is found and
    the pass continues over the remaining rules. Only :meth:`check` turns a non-empty
    report into a failure, once the whole rule set has been inspected.
    """

    name = "rule-consistency"

    def __init__(
        self,
        rule_files: FileSet,
        doc_files: FileSet,
        test_files: FileSet,
        *,
        index_text: str,
        rule_config: Mapping[str, Any],
        config_label: str = "eslint.json",
    ) -> None:
        self.rule_files = rule_files
        self.doc_files = doc_files
        self.test_files = test_files
        self.index_text = index_text
        self.rule_config = rule_config
        self.config_label = config_label
        self.logger = get_logger("validators.rules")

    @classmethod
    def from_config(cls, config: BuildConfig) -> "RuleConsistencyValidator":
        paths = config.paths
        index_path = config.resolve(paths.rules_index)
        try:
            index_text = index_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            index_text = ""
        config_path = config.resolve(paths.rules_config)
        return cls(
            resolve_file_set(config.resolve(paths.rules_dir), paths.source_extension),
            resolve_file_set(config.resolve(paths.rule_docs_dir), paths.docs_extension),
            resolve_file_set(config.resolve(paths.rule_tests_dir), paths.source_extension),
            index_text=index_text,
            rule_config=_load_rule_config(config_path, paths.rules_config_key),
            config_label=config_path.name,
        )

    def records(self) -> List[RuleRecord]:
        """Derive the expected artifacts for each rule implementation file.

        Docs and tests must sit directly in their directories; a same-named file in a
        subdirectory does not count.
        """
        doc_ext = self.doc_files.extension
        test_ext = self.test_files.extension
        records: List[RuleRecord] = []
        for source in self.rule_files:
            name = source.stem
            records.append(
                RuleRecord(
                    name=name,
                    source=source,
                    doc_path=self.doc_files.directory / f"{name}.{doc_ext}",
                    test_path=self.test_files.directory / f"{name}.{test_ext}",
                    config_key=name,
                )
            )
        return records

    def validate(self) -> ConsistencyReport:
        """Inspect every rule and return the accumulated report."""
        self.logger.info("Validating rules")
        report = ConsistencyReport()
        doc_ext = self.doc_files.extension

        for record in self.records():
            report.rules_checked += 1
            if not record.doc_path.is_file():
                self._report(report, record.name, "docs", f"Missing documentation for rule {record.name}")
            elif f"({record.name}.{doc_ext})" not in self.index_text:
                self._report(
                    report,
                    record.name,
                    "index",
                    f"Missing link to documentation for rule {record.name} in index",
                )

            if record.config_key not in self.rule_config:
                self._report(
                    report,
                    record.name,
                    "config",
                    f"Missing default setting for {record.name} in {self.config_label}",
                )

            if not record.test_path.is_file():
                self._report(report, record.name, "tests", f"Missing tests for rule {record.name}")

        return report

    def check(self) -> ConsistencyReport:
        """Validate and raise :class:`ConsistencyViolation` if any artifact is missing."""
        report = self.validate()
        if not report.ok:
            raise ConsistencyViolation(
                f"{report.error_count} rule consistency error(s) across {report.rules_checked} rule(s)",
                report.issues,
            )
        self.logger.info("All %d rule(s) are consistent", report.rules_checked)
        return report

    def _report(self, report: ConsistencyReport, rule: str, kind: str, message: str) -> None:
        self.logger.error(message)
        report.issues.append(ConsistencyIssue(rule=rule, kind=kind, message=message))


def _load_rule_config(path: Path, key: str) -> Mapping[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigError(f"Rule configuration not found: {path}") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must contain a JSON object")
    rules = data.get(key, {})
    if not isinstance(rules, dict):
        raise ConfigError(f"'{key}' in {path.name} must be an object")
    return rules


__all__ = [
    "ConsistencyIssue",
    "ConsistencyReport",
    "RuleConsistencyValidator",
    "RuleRecord",
]
