"""Configuration loading for buildgate (.buildgate.yml)."""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".buildgate.yml"

DEFAULT_FRONT_MATTER = (
    "---\n"
    "title: {{ title }}\n"
    "layout: {{ layout }}\n"
    "---\n"
    "<!-- Note: No pull requests accepted for this file. "
    "See README.md in the root directory for details. -->\n"
)

DEFAULT_RULES_INDEX = (
    "module.exports = function() {\n"
    "    var rules = Object.create(null);\n"
    "{% for rule in rules %}"
    '    rules["{{ rule }}"] = require("./{{ rules_subdir }}/{{ rule }}");\n'
    "{% endfor %}"
    "\n"
    "    return rules;\n"
    "};"
)


@dataclass
class PathsConfig:
    """Project layout the file sets are resolved from."""

    lib_dir: str = "lib"
    source_extension: str = "js"
    rules_dir: str = "lib/rules"
    rule_docs_dir: str = "docs/rules"
    docs_extension: str = "md"
    rules_index: str = "docs/rules/README.md"
    rule_tests_dir: str = "tests/lib/rules"
    tests_dir: str = "tests/lib"
    conf_dir: str = "conf"
    extra_json_files: List[str] = field(default_factory=lambda: [".eslintrc"])
    rules_config: str = "conf/eslint.json"
    rules_config_key: str = "rules"
    changelog: str = "CHANGELOG.md"
    docs_dir: str = "docs"


@dataclass
class CommandsConfig:
    """External tools invoked by the built-in tasks."""

    lint: List[str] = field(default_factory=lambda: ["node", "bin/eslint.js"])
    json_lint: List[str] = field(default_factory=lambda: ["jsonlint", "-q", "-c"])
    test: List[str] = field(
        default_factory=lambda: ["istanbul", "cover", "node_modules/mocha/bin/_mocha", "--", "-c"]
    )
    coverage_check: List[str] = field(default_factory=lambda: ["istanbul", "check-coverage"])
    browser_test: List[str] = field(
        default_factory=lambda: ["mocha-phantomjs", "-R", "dot", "tests/tests.htm"]
    )
    docs: List[str] = field(default_factory=lambda: ["jsdoc", "-d", "jsdoc", "lib"])
    version: List[str] = field(default_factory=lambda: ["npm", "version"])
    publish: List[str] = field(default_factory=lambda: ["npm", "publish"])


@dataclass
class CoverageConfig:
    """Minimum coverage percentages enforced after the test run."""

    statements: float = 99
    branches: float = 98
    functions: float = 99
    lines: float = 99


@dataclass
class PerfConfig:
    """Performance gate workload and threshold settings."""

    multiplier: float = 7.5e6
    trials: int = 3
    workload: List[str] = field(
        default_factory=lambda: ["node", "bin/eslint.js", "tests/performance/jshint.js"]
    )
    in_test: bool = False


@dataclass
class GitConfig:
    """Version-control remote used for tags and the docs site."""

    executable: str = "git"
    remote: str = "origin"
    branch: str = "master"


@dataclass
class SiteConfig:
    """Documentation site republishing settings."""

    target_dir: str = "../eslint.github.io/docs"
    title: str = "ESLint"
    layout: str = "doc"
    front_matter: str = DEFAULT_FRONT_MATTER


@dataclass
class BundleConfig:
    """Browser bundle settings."""

    temp_dir: str = "tmp"
    build_dir: str = "build"
    entry: str = "eslint.js"
    output: str = "eslint.js"
    loader: str = "load-rules.js"
    rules_subdir: str = "rules"
    command: List[str] = field(default_factory=lambda: ["browserify"])
    extra_args: List[str] = field(default_factory=lambda: ["-s", "eslint"])
    index_template: str = DEFAULT_RULES_INDEX


@dataclass
class BuildConfig:
    """Represents the settings defined in .buildgate.yml."""

    root: Path
    paths: PathsConfig = field(default_factory=PathsConfig)
    commands: CommandsConfig = field(default_factory=CommandsConfig)
    coverage: CoverageConfig = field(default_factory=CoverageConfig)
    perf: PerfConfig = field(default_factory=PerfConfig)
    git: GitConfig = field(default_factory=GitConfig)
    site: SiteConfig = field(default_factory=SiteConfig)
    bundle: BundleConfig = field(default_factory=BundleConfig)

    def resolve(self, relative: str | Path) -> Path:
        """Return ``relative`` anchored at the project root."""
        return (self.root / relative).resolve()


def load_config(config_path: Path) -> BuildConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return BuildConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = BuildConfig(root=root)

    paths_data = _as_dict(data.get("paths"))
    paths = config.paths
    for name in (
        "lib_dir",
        "source_extension",
        "rules_dir",
        "rule_docs_dir",
        "docs_extension",
        "rules_index",
        "rule_tests_dir",
        "tests_dir",
        "conf_dir",
        "rules_config",
        "rules_config_key",
        "changelog",
        "docs_dir",
    ):
        value = _as_str(paths_data.get(name))
        if value:
            setattr(paths, name, value)
    if "extra_json_files" in paths_data:
        paths.extra_json_files = _as_str_list(paths_data.get("extra_json_files"))
    paths.source_extension = paths.source_extension.lstrip(".")
    paths.docs_extension = paths.docs_extension.lstrip(".")

    commands_data = _as_dict(data.get("commands"))
    for name in ("lint", "json_lint", "test", "coverage_check", "browser_test", "docs", "version", "publish"):
        if name in commands_data:
            setattr(config.commands, name, _as_command(commands_data.get(name), name))

    coverage_data = _as_dict(data.get("coverage"))
    for name in ("statements", "branches", "functions", "lines"):
        value = _as_float(coverage_data.get(name))
        if value is not None:
            setattr(config.coverage, name, value)

    perf_data = _as_dict(data.get("perf"))
    if perf_data:
        multiplier = _as_float(perf_data.get("multiplier"))
        if multiplier is not None:
            config.perf.multiplier = multiplier
        trials = _as_int(perf_data.get("trials"))
        if trials is not None:
            config.perf.trials = trials
        if "workload" in perf_data:
            config.perf.workload = _as_command(perf_data.get("workload"), "perf.workload")
        in_test = _as_bool(perf_data.get("in_test"))
        if in_test is not None:
            config.perf.in_test = in_test
    if config.perf.trials < 1:
        raise ConfigError("perf.trials must be at least 1")

    git_data = _as_dict(data.get("git"))
    for name in ("executable", "remote", "branch"):
        value = _as_str(git_data.get(name))
        if value:
            setattr(config.git, name, value)

    site_data = _as_dict(data.get("site"))
    for name in ("target_dir", "title", "layout", "front_matter"):
        value = _as_str(site_data.get(name))
        if value:
            setattr(config.site, name, value)

    bundle_data = _as_dict(data.get("bundle"))
    for name in ("temp_dir", "build_dir", "entry", "output", "loader", "rules_subdir", "index_template"):
        value = _as_str(bundle_data.get(name))
        if value:
            setattr(config.bundle, name, value)
    if "command" in bundle_data:
        config.bundle.command = _as_command(bundle_data.get("command"), "bundle.command")
    if "extra_args" in bundle_data:
        config.bundle.extra_args = _as_str_list(bundle_data.get("extra_args"))

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_command(value: Any, name: str) -> List[str]:
    if isinstance(value, str):
        parts = shlex.split(value)
    elif isinstance(value, Sequence):
        parts = _as_str_list(value)
    else:
        parts = []
    if not parts:
        raise ConfigError(f"Command '{name}' must be a non-empty string or list")
    return parts


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "BuildConfig",
    "BundleConfig",
    "CommandsConfig",
    "ConfigError",
    "CoverageConfig",
    "GitConfig",
    "PathsConfig",
    "PerfConfig",
    "SiteConfig",
    "load_config",
]
