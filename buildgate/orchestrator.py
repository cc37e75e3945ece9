"""Built-in build, gate and release tasks wired onto a task registry."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence

from .bundle import BundleBuilder
from .config import BuildConfig
from .executor import CommandExecutor, Runner
from .files import FileSet, merge_file_sets, resolve_file_set
from .git.changelog import ChangelogGenerator
from .git.client import GitClient
from .logging import get_logger
from .perf import PerformanceGate, PerfResult
from .release import ReleaseOutcome, ReleasePipeline, ReleaseType
from .site import SitePublisher
from .tasks import TaskRegistry
from .validators import ConsistencyReport, RuleConsistencyValidator


class Orchestrator:
    """Owns the configured collaborators and exposes every task body."""

    def __init__(
        self,
        config: BuildConfig,
        *,
        executor: CommandExecutor | None = None,
        runner: Runner | None = None,
        dry_run: bool = False,
    ) -> None:
        self.config = config
        self.root = config.root
        self.executor = executor or CommandExecutor(self.root, runner=runner, dry_run=dry_run)
        self.git = GitClient(self.executor, executable=config.git.executable)
        self.registry = TaskRegistry()
        self.logger = get_logger("orchestrator")
        self._register_tasks()

    def run(self, names: Iterable[str]) -> List[str]:
        """Run the named tasks and their prerequisites; the first failure propagates."""
        return self.registry.run(names)

    # ------------------------------------------------------------------
    # Task bodies

    def lint(self) -> None:
        paths = self.config.paths
        commands = self.config.commands

        self.logger.info("Validating JSON Files")
        extra = [self.config.resolve(name) for name in paths.extra_json_files]
        json_files = merge_file_sets(
            [self._files(paths.conf_dir, "json")],
            [path for path in extra if path.is_file()],
        )
        self._run_on_files(commands.json_lint, json_files, "JSON files")

        self.logger.info("Validating JavaScript files")
        self._run_on_files(commands.lint, self._files(paths.lib_dir, paths.source_extension), "source files")

        self.logger.info("Validating JavaScript test files")
        self._run_on_files(commands.lint, self._files(paths.tests_dir, paths.source_extension), "test files")

    def check_rule_files(self) -> ConsistencyReport:
        return RuleConsistencyValidator.from_config(self.config).check()

    def coverage(self) -> None:
        paths = self.config.paths
        thresholds = self.config.coverage
        test_files = self._files(paths.tests_dir, paths.source_extension)
        self._run_on_files(self.config.commands.test, test_files, "test files")
        self.executor.run(
            [
                *self.config.commands.coverage_check,
                "--statement",
                _format_pct(thresholds.statements),
                "--branch",
                _format_pct(thresholds.branches),
                "--function",
                _format_pct(thresholds.functions),
                "--lines",
                _format_pct(thresholds.lines),
            ]
        )

    def browserify(self) -> Path:
        builder = BundleBuilder(
            self.executor,
            self.config.resolve(self.config.paths.lib_dir),
            self.root,
            self.config.bundle,
            extension=self.config.paths.source_extension,
            dry_run=self.executor.dry_run,
        )
        return builder.build()

    def browser_test(self) -> None:
        self.executor.run(self.config.commands.browser_test)

    def docs(self) -> None:
        self.logger.info("Generating documentation")
        self.executor.run(self.config.commands.docs)
        self.logger.info("Documentation generation finished")

    def gensite(self) -> List[Path]:
        return self.site_publisher().publish()

    def changelog(self) -> None:
        self.changelog_generator().update(commit=True)

    def perf(self) -> PerfResult:
        return PerformanceGate.from_config(self.executor, self.config.perf).run()

    def release(self, release_type: ReleaseType | str) -> ReleaseOutcome:
        return self.release_pipeline().run(release_type)

    # ------------------------------------------------------------------
    # Collaborators

    def changelog_generator(self) -> ChangelogGenerator:
        return ChangelogGenerator(
            self.git,
            self.config.resolve(self.config.paths.changelog),
            repo_path=self.root,
            dry_run=self.executor.dry_run,
        )

    def site_publisher(self) -> SitePublisher:
        return SitePublisher.from_config(
            self.git,
            self.config.resolve(self.config.paths.docs_dir),
            self.config.resolve(self.config.site.target_dir),
            self.config.site,
            remote=self.config.git.remote,
            branch=self.config.git.branch,
            dry_run=self.executor.dry_run,
        )

    def release_pipeline(self) -> ReleasePipeline:
        git_config = self.config.git
        commands = self.config.commands
        return ReleasePipeline(
            validate=lambda: self.registry.run(["test"]),
            bump_version=lambda kind: self.executor.run([*commands.version, kind.value]),
            update_changelog=self.changelog,
            push_tags=lambda: self.git.push(git_config.remote, git_config.branch, tags=True),
            publish_package=lambda: self.executor.run(commands.publish),
            republish_site=self.gensite,
        )

    # ------------------------------------------------------------------
    # Helpers

    def _register_tasks(self) -> None:
        registry = self.registry
        test_requires = ["lint", "check-rule-files", "coverage", "browserify"]
        if self.config.perf.in_test:
            test_requires.append("perf")

        registry.register("lint", self.lint, description="Validate JSON, source and test files")
        registry.register(
            "check-rule-files",
            self.check_rule_files,
            description="Check every rule has docs, an index link, a default and tests",
        )
        registry.register("coverage", self.coverage, description="Run tests under coverage and enforce thresholds")
        registry.register("browserify", self.browserify, description="Build the browser bundle")
        registry.register("perf", self.perf, description="Run the performance regression gate")
        registry.register(
            "test", self.browser_test, requires=test_requires, description="Run every quality gate"
        )
        registry.register("all", requires=["test"], description="Default task")
        registry.register("docs", self.docs, description="Generate API documentation")
        registry.register("gensite", self.gensite, description="Republish documentation to the website")
        registry.register("changelog", self.changelog, description="Prepend the latest changes to the changelog")
        for kind in ReleaseType:
            registry.register(
                f"release:{kind.value}",
                lambda kind=kind: self.release(kind),
                description=f"Cut a {kind.value} release",
            )
            registry.register(kind.value, requires=[f"release:{kind.value}"], description=f"Alias of release:{kind.value}")

    def _files(self, directory: str, extension: str) -> FileSet:
        return resolve_file_set(self.config.resolve(directory), extension)

    def _run_on_files(self, command: Sequence[str], files: Iterable[Path], label: str) -> None:
        args = [self._relative(path) for path in files]
        if not args:
            self.logger.warning("No %s found; skipping %s", label, command[0])
            return
        self.executor.run([*command, *args])

    def _relative(self, path: Path) -> str:
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()


def _format_pct(value: float) -> str:
    return f"{value:g}"


__all__ = ["Orchestrator"]
