"""CLI entrypoint for buildgate tasks."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import CONFIG_FILENAME, load_config
from .errors import BuildError
from .logging import configure_logging, get_logger
from .orchestrator import Orchestrator


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="buildgate",
        description="Run quality gates, build bundles and cut releases.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--root",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to the configuration file (defaults to <root>/{CONFIG_FILENAME}).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log external commands instead of running them.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write log output to this file.",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List available tasks and exit.",
    )
    parser.add_argument(
        "tasks",
        nargs="*",
        default=["all"],
        metavar="TASK",
        help="Tasks to run, e.g. lint, test, perf, changelog, release:patch (default: all).",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for buildgate tasks."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )
    logger = get_logger("cli")

    root = Path(args.root).expanduser().resolve()
    config_path = Path(args.config) if args.config else root
    try:
        config = load_config(config_path)
        if args.config:
            config.root = root
        orchestrator = Orchestrator(config, dry_run=bool(args.dry_run))
    except BuildError as exc:
        parser.exit(1, f"buildgate: {exc}\n")

    if args.list:
        for task in orchestrator.registry.tasks():
            requires = f" (after: {', '.join(task.requires)})" if task.requires else ""
            print(f"{task.name:<16} {task.description}{requires}")
        return

    try:
        completed = orchestrator.run(args.tasks)
    except BuildError as exc:
        logger.debug("Task chain failed", exc_info=True)
        parser.exit(1, f"buildgate failed: {exc}\nRun with --verbose for more details.\n")
    logger.info("Completed %d task(s): %s", len(completed), ", ".join(completed))


if __name__ == "__main__":
    main(sys.argv[1:])
