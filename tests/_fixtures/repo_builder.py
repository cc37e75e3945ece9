"""Helper utilities for constructing temporary projects in tests."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Iterable, Mapping

from buildgate.config import BuildConfig, load_config


class RepoBuilder:
    """Utility for writing files into a throwaway project and loading its config."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "repo"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the project."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def write_rules(
        self,
        names: Iterable[str],
        *,
        skip_docs: Iterable[str] = (),
        skip_links: Iterable[str] = (),
        skip_config: Iterable[str] = (),
        skip_tests: Iterable[str] = (),
    ) -> None:
        """Create rule implementations plus docs, index links, defaults and tests."""
        names = list(names)
        skip_docs, skip_links = set(skip_docs), set(skip_links)
        skip_config, skip_tests = set(skip_config), set(skip_tests)
        index_lines = ["# Rules", ""]
        defaults = {}
        for name in names:
            self.write({f"lib/rules/{name}.js": "module.exports = function() {};\n"})
            if name not in skip_docs:
                self.write({f"docs/rules/{name}.md": f"# {name}\n"})
            if name not in skip_links:
                index_lines.append(f"* [{name}]({name}.md)")
            if name not in skip_config:
                defaults[name] = 1
            if name not in skip_tests:
                self.write({f"tests/lib/rules/{name}.js": "// tests\n"})
        self.write({"docs/rules/README.md": "\n".join(index_lines) + "\n"})
        self.write({"conf/eslint.json": json.dumps({"rules": defaults}, indent=2)})

    def config(self) -> BuildConfig:
        """Return the configuration for the project root."""
        return load_config(self.root)

    def path(self) -> Path:
        """Return the project root path."""
        return self.root


__all__ = ["RepoBuilder"]
