"""File set resolution for task inputs."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence, Tuple


@dataclass(frozen=True)
class FileSet:
    """Ordered, deduplicated files under a directory that share an extension."""

    directory: Path
    extension: str
    paths: Tuple[Path, ...]

    def __iter__(self) -> Iterator[Path]:
        return iter(self.paths)

    def __len__(self) -> int:
        return len(self.paths)

    def names(self) -> Tuple[str, ...]:
        """Return the base names (file stems) in path order."""
        return tuple(path.stem for path in self.paths)

    def as_args(self, root: Path | None = None) -> List[str]:
        """Render the paths as command arguments, relative to ``root`` when possible."""
        args: List[str] = []
        for path in self.paths:
            if root is not None:
                try:
                    args.append(path.relative_to(root).as_posix())
                    continue
                except ValueError:
                    pass
            args.append(path.as_posix())
        return args


def resolve_file_set(directory: Path, extension: str) -> FileSet:
    """Return every file below ``directory`` whose extension matches ``extension``.

    The directory is walked recursively. Results are sorted by POSIX path so that an
    unchanged tree always resolves to the same sequence; a missing directory resolves
    to an empty set.
    """
    suffix = "." + extension.lstrip(".")
    base = Path(directory)
    found: set[Path] = set()
    if base.is_dir():
        for dirpath, _dirnames, filenames in os.walk(base):
            for filename in filenames:
                if filename.endswith(suffix) and filename != suffix:
                    found.add(Path(dirpath) / filename)
    ordered = tuple(sorted(found, key=lambda path: path.as_posix()))
    return FileSet(directory=base, extension=suffix.lstrip("."), paths=ordered)


def merge_file_sets(sets: Iterable[FileSet], extra: Sequence[Path] = ()) -> List[Path]:
    """Concatenate file sets and extra paths, dropping duplicates but keeping order."""
    seen: set[Path] = set()
    merged: List[Path] = []
    for file_set in sets:
        for path in file_set:
            if path not in seen:
                seen.add(path)
                merged.append(path)
    for path in extra:
        if path not in seen:
            seen.add(path)
            merged.append(path)
    return merged


__all__ = ["FileSet", "merge_file_sets", "resolve_file_set"]
