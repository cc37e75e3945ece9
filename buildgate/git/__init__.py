"""Version-control helpers."""

from .changelog import ChangelogEntry, ChangelogGenerator
from .client import GitClient

__all__ = ["ChangelogEntry", "ChangelogGenerator", "GitClient"]
