"""Build, gate and release orchestration for rule-based projects."""

__version__ = "0.1.0"
