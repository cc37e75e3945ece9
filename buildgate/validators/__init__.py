"""Validation package for cross-artifact consistency checks."""

from .rules import ConsistencyIssue, ConsistencyReport, RuleConsistencyValidator, RuleRecord

__all__ = [
    "ConsistencyIssue",
    "ConsistencyReport",
    "RuleConsistencyValidator",
    "RuleRecord",
]
