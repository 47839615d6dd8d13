"""Schemas package."""

from schemas.domain import ResolvedDomain
from schemas.rule_set import PublicSuffixRuleSet

__all__ = [
    "ResolvedDomain",
    "PublicSuffixRuleSet",
]
