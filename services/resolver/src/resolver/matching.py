"""Public suffix matching over one rule-set snapshot."""

from typing import FrozenSet, List
from schemas import PublicSuffixRuleSet


def _join(labels: List[str]) -> str:
    return ".".join(labels)


class SuffixMatcher:
    """Answers suffix questions for ASCII DNS hostnames.

    Rules are looked up by set membership, so matching does not depend on the
    order of the list. Hostnames must already be encoded (lowercase, punycode)
    and must not be IP literals.

    Examples:
        >>> matcher = SuffixMatcher(["com", "*.kobe.jp"], ["city.kobe.jp"])
        >>> matcher.registrable_domain("www.example.com")
        'example.com'
        >>> matcher.public_suffix("city.kobe.jp")
        'kobe.jp'
    """

    def __init__(self, rules, exception_rules):
        self.rules: FrozenSet[str] = frozenset(rules)
        self.exception_rules: FrozenSet[str] = frozenset(exception_rules)

    @classmethod
    def from_rule_set(cls, rule_set: PublicSuffixRuleSet) -> "SuffixMatcher":
        return cls(rule_set.rules, rule_set.exception_rules)

    def known_public_suffix(self, hostname: str) -> str:
        """
        Suffix named by the rule list, or "" when no rule applies.

        Exception rules are checked first, shortest candidate first; the
        parent of the first match is the suffix. Ordinary rules are then
        checked dropping one leading label at a time, so the first match is
        the longest matching suffix.
        """
        if not hostname:
            return ""

        names = hostname.split(".")
        count = len(names)

        for i in range(2, count + 1):
            candidate = _join(names[-i:])
            parent = _join(names[-i + 1 :])
            if candidate in self.exception_rules:
                return parent
            if f"*.{parent}" in self.exception_rules:
                return parent

        for i in range(1, count):
            candidate = _join(names[i:])
            parent = _join(names[i + 1 :])
            if candidate in self.rules:
                return candidate
            if f"*.{parent}" in self.rules:
                return candidate

        return ""

    def public_suffix(self, hostname: str) -> str:
        """Known suffix, falling back to the last two labels."""
        if not hostname:
            return ""
        known = self.known_public_suffix(hostname)
        if known:
            return known
        return _join(hostname.split(".")[-2:])

    def registrable_domain(self, hostname: str) -> str:
        """One label more than the public suffix (the whole host if shorter)."""
        suffix = self.public_suffix(hostname)
        if not suffix:
            return hostname
        suffix_length = len(suffix.split("."))
        return _join(hostname.split(".")[-(suffix_length + 1) :])
