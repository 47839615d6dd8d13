"""Public suffix list format parser."""

from typing import List, NamedTuple
import structlog
from common import InvalidHostError, ParseError
from common.constants import PSL_PRIVATE_SECTION_MARKER
from inet import hostname
from .base_parser import BaseParser

logger = structlog.get_logger()

WILDCARD_PREFIX = "*."


class ParsedRules(NamedTuple):
    rules: List[str]
    exception_rules: List[str]


def encode_rule(rule: str) -> str:
    """
    ASCII-encode a rule, keeping a leading ``*.`` wildcard.

    Raises:
        InvalidHostError: If the domain part is not a valid host
    """
    if rule.startswith(WILDCARD_PREFIX):
        return WILDCARD_PREFIX + hostname.encode(rule[len(WILDCARD_PREFIX) :])
    return hostname.encode(rule)


class SuffixListParser(BaseParser):
    """Parser for the public suffix list format.

    Example format:
        // Comment line
        com
        *.kobe.jp
        !city.kobe.jp
    """

    def __init__(
        self,
        source_name: str = "public_suffix_list",
        include_private_domains: bool = True,
    ):
        """
        Initialize suffix list parser.

        Args:
            source_name: Name of the data source
            include_private_domains: If False, stop at the private domains
                section (rules submitted by companies such as blogspot.com)
        """
        super().__init__(source_name, "psl")
        self.include_private_domains = include_private_domains

    def parse(self, content: str) -> ParsedRules:
        """
        Parse public suffix list content.

        Rules keep document order and are not deduplicated. Rules that cannot
        be encoded are logged and skipped.

        Args:
            content: Raw list content

        Returns:
            ParsedRules with ordinary and exception rules

        Raises:
            ParseError: If the content is empty or holds no rules
        """
        if not content or not content.strip():
            raise ParseError(
                f"Empty content from source {self.source_name}",
                context={"source_name": self.source_name},
            )

        logger.info(
            "Parsing public suffix list",
            source=self.source_name,
            format=self.source_format,
            content_length=len(content),
        )

        rules: List[str] = []
        exception_rules: List[str] = []
        skipped = 0
        lines = content.split("\n")

        for line_number, line in enumerate(lines, start=1):
            line = line.strip()

            if line.startswith("//"):
                if (
                    not self.include_private_domains
                    and PSL_PRIVATE_SECTION_MARKER in line
                ):
                    break
                continue
            if not line:
                continue

            is_exception = line.startswith("!")
            raw_rule = line[1:] if is_exception else line

            try:
                encoded = encode_rule(raw_rule)
            except InvalidHostError as e:
                skipped += 1
                logger.warning(
                    "Skipping unencodable rule",
                    source=self.source_name,
                    line_number=line_number,
                    rule=line,
                    error=str(e),
                )
                continue

            if is_exception:
                exception_rules.append(encoded)
            else:
                rules.append(encoded)

        if not rules and not exception_rules:
            raise ParseError(
                f"No rules found in source {self.source_name}",
                context={"source_name": self.source_name, "total_lines": len(lines)},
            )

        logger.info(
            "Public suffix list parsing complete",
            source=self.source_name,
            total_lines=len(lines),
            rules=len(rules),
            exception_rules=len(exception_rules),
            skipped=skipped,
        )

        return ParsedRules(rules, exception_rules)
