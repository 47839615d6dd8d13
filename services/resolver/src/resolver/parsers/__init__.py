"""Parsers package."""

from .base_parser import BaseParser
from .suffix_list_parser import SuffixListParser, ParsedRules, encode_rule

__all__ = ["BaseParser", "SuffixListParser", "ParsedRules", "encode_rule"]
