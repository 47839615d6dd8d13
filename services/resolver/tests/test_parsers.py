"""Tests for the public suffix list parser."""

import pytest
from unittest.mock import patch
from common import ParseError
from resolver.parsers import SuffixListParser, encode_rule


def test_parser_splits_rules_and_exceptions(sample_psl_content):
    """Test ordinary and exception rules are separated in document order."""
    parsed = SuffixListParser().parse(sample_psl_content)

    assert parsed.rules == [
        "com",
        "jp",
        "*.kobe.jp",
        "uk",
        "co.uk",
        "*.ck",
        "xn--55qx5d.cn",
        "cn",
        "blogspot.com",
    ]
    assert parsed.exception_rules == ["city.kobe.jp", "www.ck"]


def test_parser_skips_comments_and_blank_lines():
    """Test comment and blank lines produce no rules."""
    content = """
// comment
   // indented comment

com
"""
    parsed = SuffixListParser().parse(content)

    assert parsed.rules == ["com"]
    assert parsed.exception_rules == []


def test_parser_keeps_duplicates_and_order():
    """Test rules are neither deduplicated nor sorted."""
    parsed = SuffixListParser().parse("org\ncom\norg\n")

    assert parsed.rules == ["org", "com", "org"]


def test_parser_strips_whitespace_and_crlf():
    """Test surrounding whitespace and CRLF line endings are ignored."""
    parsed = SuffixListParser().parse("  com  \r\n!Www.CK\r\n")

    assert parsed.rules == ["com"]
    assert parsed.exception_rules == ["www.ck"]


def test_parser_excludes_private_domains(sample_psl_content):
    """Test parsing stops at the private section when asked."""
    parsed = SuffixListParser(include_private_domains=False).parse(sample_psl_content)

    assert "blogspot.com" not in parsed.rules
    assert "com" in parsed.rules


def test_parser_skips_unencodable_rules():
    """Test a rule that is not a valid host is skipped, not fatal."""
    parsed = SuffixListParser().parse("com\nbad rule\n!also bad\norg\n")

    assert parsed.rules == ["com", "org"]
    assert parsed.exception_rules == []


def test_parser_empty_content():
    """Test empty content raises ParseError."""
    parser = SuffixListParser("test_source")

    with pytest.raises(ParseError) as exc_info:
        parser.parse("")
    assert "test_source" in str(exc_info.value)

    with pytest.raises(ParseError):
        parser.parse("   \n\n")


def test_parser_only_comments():
    """Test a document without rules raises ParseError."""
    with pytest.raises(ParseError):
        SuffixListParser().parse("// nothing here\n// at all\n")


def test_encode_rule_keeps_wildcard():
    """Test the wildcard prefix survives encoding of the domain part."""
    assert encode_rule("*.Kobe.JP") == "*.kobe.jp"
    assert encode_rule("*.公司.cn") == "*.xn--55qx5d.cn"
    assert encode_rule("CO.UK") == "co.uk"


def test_parser_initialization():
    """Test parser attributes."""
    parser = SuffixListParser("psl", include_private_domains=False)

    assert parser.source_name == "psl"
    assert parser.source_format == "psl"
    assert parser.include_private_domains is False


def test_parser_logs_source_and_format():
    """Test parse logs the source name and document format."""
    parser = SuffixListParser("psl_mirror")

    with patch("resolver.parsers.suffix_list_parser.logger") as mock_logger:
        parser.parse("com\n")

    start = mock_logger.info.call_args_list[0]
    assert start.args == ("Parsing public suffix list",)
    assert start.kwargs["source"] == "psl_mirror"
    assert start.kwargs["format"] == "psl"
