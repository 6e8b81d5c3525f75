"""
Unit tests for kazi/utils.py

Tests phone normalisation, HTML escaping and share-text helpers.
"""

import pytest

from kazi.utils import encode_uri_component, escape_html, format_phone_to_standard, truncate


class TestFormatPhoneToStandard:
    """Tests for format_phone_to_standard()."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("0712345678", "254712345678"),
            ("254712345678", "254712345678"),
            ("712345678", "254712345678"),
            ("+254 712-345-678", "254712345678"),
            ("0712 345 678", "254712345678"),
        ],
    )
    def test_normalises_kenyan_numbers(self, raw, expected):
        """Local, international and bare subscriber forms map to 254XXXXXXXXX."""
        assert format_phone_to_standard(raw) == expected

    @pytest.mark.parametrize("raw", ["", None, "abc", "+ - ()"])
    def test_empty_or_digitless_input_yields_empty_string(self, raw):
        assert format_phone_to_standard(raw) == ""

    def test_is_idempotent(self):
        once = format_phone_to_standard("0712345678")
        assert format_phone_to_standard(once) == once


class TestEscapeHtml:
    """Tests for escape_html()."""

    def test_escapes_script_tag(self):
        assert escape_html("<script>") == "&lt;script&gt;"

    def test_escapes_all_special_characters(self):
        assert escape_html("a & b \"c\" 'd'") == "a &amp; b &quot;c&quot; &#039;d&#039;"

    @pytest.mark.parametrize("value", ["", None])
    def test_falsy_input_yields_empty_string(self, value):
        assert escape_html(value) == ""

    def test_plain_text_unchanged(self):
        assert escape_html("Kazi Mashinani") == "Kazi Mashinani"


class TestTruncate:
    """Tests for truncate()."""

    def test_long_text_cut_to_limit_with_ellipsis(self):
        text = "x" * 150
        assert truncate(text) == "x" * 100 + "..."

    def test_short_text_still_gets_ellipsis(self):
        assert truncate("short") == "short..."

    def test_none_becomes_ellipsis(self):
        assert truncate(None) == "..."


class TestEncodeUriComponent:
    """Tests for encode_uri_component()."""

    def test_encodes_spaces_and_reserved_characters(self):
        assert encode_uri_component("a b&c=d/e") == "a%20b%26c%3Dd%2Fe"

    def test_keeps_unreserved_marks(self):
        assert encode_uri_component("-_.!~*'()") == "-_.!~*'()"

    def test_encodes_non_ascii_as_utf8(self):
        assert encode_uri_component("é") == "%C3%A9"
