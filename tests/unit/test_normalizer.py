"""
Tests for the text normalizer.

Checked invariants:
1. normalize applies its whitespace and punctuation steps in order
2. sanitize removes blacklisted characters and truncates by code points
3. SanitizeOptions is immutable and validated
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from core.validation import SanitizeOptions, normalize, sanitize
from core.validation.normalizer import ELLIPSIS


# =============================================================================
# normalize
# =============================================================================


class TestNormalize:
    """normalize: trimming, collapsing and punctuation spacing."""

    def test_reference_sentence(self):
        assert normalize("Hello!!!   World...") == "Hello! World" + ELLIPSIS

    def test_trims_and_collapses_whitespace(self):
        assert normalize("  a \t\n b  ") == "a b"

    def test_three_or_more_dots_become_ellipsis(self):
        assert normalize("Wait.....what") == "Wait" + ELLIPSIS + "what"

    def test_two_dots_collapse_to_one(self):
        assert normalize("end..") == "end."

    @pytest.mark.parametrize("raw, expected", [
        ("((nested))", "(nested)"),
        ("a--b", "a-b"),
        ("Why??", "Why?"),
        ("list,,of", "list, of"),
    ])
    def test_repeated_punctuation_collapses(self, raw, expected):
        assert normalize(raw) == expected

    def test_removes_space_before_closing_punctuation(self):
        assert normalize("end .") == "end."
        assert normalize("(see above )") == "(see above)"

    def test_inserts_space_after_sentence_punctuation(self):
        assert normalize("Hi ,there") == "Hi, there"
        assert normalize("one;two:three") == "one; two: three"

    def test_no_space_before_digits(self):
        assert normalize("Price: 3.50") == "Price: 3.50"
        assert normalize("v1.2") == "v1.2"

    def test_no_space_between_punctuation(self):
        assert normalize("Really?!") == "Really?!"
        assert normalize('He said:"go"') == 'He said:"go"'

    def test_unicode_punctuation_counts_as_punctuation(self):
        text = "wow!" + "\xab" + "quote" + "\xbb"
        assert normalize(text) == text

    def test_trailing_punctuation_untouched(self):
        assert normalize("Done.") == "Done."

    def test_empty(self):
        assert normalize("") == ""
        assert normalize("   ") == ""


# =============================================================================
# sanitize
# =============================================================================


class TestSanitize:
    """sanitize: filter pipeline after normalize."""

    def test_removes_angle_brackets(self):
        assert sanitize("a<b>c") == "abc"

    def test_removes_shell_metacharacters(self):
        assert sanitize("a`b~c^d|e\\f") == "abcdef"

    def test_removes_bidi_override(self):
        assert sanitize("abc" + chr(0x202E) + "def") == "abcdef"

    def test_removes_format_characters(self):
        assert sanitize("zero" + chr(0x200B) + "width") == "zerowidth"
        assert sanitize("soft" + chr(0xAD) + "hyphen") == "softhyphen"
        assert sanitize(chr(0xFEFF) + "bom") == "bom"

    def test_removes_control_characters(self):
        assert sanitize("bell\x07 and null\x00") == "bell and null"

    def test_default_truncates_to_1000(self):
        assert len(sanitize("x" * 1500)) == 1000

    def test_custom_max_length(self):
        assert sanitize("abcdef", max_length=3) == "abc"

    def test_truncation_counts_code_points(self):
        assert sanitize("\xe9" * 5, max_length=3) == "\xe9" * 3

    def test_max_length_none_disables_truncation(self):
        assert len(sanitize("x" * 1500, max_length=None)) == 1500

    def test_whitelist_drops_other_characters(self):
        text = "caf\xe9 " + chr(0x2603) + " ok"
        assert sanitize(text, use_whitelist=True) == "caf\xe9  ok"

    def test_whitelist_off_by_default(self):
        text = "snow " + chr(0x2603)
        assert sanitize(text) == text

    def test_tab_and_newline_options_cannot_restore_whitespace(self):
        assert sanitize("a\tb\nc", allow_tabs=True, allow_newlines=True) == "a b c"
        assert sanitize("a\tb\nc") == "a b c"

    def test_custom_blacklist_replaces_default(self):
        opts = SanitizeOptions(blacklist_patterns=(r"\d",))
        assert sanitize("a1b2<c>", opts) == "ab<c>"

    def test_keyword_overrides_apply_on_top_of_options(self):
        opts = SanitizeOptions(max_length=10)
        assert sanitize("abcdef", opts, max_length=2) == "ab"
        assert opts.max_length == 10


class TestSanitizeOptions:
    def test_defaults(self):
        opts = SanitizeOptions()
        assert opts.max_length == 1000
        assert opts.allow_tabs is False
        assert opts.allow_newlines is False
        assert opts.use_whitelist is False
        assert len(opts.blacklist_patterns) == 4

    def test_frozen(self):
        opts = SanitizeOptions()
        with pytest.raises(PydanticValidationError):
            opts.max_length = 5

    def test_negative_length_rejected(self):
        with pytest.raises(PydanticValidationError):
            SanitizeOptions(max_length=-1)

    def test_unknown_option_rejected(self):
        with pytest.raises(PydanticValidationError):
            SanitizeOptions(maxlen=5)
