"""Tests for text normalization."""

import unittest
from unittest.mock import patch

from kill_zen_all.core import normalizer
from kill_zen_all.core.normalizer import (
    Replacement,
    apply_replacements,
    fold_width,
    normalize,
    to_half_width,
)
from kill_zen_all.exceptions import NormalizeError

RULES = (Replacement("foo", "bar"), Replacement("baz", "qux"))
SAMPLE = "foo baz １２３４！？"


class TestNormalize(unittest.TestCase):
    """Test suite for normalize()"""

    def test_replacements_with_exclusions(self):
        self.assertEqual(normalize(SAMPLE, RULES, {"！", "？"}), "bar qux 1234！？")

    def test_replacements_without_exclusions(self):
        self.assertEqual(normalize(SAMPLE, RULES, frozenset()), "bar qux 1234!?")

    def test_exclusions_without_replacements(self):
        self.assertEqual(normalize(SAMPLE, (), {"！", "？"}), "foo baz 1234！？")

    def test_no_replacements_no_exclusions(self):
        self.assertEqual(normalize(SAMPLE), "foo baz 1234!?")

    def test_partial_exclusions(self):
        self.assertEqual(normalize(SAMPLE, (), {"！"}), "foo baz 1234！?")
        self.assertEqual(normalize(SAMPLE, RULES, {"！"}), "bar qux 1234！?")

    def test_fullwidth_letters(self):
        self.assertEqual(normalize("ＡＢＣａｂｃ"), "ABCabc")

    def test_output_is_deterministic(self):
        first = normalize(SAMPLE, RULES, {"！"})
        self.assertEqual(first, normalize(SAMPLE, RULES, {"！"}))

    def test_rules_apply_sequentially(self):
        """A replacement can feed a later rule"""
        rules = (Replacement("a", "b"), Replacement("b", "c"))
        self.assertEqual(normalize("ab", rules), "cc")
        reversed_rules = (Replacement("b", "c"), Replacement("a", "b"))
        self.assertEqual(normalize("ab", reversed_rules), "bc")

    def test_sequential_rules_are_not_idempotent(self):
        rules = (Replacement("x", "xx"),)
        once = normalize("x", rules)
        self.assertEqual(once, "xx")
        self.assertNotEqual(normalize(once, rules), once)

    def test_duplicate_rules_apply_twice(self):
        rules = (Replacement("a", "aa"), Replacement("a", "aa"))
        self.assertEqual(normalize("a", rules), "aaaa")

    def test_replacement_output_is_folded(self):
        rules = (Replacement("CRLF", "！"),)
        self.assertEqual(normalize("CRLF", rules), "!")
        self.assertEqual(normalize("CRLF", rules, {"！"}), "！")

    def test_empty_original_is_skipped(self):
        rules = (Replacement("", "x"),)
        self.assertEqual(normalize("abc", rules), "abc")

    def test_default_rules(self):
        rules = (Replacement("，", ", "), Replacement("．", ". "))
        self.assertEqual(normalize("はい，そうです．", rules), "はい, そうです. ")


class TestFoldWidth(unittest.TestCase):
    """Test suite for width folding"""

    def test_every_char_in_range_maps_by_offset(self):
        for code in range(0xFF01, 0xFF5F):
            char = chr(code)
            self.assertEqual(fold_width(char), chr(code - 0xFEE0))

    def test_excluded_chars_in_range_are_kept(self):
        for code in range(0xFF01, 0xFF5F):
            char = chr(code)
            self.assertEqual(fold_width(char, {char}), char)

    def test_chars_outside_range_are_untouched(self):
        samples = "＀｟　〜ｱｲｳ日本語abc!?　\U0001F600"
        self.assertEqual(fold_width(samples), samples)
        self.assertEqual(fold_width(samples, set(samples)), samples)

    def test_idempotent_once_folded(self):
        once = fold_width(SAMPLE + "ＡＢＣ")
        self.assertEqual(fold_width(once), once)
        kept = fold_width(SAMPLE, {"！"})
        self.assertEqual(fold_width(kept, {"！"}), kept)

    def test_to_half_width(self):
        self.assertEqual(to_half_width("！"), "!")
        self.assertEqual(to_half_width("～"), "~")
        self.assertEqual(to_half_width("あ"), "あ")
        self.assertEqual(to_half_width("ab"), "ab")

    def test_apply_replacements_is_plain_substring(self):
        rules = (Replacement(".*", "X"),)
        self.assertEqual(apply_replacements("a.*b", rules), "aXb")
        self.assertEqual(apply_replacements("ab", rules), "ab")


class TestNormalizeError(unittest.TestCase):
    """A broken internal pattern surfaces as NormalizeError"""

    def test_bad_pattern_raises(self):
        with patch.object(normalizer, "FULLWIDTH_PATTERN", "[！-"):
            with self.assertRaises(NormalizeError):
                normalize("text")


if __name__ == "__main__":
    unittest.main()
