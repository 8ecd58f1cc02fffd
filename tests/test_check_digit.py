"""Unit tests for check digits."""

import zlib

import pytest

from codec.alphabet import alphabet_for
from codec.check_digit import (
    CheckDigit,
    append_check_digit,
    compute_check_digit,
    crc32_check_digit,
    normalize_code,
    valid_check_digit,
)
from core.errors import CheckDigitError, UnsupportedRadix

SAMPLES = ["1234567890", "3NQK8N", "hello world", "a", "6AICYumu0Xz", "ünïcode", "0" * 40]
RADICES = [2, 10, 16, 32, 36, 62, 64, 94]


class TestCrc32CheckDigit:
    """Tests for the default strategy."""

    def test_known_decimal_check_digit(self):
        """1234567890 gets check digit 5 in radix 10."""
        assert append_check_digit("1234567890", 10) == "12345678905"

    def test_digit_is_crc_mod_radix(self):
        for radix in RADICES:
            expected = alphabet_for(radix).chars[zlib.crc32(b"hello world") % radix]
            assert crc32_check_digit("hello world", radix) == expected

    def test_default_radix_is_10(self):
        assert compute_check_digit("1234567890") == "5"

    def test_accepts_integers(self):
        assert append_check_digit(1234567890) == "12345678905"

    def test_unsupported_radix(self):
        with pytest.raises(UnsupportedRadix):
            append_check_digit("abc", 95)


class TestVerify:
    """Tests for verification."""

    def test_appended_digit_verifies(self):
        """verify(append(s, r), r) for every sample and radix."""
        for radix in RADICES:
            for sample in SAMPLES:
                assert valid_check_digit(append_check_digit(sample, radix), radix)

    def test_wrong_check_digit_fails(self):
        """Replacing the check digit with any other character is always caught."""
        for radix in (10, 32, 62):
            id = append_check_digit("1234567890", radix)
            for char in alphabet_for(radix).chars:
                if char != id[-1]:
                    assert not valid_check_digit(id[:-1] + char, radix)

    def test_body_corruption_mostly_caught(self):
        """Single-character body changes are caught with high probability (~1 - 1/radix)."""
        chars = alphabet_for(62).chars
        id = append_check_digit("6AICYumu0XzQ", 62)
        caught = total = 0
        for position in range(len(id) - 1):
            for char in chars[::3]:
                if char == id[position]:
                    continue
                mutated = id[:position] + char + id[position + 1:]
                total += 1
                caught += not valid_check_digit(mutated, 62)
        assert caught / total > 0.9

    def test_mismatch_returns_false_not_raise(self):
        assert valid_check_digit("12345678904", 10) is False

    def test_empty_or_lone_wrong_digit_is_invalid(self):
        assert valid_check_digit("", 10) is False
        assert valid_check_digit("5", 10) is False

    def test_strip(self):
        engine = CheckDigit()
        assert engine.strip("12345678905", 10) == "1234567890"
        assert engine.strip("12345678904", 10) is None


class TestCustomStrategy:
    """Tests for injected strategies."""

    def test_custom_strategy_used(self):
        engine = CheckDigit(lambda id, radix: alphabet_for(radix).chars[len(id) % radix])
        assert engine.append("abc", 10) == "abc3"
        assert engine.verify("abc3", 10)
        assert not engine.verify("abc4", 10)

    def test_strategy_must_return_one_character(self):
        engine = CheckDigit(lambda id, radix: "XY")
        with pytest.raises(CheckDigitError):
            engine.append("abc", 62)

    def test_instances_do_not_share_strategy(self):
        custom = CheckDigit(lambda id, radix: "0")
        assert custom.compute("1234567890") == "0"
        assert CheckDigit().compute("1234567890") == "5"


class TestNormalizeCode:
    """Tests for hand-typed code clean-up."""

    def test_ambiguous_characters_fold(self):
        assert normalize_code("1liO0a") == "11100A"

    def test_separators_removed(self):
        assert normalize_code("ab-cd ef") == "ABCDEF"
