"""
Unit tests for request validation.
"""

import pytest

from vanity_queue.api.validation import (
    InvalidSuffix,
    clamp_count,
    clamp_timeout,
    validate_suffix,
)
from vanity_queue.errors import InvalidInput


class TestValidateSuffix:
    """Tests for validate_suffix."""

    def test_valid_suffix(self):
        """Alphanumeric base58 suffixes pass unchanged."""
        assert validate_suffix("ab", max_length=5) == "ab"
        assert validate_suffix("Zz9", max_length=5) == "Zz9"

    @pytest.mark.parametrize("suffix", [None, "", 42, ["ab"]])
    def test_missing_or_not_a_string(self, suffix):
        """Missing and non-string suffixes are rejected."""
        with pytest.raises(InvalidSuffix, match="Missing or invalid suffix"):
            validate_suffix(suffix, max_length=5)

    @pytest.mark.parametrize("suffix", ["ab-c", "a b", "abé", "ab_"])
    def test_non_alphanumeric(self, suffix):
        """Symbols and non-ASCII letters are rejected."""
        with pytest.raises(InvalidSuffix, match="Suffix must be alphanumeric"):
            validate_suffix(suffix, max_length=5)

    def test_excluded_characters_listed(self):
        """Excluded characters are listed in the error."""
        with pytest.raises(InvalidSuffix) as exc_info:
            validate_suffix("a0O", max_length=5)

        assert str(exc_info.value) == (
            "Suffix contains characters not in the base58 alphabet: 0, O"
        )

    def test_excluded_characters_deduplicated(self):
        """Each excluded character is listed once, in order."""
        with pytest.raises(InvalidSuffix) as exc_info:
            validate_suffix("lIlI0", max_length=10)

        assert str(exc_info.value).endswith(": l, I, 0")

    @pytest.mark.parametrize(
        ("suffix", "listed"),
        [("0l-", "0, l"), ("a b O", "O"), ("I_I", "I")],
    )
    def test_excluded_characters_reported_before_symbols(self, suffix, listed):
        """Excluded characters are reported even alongside symbols."""
        with pytest.raises(InvalidSuffix) as exc_info:
            validate_suffix(suffix, max_length=10)

        assert str(exc_info.value) == (
            f"Suffix contains characters not in the base58 alphabet: {listed}"
        )

    def test_each_excluded_character_rejected(self):
        """Each of 0, O, I and l is rejected on its own."""
        for char in "0OIl":
            with pytest.raises(InvalidSuffix, match=f": {char}$"):
                validate_suffix(f"ab{char}", max_length=5)

    def test_too_long(self):
        """Suffixes over the limit are rejected."""
        with pytest.raises(InvalidSuffix, match="Max 3 chars"):
            validate_suffix("abcd", max_length=3)

    def test_is_invalid_input(self):
        """Suffix errors map to the invalid-input status."""
        assert issubclass(InvalidSuffix, InvalidInput)


class TestClampCount:
    """Tests for clamp_count."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (1, 1),
            (5, 5),
            (10, 10),
            (11, 10),
            (500, 10),
            (0, 1),
            (-3, 1),
            ("4", 4),
            (3.9, 3),
            ("abc", 1),
            (None, 1),
            (True, 1),
            (float("nan"), 1),
        ],
    )
    def test_clamp(self, value, expected):
        """Counts are coerced and clamped to 1-10."""
        assert clamp_count(value) == expected


class TestClampTimeout:
    """Tests for clamp_timeout."""

    def test_missing_uses_default(self):
        """No timeout means the configured default."""
        assert clamp_timeout(None, default_ms=120_000, max_ms=300_000) == 120_000

    def test_within_range(self):
        """An in-range timeout is kept."""
        assert clamp_timeout(5_000, default_ms=120_000, max_ms=300_000) == 5_000

    def test_clamped_to_max(self):
        """A large timeout is capped at the maximum."""
        assert clamp_timeout(10_000_000, default_ms=120_000, max_ms=300_000) == 300_000

    def test_non_numeric_uses_default(self):
        """A non-numeric timeout means the default."""
        assert clamp_timeout("soon", default_ms=120_000, max_ms=300_000) == 120_000

    def test_numeric_string(self):
        """A numeric string is parsed."""
        assert clamp_timeout("2500", default_ms=120_000, max_ms=300_000) == 2_500

    def test_non_positive_clamped_to_one(self):
        """Zero and negative timeouts become 1ms."""
        assert clamp_timeout(0, default_ms=120_000, max_ms=300_000) == 1
        assert clamp_timeout(-50, default_ms=120_000, max_ms=300_000) == 1

    def test_default_above_max_is_clamped(self):
        """The default is capped at the maximum too."""
        assert clamp_timeout(None, default_ms=900_000, max_ms=300_000) == 300_000
