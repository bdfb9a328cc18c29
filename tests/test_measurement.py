"""Tests for inch measurement parsing and formatting."""

import pytest

from slabgeom.measurement import fractional_components, format_inches, parse_inches, reduced_fraction


class TestParseInches:
    """Tests for measurement parsing."""

    @pytest.mark.parametrize("text,expected", [
        ("12.5", 12.5),
        ("12 1/2", 12.5),
        ("12-1/2", 12.5),
        ("3/8", 0.375),
        ("  7 ", 7.0),
        ("-1/2", -0.5),
    ])
    def test_accepted_forms(self, text, expected):
        assert parse_inches(text) == pytest.approx(expected)

    @pytest.mark.parametrize("text", ["", "abc", "1/0", "1 2 3", "a/b", None])
    def test_rejected_forms(self, text):
        assert parse_inches(text) is None


class TestFormatInches:
    """Tests for sixteenths formatting."""

    def test_mixed_number(self):
        assert format_inches(12.375) == "12 3/8"

    def test_bare_fraction(self):
        assert format_inches(0.5) == "1/2"

    def test_whole_number(self):
        assert format_inches(3) == "3"

    def test_rounding_carries_into_whole(self):
        """15.84 sixteenths rounds to a full inch."""
        assert format_inches(2.99) == "3"

    @pytest.mark.parametrize("value,expected", [
        (0.03125, "1/16"),
        (5 / 32, "3/16"),
        (2 + 3 / 32, "2 1/8"),
        (-0.03125, "-1/16"),
    ])
    def test_half_sixteenth_rounds_up(self, value, expected):
        assert format_inches(value) == expected

    def test_negative(self):
        assert format_inches(-1.25) == "-1 1/4"

    def test_components(self):
        assert fractional_components(5.0625) == (5, 1, 16, False)

    def test_reduced_fraction(self):
        assert reduced_fraction(4, 16) == (1, 4)
        assert reduced_fraction(0, 16) == (0, 16)
