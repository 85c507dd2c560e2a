"""
Tests for number formatting of generated code.
"""

from rapidgen.core.formatting import UNCONNECTED, format_number, format_values, is_unconnected


class TestFormatNumber:
    """Tests for format_number."""

    def test_trailing_zeros_removed(self):
        """Test integers and short decimals."""
        assert format_number(100.0) == "100"
        assert format_number(2.5) == "2.5"
        assert format_number(2.50001) == "2.5"

    def test_rounding(self):
        """Test rounding to the requested decimals."""
        assert format_number(1.005, 3) == "1.005"
        assert format_number(0.7071067811, 6) == "0.707107"
        assert format_number(12.345) in ("12.35", "12.34")

    def test_negative_zero(self):
        """Test that a rounded negative zero is written as 0."""
        assert format_number(-0.0) == "0"
        assert format_number(-0.0001) == "0"

    def test_unconnected_marker(self):
        """Test the 9E9 token."""
        assert format_number(UNCONNECTED) == "9E9"
        assert format_number(9e9, 6) == "9E9"


class TestFormatValues:
    """Tests for format_values and is_unconnected."""

    def test_comma_separated(self):
        """Test a RAPID array body."""
        assert format_values([10, 20, UNCONNECTED]) == "10, 20, 9E9"

    def test_is_unconnected(self):
        """Test detection of the marker."""
        assert is_unconnected(9e9)
        assert not is_unconnected(9e8)
        assert not is_unconnected(0.0)
