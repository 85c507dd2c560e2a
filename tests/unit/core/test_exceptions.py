"""
Tests for the exception hierarchy.
"""

import pytest

from rapidgen.core.exceptions import (
    ActionError,
    AxisIndexError,
    AxisMismatchError,
    ConfigurationError,
    RapidGenError,
    RobotError,
)


class TestExceptions:
    """Tests for rapidgen exceptions."""

    @pytest.mark.parametrize("error_type", [ConfigurationError, RobotError, ActionError])
    def test_common_base(self, error_type):
        """Test that every error can be caught as RapidGenError."""
        with pytest.raises(RapidGenError):
            raise error_type("failed")

    def test_details_in_message(self):
        """Test the string form with details."""
        error = RobotError("Unknown robot preset", details={"available": ["IRB140"]})
        assert str(error) == "Unknown robot preset - Details: {'available': ['IRB140']}"

    def test_message_without_details(self):
        """Test the string form without details."""
        assert str(ActionError("Invalid target name")) == "Invalid target name"

    def test_axis_mismatch_is_action_error(self):
        """Test the mismatch error carries the axis index."""
        error = AxisMismatchError("mismatch", index=2)
        assert isinstance(error, ActionError)
        assert error.index == 2

    def test_axis_index_error_is_index_error(self):
        """Test the index error can be caught as IndexError."""
        with pytest.raises(IndexError):
            raise AxisIndexError("out of range", index=7)
