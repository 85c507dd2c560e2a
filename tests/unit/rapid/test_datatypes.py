"""
Tests for speed data, zone data and work objects.
"""

import pytest
from compas.geometry import Frame

from rapidgen.core.exceptions import ActionError
from rapidgen.rapid.datatypes import SpeedData, WorkObject, ZoneData, pose_code


class TestSpeedData:
    """Tests for SpeedData."""

    def test_predefined_not_declared(self):
        """Test that vXXX values need no declaration."""
        speed = SpeedData.predefined_speed(100)
        assert speed.name == "v100"
        assert speed.predefined
        assert speed.declaration_code() == ""

    def test_custom_declaration(self):
        """Test a user defined speed."""
        speed = SpeedData("vweld", 12.5)
        assert speed.declaration_code() == "VAR speeddata vweld := [12.5, 500, 5000, 1000];"

    def test_from_value_nearest(self):
        """Test rounding to the nearest predefined speed."""
        assert SpeedData.from_value(120).name == "v100"
        assert SpeedData.from_value(9000).name == "v7000"

    def test_unknown_predefined(self):
        """Test that only controller speeds are predefined."""
        with pytest.raises(ActionError):
            SpeedData.predefined_speed(123)

    def test_invalid(self):
        """Test invalid names and negative speeds."""
        with pytest.raises(ActionError):
            SpeedData("my speed", 10)
        with pytest.raises(ActionError):
            SpeedData("vneg", -1)


class TestZoneData:
    """Tests for ZoneData."""

    def test_fine(self):
        """Test the fine point."""
        zone = ZoneData.from_value(-1)
        assert zone.name == "fine"
        assert zone.fine_point
        assert zone.declaration_code() == ""

    def test_predefined(self):
        """Test radii of predefined zones."""
        assert ZoneData.from_value(0).name == "z0"
        assert ZoneData.from_value(10).name == "z10"
        assert ZoneData.from_value(10).predefined

    def test_custom(self):
        """Test a radius without a predefined zone."""
        zone = ZoneData.from_value(2)
        assert zone.name == "zone2"
        assert not zone.predefined
        assert zone.declaration_code() == "VAR zonedata zone2 := [FALSE, 2, 3, 3, 0.3, 3, 0.3];"

    def test_fractional_custom_name(self):
        """Test that fractional radii give valid identifiers."""
        assert ZoneData.from_value(2.5).name == "zone2_5"

    def test_negative_precision(self):
        """Test that only -1 is accepted below zero."""
        with pytest.raises(ActionError):
            ZoneData.from_value(-2)


class TestWorkObject:
    """Tests for WorkObject."""

    def test_wobj0_predefined(self):
        """Test the default work object."""
        wobj = WorkObject()
        assert wobj.predefined
        assert wobj.declaration_code() == ""

    def test_declaration(self):
        """Test a user frame offset along X."""
        user = Frame([1000.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0])
        wobj = WorkObject("wobj_fixture", user_frame=user)
        assert wobj.declaration_code() == (
            'PERS wobjdata wobj_fixture := [FALSE, TRUE, "", '
            "[[1000, 0, 0], [1, 0, 0, 0]], [[0, 0, 0], [1, 0, 0, 0]]];"
        )

    def test_moved_by_external_axis(self, turntable):
        """Test a work object on a turntable."""
        wobj = WorkObject("wobj_table", user_frame=turntable.attachment_frame, external_axis=turntable)
        code = wobj.declaration_code()
        assert code.startswith('PERS wobjdata wobj_table := [FALSE, FALSE, "table", ')

    def test_global_frame(self):
        """Test that the object frame lies inside the user frame."""
        user = Frame([1000.0, 0.0, 0.0], [0.0, 1.0, 0.0], [-1.0, 0.0, 0.0])
        obj = Frame([100.0, 0.0, 50.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0])
        wobj = WorkObject("wobj1", user_frame=user, object_frame=obj)
        assert list(wobj.global_frame.point) == pytest.approx([1000.0, 100.0, 50.0])

    def test_invalid_name(self):
        """Test that the name must be a RAPID identifier."""
        with pytest.raises(ActionError):
            WorkObject("2nd")


class TestPoseCode:
    """Tests for pose literals."""

    def test_world(self):
        """Test the world frame."""
        assert pose_code(Frame.worldXY()) == "[[0, 0, 0], [1, 0, 0, 0]]"
