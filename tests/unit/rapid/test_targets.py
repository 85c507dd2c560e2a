"""
Tests for robot targets.
"""

import pytest
from compas.geometry import Frame

from rapidgen.core.exceptions import ActionError
from rapidgen.kinematics.joint_positions import ExternalJointPosition
from rapidgen.rapid.targets import RobotTarget


class TestRobotTarget:
    """Tests for RobotTarget."""

    def test_names(self):
        """Test the robtarget and jointtarget names."""
        target = RobotTarget("p10", Frame.worldXY())
        assert target.rob_target_name == "p10"
        assert target.joint_target_name == "p10_jt"
        assert str(target) == "Target (p10)"

    def test_defaults(self):
        """Test automatic configuration and unconnected axes."""
        target = RobotTarget("p10", Frame.worldXY())
        assert target.axis_config is None
        assert target.external_joint_position == ExternalJointPosition()

    def test_external_values_from_list(self):
        """Test that plain values become an external joint position."""
        target = RobotTarget("p10", Frame.worldXY(), external_joint_position=[500.0])
        assert isinstance(target.external_joint_position, ExternalJointPosition)
        assert target.external_joint_position["a"] == 500.0

    def test_invalid_name(self):
        """Test that names must be RAPID identifiers."""
        with pytest.raises(ActionError):
            RobotTarget("10p", Frame.worldXY())
        with pytest.raises(ActionError):
            RobotTarget("p-10", Frame.worldXY())

    def test_invalid_config(self):
        """Test that configurations are 0-7."""
        with pytest.raises(ActionError):
            RobotTarget("p10", Frame.worldXY(), axis_config=8)

    def test_quaternion(self):
        """Test the target orientation."""
        target = RobotTarget("p10", Frame.worldXY())
        assert target.quaternion == pytest.approx((1.0, 0.0, 0.0, 0.0))
