"""
Tests for closed-form inverse kinematics.
"""

import math

import numpy as np
import pytest
from compas.geometry import Frame

from rapidgen.core.exceptions import ActionError
from rapidgen.core.geometry import Interval
from rapidgen.kinematics.inverse import (
    InverseKinematics,
    axis_configuration,
    fit_angle,
    normalize_angle,
)
from rapidgen.kinematics.joint_positions import ExternalJointPosition
from rapidgen.kinematics.robot import Robot


class TestAngleHelpers:
    """Tests for angle wrapping and fitting."""

    def test_normalize(self):
        """Test wrapping into (-180, 180]."""
        assert normalize_angle(190.0) == pytest.approx(-170.0)
        assert normalize_angle(-180.0) == 180.0
        assert normalize_angle(540.0) == 180.0
        assert normalize_angle(-30.0) == pytest.approx(-30.0)

    def test_fit_prefers_reference(self):
        """Test choosing the equivalent angle closest to the reference."""
        limits = Interval(-400.0, 400.0)
        assert fit_angle(200.0, limits, 0.0) == pytest.approx(-160.0)
        assert fit_angle(200.0, limits, 300.0) == pytest.approx(200.0)

    def test_fit_respects_limits(self):
        """Test that an equivalent angle inside the limits is chosen."""
        assert fit_angle(-170.0, Interval(0.0, 360.0), 0.0) == pytest.approx(190.0)

    def test_fit_none_inside(self):
        """Test that the wrapped value is returned when nothing fits."""
        assert fit_angle(170.0, Interval(-90.0, 90.0)) == pytest.approx(170.0)

    def test_axis_configuration_bits(self):
        """Test the cfx numbering."""
        assert axis_configuration(False, False, False) == 0
        assert axis_configuration(False, False, True) == 1
        assert axis_configuration(False, True, False) == 2
        assert axis_configuration(True, False, False) == 4
        assert axis_configuration(True, True, True) == 7


class TestInverseKinematics:
    """Tests for solving the IRB 2600ID."""

    def test_eight_candidates(self, robot):
        """Test that every configuration has a candidate."""
        target = robot.forward_kinematics([0, 10, 10, 10, 30, 20]).tcp_frame
        ik = robot.solve_frame(target)
        assert sorted(ik.solutions) == list(range(8))

    def test_selects_closest_valid(self, robot):
        """Test automatic selection with two valid configurations."""
        q = [0, 10, 10, 10, 30, 20]
        target = robot.forward_kinematics(q).tcp_frame
        ik = robot.solve_frame(target)

        assert ik.axis_configuration == 0
        assert ik.robot_joint_position.to_list() == pytest.approx(q, abs=1e-6)
        assert ik.error_text == []
        flipped = ik.solution(1)
        assert flipped.reachable and flipped.in_limits
        assert flipped.robot_joint_position[4] == pytest.approx(-30.0, abs=1e-6)

    def test_all_reachable_candidates_reach_target(self, robot):
        """Test that every reachable candidate reproduces the target."""
        target = robot.forward_kinematics([30, 20, -10, 45, 60, -30]).tcp_frame
        ik = robot.solve_frame(target)
        for solution in ik.solutions.values():
            if not solution.reachable:
                continue
            fk = robot.forward_kinematics(solution.robot_joint_position, hide_mesh=True)
            assert list(fk.tcp_frame.point) == pytest.approx(list(target.point), abs=1e-6)
            assert list(fk.tcp_frame.xaxis) == pytest.approx(list(target.xaxis), abs=1e-6)
            assert list(fk.tcp_frame.yaxis) == pytest.approx(list(target.yaxis), abs=1e-6)

    def test_fixed_config(self, robot):
        """Test a pinned axis configuration."""
        target = robot.forward_kinematics([0, 10, 10, 10, 30, 20]).tcp_frame
        ik = robot.solve_frame(target, fixed_config=1)
        assert ik.axis_configuration == 1
        assert ik.robot_joint_position[4] < 0.0

    def test_invalid_fixed_config(self, robot):
        """Test that configurations are 0-7."""
        with pytest.raises(ActionError):
            InverseKinematics(robot, Frame.worldXY(), fixed_config=8)

    def test_reference_selects_branch(self, robot):
        """Test that the reference decides between valid configurations."""
        q = [0, 10, 10, 10, 30, 20]
        target = robot.forward_kinematics(q).tcp_frame
        flipped = robot.solve_frame(target).solution(1).robot_joint_position
        ik = robot.solve_frame(target, reference=flipped)
        assert ik.axis_configuration == 1

    def test_out_of_reach(self, robot):
        """Test a target far outside the workspace."""
        target = Frame([5000.0, 0.0, 0.0], [-1.0, 0.0, 0.0], [0.0, 1.0, 0.0])
        ik = robot.solve_frame(target)
        assert "Target is out of reach." in ik.error_text
        assert "No axis configuration is within the joint limits." in ik.error_text
        assert ik.robot_joint_position is not None

    def test_behind_lower_arm(self, robot):
        """Test a pose with the wrist centre behind the lower arm."""
        q = [0, 150, -175, 0, 60, 0]
        target = robot.forward_kinematics(q).tcp_frame
        ik = robot.solve_frame(target, reference=q)
        assert ik.axis_configuration == 2
        assert ik.robot_joint_position.to_list() == pytest.approx(q, abs=1e-6)

    def test_out_of_limits_reported(self, robot):
        """Test a target that is only reachable outside the joint limits."""
        limited = Robot(
            name="limited",
            joint_frames=robot.joint_frames,
            joint_limits=[Interval(-10.0, 10.0), *robot.joint_limits[1:]],
            mounting_frame=robot.mounting_frame,
        )
        target = robot.forward_kinematics([90, 10, 10, 0, 45, 0]).tcp_frame
        ik = limited.solve_frame(target)
        assert "No axis configuration is within the joint limits." in ik.error_text
        assert "Internal axis value 1 is not in range." in ik.error_text
        assert ik.internal_axis_in_limits[0] is False

    def test_wrist_singularity(self, robot):
        """Test that axis 5 at zero keeps axis 4 at the reference."""
        target = robot.forward_kinematics([20, 10, 10, 0, 0, 0]).tcp_frame
        ik = robot.solve_frame(target)
        fk = robot.forward_kinematics(ik.robot_joint_position)
        assert ik.robot_joint_position[4] == pytest.approx(0.0, abs=1e-6)
        assert list(fk.tcp_frame.point) == pytest.approx(list(target.point), abs=1e-6)
        assert list(fk.tcp_frame.xaxis) == pytest.approx(list(target.xaxis), abs=1e-6)

    def test_distance_to_reference(self, robot):
        """Test the joint space distance of a candidate."""
        target = robot.forward_kinematics([0, 0, 0, 0, 30, 0]).tcp_frame
        ik = robot.solve_frame(target)
        solution = ik.solution(ik.axis_configuration)
        assert solution.distance_to(ik.reference) == pytest.approx(30.0, abs=1e-6)


class TestInverseKinematicsExternalAxes:
    """Tests for external axis resolution."""

    def test_defined_track_value_kept(self, track_robot):
        """Test that a given track value is used."""
        q = [10, 20, 10, 0, 45, 0]
        target = track_robot.forward_kinematics(q, ExternalJointPosition(800, 0)).tcp_frame
        ik = track_robot.solve_frame(target, ExternalJointPosition(800, 0), reference=q)
        assert ik.external_joint_position[0] == pytest.approx(800.0)
        assert ik.robot_joint_position.to_list() == pytest.approx(q, abs=1e-6)

    def test_undefined_track_value_follows_target(self, track_robot):
        """Test that the track moves to the point closest to the target."""
        target = Frame([2500.0, 0.0, 800.0], [-1.0, 0.0, 0.0], [0.0, 1.0, 0.0])
        ik = track_robot.solve_frame(target)
        assert ik.external_joint_position[0] == pytest.approx(2500.0)
        assert ik.external_joint_position[1] == pytest.approx(0.0)
        assert not ik.external_joint_position.is_defined(2)

    def test_track_value_clamped(self, track_robot):
        """Test that the closest track value stays within the limits."""
        target = Frame([-500.0, 0.0, 800.0], [-1.0, 0.0, 0.0], [0.0, 1.0, 0.0])
        ik = track_robot.solve_frame(target)
        assert ik.external_joint_position[0] == pytest.approx(0.0)

    def test_external_limits_checked(self, track_robot):
        """Test the message for a track value outside the limits."""
        target = track_robot.forward_kinematics([0] * 6, ExternalJointPosition(5000, 0)).tcp_frame
        ik = track_robot.solve_frame(target, ExternalJointPosition(5000, 0))
        assert "External axis value 1 is not in range." in ik.error_text
        assert not ik.in_limits

    def test_solution_vector_form(self, robot):
        """Test the numpy form of the solved joints."""
        target = robot.forward_kinematics([0, 0, 0, 0, 45, 0]).tcp_frame
        ik = robot.solve_frame(target)
        assert isinstance(ik.robot_joint_position.to_array(), np.ndarray)
        assert math.isclose(ik.robot_joint_position[4], 45.0, abs_tol=1e-6)
