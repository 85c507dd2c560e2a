"""
Tests for geometry module.
"""

import math

import pytest
from compas.datastructures import Mesh
from compas.geometry import Frame, Translation

from rapidgen.core.exceptions import RobotError
from rapidgen.core.geometry import (
    Interval,
    copy_frame,
    frame_from_normal,
    frame_quaternion,
    frame_relative_to,
    placeholder_mesh,
    transform_meshes,
)


class TestInterval:
    """Tests for Interval."""

    def test_contains_bounds(self):
        """Test that both bounds are inside the interval."""
        limits = Interval(-95.0, 155.0)
        assert limits.contains(-95.0)
        assert limits.contains(155.0)
        assert not limits.contains(155.1)

    def test_clamp(self):
        """Test clamping into the interval."""
        limits = Interval(0.0, 4000.0)
        assert limits.clamp(-10.0) == 0.0
        assert limits.clamp(5000.0) == 4000.0
        assert limits.clamp(1234.5) == 1234.5

    def test_inverted_raises(self):
        """Test that min larger than max is rejected."""
        with pytest.raises(RobotError):
            Interval(10.0, -10.0)

    def test_from_sequence(self):
        """Test building from a pair."""
        assert Interval.from_sequence([-1, 1]).to_list() == [-1.0, 1.0]
        with pytest.raises(RobotError):
            Interval.from_sequence([1, 2, 3])


class TestFrameHelpers:
    """Tests for frame construction helpers."""

    def test_frame_from_normal(self):
        """Test that the normal becomes the Z-axis."""
        frame = frame_from_normal([150.0, 0.0, 445.0], [0.0, 1.0, 0.0])
        assert list(frame.point) == pytest.approx([150.0, 0.0, 445.0])
        assert list(frame.zaxis) == pytest.approx([0.0, 1.0, 0.0])

    def test_copy_frame_is_independent(self):
        """Test that a copied frame does not share its point."""
        frame = Frame([1.0, 2.0, 3.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0])
        copy = copy_frame(frame)
        frame.point = [9.0, 9.0, 9.0]
        assert list(copy.point) == [1.0, 2.0, 3.0]

    def test_frame_relative_to(self):
        """Test expressing a frame in another frame."""
        reference = Frame([100.0, 0.0, 0.0], [0.0, 1.0, 0.0], [-1.0, 0.0, 0.0])
        frame = Frame([100.0, 50.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0])
        local = frame_relative_to(frame, reference)
        assert list(local.point) == pytest.approx([50.0, 0.0, 0.0])


class TestFrameQuaternion:
    """Tests for quaternions in the ABB convention."""

    def test_identity(self):
        """Test the world frame."""
        assert frame_quaternion(Frame.worldXY()) == pytest.approx((1.0, 0.0, 0.0, 0.0))

    def test_half_turn_about_y(self):
        """Test a tool pointing down."""
        frame = Frame([0.0, 0.0, 0.0], [-1.0, 0.0, 0.0], [0.0, 1.0, 0.0])
        w, x, y, z = frame_quaternion(frame)
        assert w == pytest.approx(0.0, abs=1e-9)
        assert abs(y) == pytest.approx(1.0)

    def test_first_component_not_negative(self):
        """Test canonization of the sign."""
        angle = math.radians(270.0)
        frame = Frame(
            [0.0, 0.0, 0.0],
            [math.cos(angle), math.sin(angle), 0.0],
            [-math.sin(angle), math.cos(angle), 0.0],
        )
        w, x, y, z = frame_quaternion(frame)
        assert w >= 0.0
        assert w == pytest.approx(math.cos(math.radians(45.0)))
        assert abs(z) == pytest.approx(math.sin(math.radians(45.0)))


class TestMeshes:
    """Tests for mesh helpers."""

    def test_placeholder_is_empty(self):
        """Test the placeholder mesh."""
        mesh = placeholder_mesh()
        assert isinstance(mesh, Mesh)
        assert mesh.number_of_vertices() == 0

    def test_transform_meshes_returns_copies(self):
        """Test that the input meshes are not changed."""
        mesh = Mesh.from_vertices_and_faces([[0, 0, 0], [1, 0, 0], [0, 1, 0]], [[0, 1, 2]])
        moved = transform_meshes([mesh], Translation.from_vector([0, 0, 10]))
        assert mesh.vertex_coordinates(0) == pytest.approx([0, 0, 0])
        assert moved[0].vertex_coordinates(0) == pytest.approx([0, 0, 10])
