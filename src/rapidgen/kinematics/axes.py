"""
External axes support for robotic systems.

This module provides support for external axes including:
- Linear tracks (the robot base rides on the axis)
- Rotational positioners (turntables carrying a work object)

An external axis is a single tagged value: the behaviour of every operation
is selected by its ``axis_type``.
"""

import math
from dataclasses import dataclass, field, replace
from enum import Enum

from compas.datastructures import Mesh
from compas.geometry import Frame, Line, Plane, Rotation, Transformation, Translation

from rapidgen.core.exceptions import RobotError
from rapidgen.core.geometry import Interval, copy_frame, transform_meshes


class AxisType(Enum):
    """Types of external axes."""

    LINEAR = "linear"  # Linear track, value in mm
    ROTATIONAL = "rotational"  # Turntable, value in degrees


@dataclass(frozen=True)
class ExternalAxis:
    """
    Represents an external axis (linear track or rotational positioner).

    Attributes:
        name: Axis name/identifier
        axis_type: Type of external axis
        attachment_frame: Frame that is carried by the axis
        axis_frame: Frame whose Z-axis is the motion direction (defaults to
            the attachment frame)
        axis_limits: Value limits (mm or degrees)
        base_mesh: Fixed part of the axis
        link_mesh: Moving part of the axis
        moves_robot: True for a linear axis that carries the robot base
        axis_number: Index 0-5 of the axis in the external joint values, or
            None to have the robot assign it
    """

    name: str
    axis_type: AxisType
    attachment_frame: Frame
    axis_limits: Interval
    axis_frame: Frame | None = None
    base_mesh: Mesh = field(default_factory=Mesh)
    link_mesh: Mesh = field(default_factory=Mesh)
    moves_robot: bool = False
    axis_number: int | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise RobotError("An external axis needs a name")
        if self.moves_robot and self.axis_type is not AxisType.LINEAR:
            raise RobotError(
                f"External axis '{self.name}': only a linear axis can move the robot"
            )
        if self.axis_number is not None and not 0 <= self.axis_number <= 5:
            raise RobotError(
                f"External axis '{self.name}': axis number must be in 0-5",
                details={"axis_number": self.axis_number},
            )
        object.__setattr__(self, "attachment_frame", copy_frame(self.attachment_frame))
        axis_frame = self.axis_frame if self.axis_frame is not None else self.attachment_frame
        object.__setattr__(self, "axis_frame", copy_frame(axis_frame))

    @property
    def axis_logic(self) -> str | None:
        """Letter (a-f) used for this axis in RAPID external joint values."""
        if self.axis_number is None:
            return None
        return "abcdef"[self.axis_number]

    @property
    def axis_curve(self) -> Line:
        """Curve along the motion axis, spanning the limits of a linear axis."""
        origin = self.axis_frame.point
        direction = self.axis_frame.zaxis
        if self.axis_type is AxisType.LINEAR:
            return Line(
                origin + direction * self.axis_limits.min,
                origin + direction * self.axis_limits.max,
            )
        return Line(origin, origin + direction * 10.0)

    def transformation_at(self, value: float) -> Transformation:
        """
        Transformation of the moving part of the axis at the given value.

        Args:
            value: Axis value (mm for linear axes, degrees for rotational axes)

        Returns:
            Translation along, or rotation about, the axis Z-axis
        """
        if self.axis_type is AxisType.LINEAR:
            return Translation.from_vector(self.axis_frame.zaxis * value)
        return Rotation.from_axis_and_angle(
            self.axis_frame.zaxis, math.radians(value), point=self.axis_frame.point
        )

    def position_at(self, value: float) -> tuple[Frame, bool]:
        """
        Attachment frame moved to the given axis value.

        Values outside the limits are not clamped; they are computed anyway
        and reported through the returned flag.

        Args:
            value: Axis value

        Returns:
            Tuple of (posed attachment frame, value within limits)
        """
        in_limits = self.axis_limits.contains(value)
        return self.attachment_frame.transformed(self.transformation_at(value)), in_limits

    def position_at_safe(self, value: float) -> Frame:
        """Attachment frame at the value clamped into the axis limits."""
        value = self.axis_limits.clamp(value)
        return self.attachment_frame.transformed(self.transformation_at(value))

    def pose_meshes(self, value: float) -> list[Mesh]:
        """
        Copies of the axis meshes posed at the given value.

        The base mesh stays in place; the link mesh follows the axis.
        The stored meshes are not changed.
        """
        return [
            self.base_mesh.copy(),
            *transform_meshes([self.link_mesh], self.transformation_at(value)),
        ]

    def closest_value(self, point) -> float:
        """
        Axis value that brings the attachment frame closest to a point,
        limited to the axis limits. Only meaningful for linear axes.
        """
        if self.axis_type is not AxisType.LINEAR:
            raise RobotError(
                f"External axis '{self.name}': closest value is only defined for linear axes"
            )
        offset = self.axis_frame.zaxis.dot(point - self.attachment_frame.point)
        return self.axis_limits.clamp(offset)

    def with_axis_number(self, axis_number: int) -> "ExternalAxis":
        """Copy of the axis with another axis number."""
        return replace(self, axis_number=axis_number)

    def transformed(self, transformation: Transformation) -> "ExternalAxis":
        """Copy of the axis with frames and meshes transformed."""
        return replace(
            self,
            attachment_frame=self.attachment_frame.transformed(transformation),
            axis_frame=self.axis_frame.transformed(transformation),
            base_mesh=self.base_mesh.transformed(transformation),
            link_mesh=self.link_mesh.transformed(transformation),
        )

    def __repr__(self) -> str:
        return (
            f"ExternalAxis(name='{self.name}', type={self.axis_type.value}, "
            f"limits=[{self.axis_limits.min}, {self.axis_limits.max}], "
            f"axis_number={self.axis_number})"
        )


def create_linear_axis(
    name: str,
    attachment_frame: Frame,
    axis_limits: Interval,
    axis_direction=None,
    base_mesh: Mesh | None = None,
    link_mesh: Mesh | None = None,
    axis_number: int | None = None,
) -> ExternalAxis:
    """
    Create a linear track that carries the robot.

    Args:
        name: Axis name
        attachment_frame: Frame of the carriage at value zero; the robot base
            is placed on this frame
        axis_limits: Track limits (mm)
        axis_direction: Motion direction (defaults to the attachment X-axis)
        base_mesh: Rail mesh
        link_mesh: Carriage mesh
        axis_number: Fixed axis number, or None

    Returns:
        Linear external axis
    """
    direction = axis_direction if axis_direction is not None else attachment_frame.xaxis
    axis_frame = Frame.from_plane(Plane(attachment_frame.point, direction))
    return ExternalAxis(
        name=name,
        axis_type=AxisType.LINEAR,
        attachment_frame=attachment_frame,
        axis_frame=axis_frame,
        axis_limits=axis_limits,
        base_mesh=base_mesh if base_mesh is not None else Mesh(),
        link_mesh=link_mesh if link_mesh is not None else Mesh(),
        moves_robot=True,
        axis_number=axis_number,
    )


def create_rotational_axis(
    name: str,
    attachment_frame: Frame,
    axis_limits: Interval,
    base_mesh: Mesh | None = None,
    link_mesh: Mesh | None = None,
    axis_number: int | None = None,
) -> ExternalAxis:
    """
    Create a turntable rotating about the Z-axis of its attachment frame.

    Args:
        name: Axis name
        attachment_frame: Table frame at value zero
        axis_limits: Rotation limits (degrees)
        base_mesh: Fixed stand mesh
        link_mesh: Rotating table mesh
        axis_number: Fixed axis number, or None

    Returns:
        Rotational external axis
    """
    return ExternalAxis(
        name=name,
        axis_type=AxisType.ROTATIONAL,
        attachment_frame=attachment_frame,
        axis_limits=axis_limits,
        base_mesh=base_mesh if base_mesh is not None else Mesh(),
        link_mesh=link_mesh if link_mesh is not None else Mesh(),
        moves_robot=False,
        axis_number=axis_number,
    )