"""
Geometry handling for rapidgen using COMPAS.

Poses are COMPAS frames, transformations are COMPAS transformations and
meshes are COMPAS meshes. This module adds the few helpers the kinematics
and code generation layers share: a closed value interval, frame builders
and quaternion extraction in the ABB convention.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

from compas.datastructures import Mesh
from compas.geometry import Frame, Plane, Point, Transformation, Vector

from rapidgen.core.exceptions import RobotError


@dataclass(frozen=True)
class Interval:
    """
    Closed interval [min, max] used for joint and axis limits.

    Example:
        >>> limits = Interval(-180.0, 180.0)
        >>> limits.contains(90.0)
        True
        >>> limits.clamp(200.0)
        180.0
    """

    min: float
    max: float

    def __post_init__(self) -> None:
        if self.min > self.max:
            raise RobotError(
                f"Invalid interval: min ({self.min}) is larger than max ({self.max})"
            )

    def contains(self, value: float) -> bool:
        """Check whether the value lies inside the interval (bounds included)."""
        return self.min <= value <= self.max

    def clamp(self, value: float) -> float:
        """Return the value limited to the interval."""
        return min(max(value, self.min), self.max)

    def to_list(self) -> list[float]:
        return [self.min, self.max]

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "Interval":
        if len(values) != 2:
            raise RobotError(
                "An interval needs exactly two values",
                details={"values": list(values)},
            )
        return cls(float(values[0]), float(values[1]))


def frame_from_normal(point: Iterable[float], normal: Iterable[float]) -> Frame:
    """
    Build a frame whose local Z-axis is the given normal.

    Args:
        point: Frame origin.
        normal: Direction of the frame Z-axis.

    Returns:
        COMPAS Frame with the requested origin and Z-axis.
    """
    return Frame.from_plane(Plane(Point(*point), Vector(*normal)))


def copy_frame(frame: Frame) -> Frame:
    """Return an independent copy of a frame."""
    return Frame(Point(*frame.point), Vector(*frame.xaxis), Vector(*frame.yaxis))


def transform_meshes(meshes: Iterable[Mesh], transformation: Transformation) -> list[Mesh]:
    """
    Transform copies of meshes.

    Args:
        meshes: Meshes to transform.
        transformation: COMPAS Transformation object.

    Returns:
        Transformed meshes (new instances).
    """
    return [mesh.transformed(transformation) for mesh in meshes]


def placeholder_mesh() -> Mesh:
    """Empty mesh used when no link geometry is loaded."""
    return Mesh()


def frame_quaternion(frame: Frame) -> tuple[float, float, float, float]:
    """
    Orientation of a frame as an ABB quaternion [q1, q2, q3, q4] = [w, x, y, z].

    The quaternion is canonized so that q1 is not negative.
    """
    quaternion = frame.quaternion
    w, x, y, z = quaternion.w, quaternion.x, quaternion.y, quaternion.z
    if w < 0.0:
        w, x, y, z = -w, -x, -y, -z
    return (w, x, y, z)


def frame_relative_to(frame: Frame, reference: Frame) -> Frame:
    """Express a world frame in the coordinates of a reference frame."""
    return frame.transformed(Transformation.from_frame(reference).inverted())
