"""
End effector (tool) definition.
"""

from dataclasses import dataclass, field, replace

from compas.datastructures import Mesh
from compas.geometry import Frame, Transformation

from rapidgen.core.exceptions import RobotError
from rapidgen.core.geometry import copy_frame, frame_quaternion, frame_relative_to


@dataclass(frozen=True)
class RobotTool:
    """
    A tool mounted on the robot flange.

    Both frames are given in the tool's own modelling space: the tool is
    attached by mapping ``attachment_frame`` onto the robot mounting frame,
    after which ``tool_frame`` becomes the tool centre point.

    Attributes:
        name: RAPID tooldata name
        attachment_frame: Frame of the tool that meets the robot flange
        tool_frame: Tool centre point
        mesh: Tool geometry
        mass: Tool mass in kg
    """

    name: str = "tool0"
    attachment_frame: Frame = field(default_factory=Frame.worldXY)
    tool_frame: Frame = field(default_factory=Frame.worldXY)
    mesh: Mesh = field(default_factory=Mesh)
    mass: float = 0.001

    def __post_init__(self) -> None:
        if not self.name:
            raise RobotError("A tool needs a name")
        if self.mass <= 0.0:
            raise RobotError(
                f"Tool '{self.name}': mass must be positive",
                details={"mass": self.mass},
            )
        object.__setattr__(self, "attachment_frame", copy_frame(self.attachment_frame))
        object.__setattr__(self, "tool_frame", copy_frame(self.tool_frame))

    @property
    def local_tool_frame(self) -> Frame:
        """Tool centre point relative to the attachment frame."""
        return frame_relative_to(self.tool_frame, self.attachment_frame)

    @property
    def tcp_position(self) -> tuple[float, float, float]:
        point = self.local_tool_frame.point
        return (point.x, point.y, point.z)

    @property
    def quaternion(self) -> tuple[float, float, float, float]:
        """Tool orientation as [q1, q2, q3, q4] relative to the flange."""
        return frame_quaternion(self.local_tool_frame)

    def mounting_transformation(self, mounting_frame: Frame) -> Transformation:
        """Transformation that places the tool on a robot mounting frame."""
        return Transformation.from_frame_to_frame(self.attachment_frame, mounting_frame)

    def attached_to(self, mounting_frame: Frame) -> "RobotTool":
        """Copy of the tool moved onto a mounting frame."""
        xform = self.mounting_transformation(mounting_frame)
        return replace(
            self,
            attachment_frame=self.attachment_frame.transformed(xform),
            tool_frame=self.tool_frame.transformed(xform),
            mesh=self.mesh.transformed(xform),
        )

    def __repr__(self) -> str:
        return f"RobotTool(name='{self.name}', tcp={self.tcp_position})"


def default_tool() -> RobotTool:
    """The ABB predefined tool0: tool centre point on the flange."""
    return RobotTool()
