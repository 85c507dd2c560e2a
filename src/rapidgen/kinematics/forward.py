"""
Forward kinematics for a six-axis robot with external axes.

Each joint rotates about the Z-axis of its joint frame after that frame has
been carried along by the rotations of all previous joints. Composing the
rotations in this order (joint 1 innermost) gives the transformation of every
link, which is applied to the link meshes and the tool centre point.
"""

import math
from typing import TYPE_CHECKING, Sequence

from compas.datastructures import Mesh
from compas.geometry import Frame, Rotation, Transformation

from rapidgen.core.logging import get_logger
from rapidgen.kinematics.joint_positions import ExternalJointPosition, RobotJointPosition

if TYPE_CHECKING:
    from rapidgen.kinematics.robot import Robot

logger = get_logger(__name__)


def chain_transformations(joint_frames: Sequence[Frame], joint_values: Sequence[float]) -> list[Transformation]:
    """
    Link transformations of a serial chain.

    Args:
        joint_frames: Joint frames at home position; Z is the rotation axis
        joint_values: Joint values in degrees

    Returns:
        One transformation per joint: the composition of the rotations of
        that joint and all joints before it
    """
    composed = Transformation()
    links = []
    for frame, value in zip(joint_frames, joint_values):
        moved = frame.transformed(composed)
        rotation = Rotation.from_axis_and_angle(moved.zaxis, math.radians(value), point=moved.point)
        composed = rotation * composed
        links.append(composed)
    return links


class ForwardKinematics:
    """
    Posed state of a robot for given joint values.

    Limit violations do not stop the calculation; they are collected in
    ``error_text`` by ``check_limits``.
    """

    def __init__(
        self,
        robot: "Robot",
        robot_joint_position: RobotJointPosition | Sequence[float],
        external_joint_position: ExternalJointPosition | Sequence[float] | None = None,
        hide_mesh: bool = False,
    ) -> None:
        self.robot = robot
        self.robot_joint_position = RobotJointPosition(robot_joint_position)
        self.external_joint_position = ExternalJointPosition(
            external_joint_position if external_joint_position is not None else ()
        )
        self.hide_mesh = hide_mesh

        self.tcp_frame: Frame | None = None
        self.posed_joint_frames: list[Frame] = []
        self.posed_meshes: list[Mesh] = []
        self.posed_external_axis_meshes: list[list[Mesh]] = []
        self.internal_axis_in_limits: list[bool] = [True] * 6
        self.external_axis_in_limits: list[bool] = [True] * 6
        self.error_text: list[str] = []

    @property
    def in_limits(self) -> bool:
        return all(self.internal_axis_in_limits) and all(self.external_axis_in_limits)

    def calculate(self) -> None:
        """Compute the tool centre point and, unless hidden, the posed meshes."""
        robot = self.robot
        base_change = robot.base_change(self.external_joint_position)

        self.posed_external_axis_meshes = []
        if not self.hide_mesh:
            for axis in robot.external_axes:
                value = self.external_joint_position[axis.axis_number]
                if not self.external_joint_position.is_defined(axis.axis_number):
                    value = 0.0
                self.posed_external_axis_meshes.append(axis.pose_meshes(value))

        links = chain_transformations(robot.joint_frames, self.robot_joint_position)
        full = base_change * links[-1]

        self.tcp_frame = robot.tool_frame.transformed(full)
        self.posed_joint_frames = [
            frame.transformed(base_change * link)
            for frame, link in zip(robot.joint_frames, links)
        ]

        self.posed_meshes = []
        if not self.hide_mesh:
            self.posed_meshes.append(robot.meshes[0].transformed(base_change))
            for mesh, link in zip(robot.meshes[1:7], links):
                self.posed_meshes.append(mesh.transformed(base_change * link))
            self.posed_meshes.append(robot.meshes[7].transformed(full))

    def check_limits(self) -> None:
        """Compare the joint values with the robot limits and record violations."""
        robot = self.robot
        self.error_text = []
        self.internal_axis_in_limits = [True] * 6
        self.external_axis_in_limits = [True] * 6

        for i, (value, limits) in enumerate(zip(self.robot_joint_position, robot.joint_limits)):
            if not limits.contains(value):
                self.internal_axis_in_limits[i] = False
                self.error_text.append(f"Internal axis value {i + 1} is not in range.")

        for axis in robot.external_axes:
            number = axis.axis_number
            if not self.external_joint_position.is_defined(number):
                continue
            if not axis.axis_limits.contains(self.external_joint_position[number]):
                self.external_axis_in_limits[number] = False
                self.error_text.append(f"External axis value {number + 1} is not in range.")

        if self.error_text:
            logger.warning(
                "forward_kinematics_out_of_limits",
                robot=robot.name,
                messages=self.error_text,
            )
