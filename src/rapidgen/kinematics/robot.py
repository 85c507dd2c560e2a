"""
Robot model: static geometry of a six-axis arm with its tool and external axes.

All frames are stored in world coordinates for the robot at its home
position (all joint values zero, external axes at zero). A Robot is not
changed after construction; ``transformed`` and ``with_tool`` return new
instances.
"""

from typing import TYPE_CHECKING, Iterable, Optional, Sequence

from compas.datastructures import Mesh
from compas.geometry import Frame, Transformation

from rapidgen.core.exceptions import RobotError
from rapidgen.core.geometry import Interval, copy_frame, placeholder_mesh, transform_meshes
from rapidgen.core.logging import get_logger
from rapidgen.kinematics.axes import AxisType, ExternalAxis
from rapidgen.kinematics.forward import ForwardKinematics
from rapidgen.kinematics.inverse import InverseKinematics
from rapidgen.kinematics.joint_positions import ExternalJointPosition, RobotJointPosition
from rapidgen.kinematics.tool import RobotTool

if TYPE_CHECKING:
    from rapidgen.rapid.movement import Movement

logger = get_logger(__name__)

JOINT_COUNT = 6
LINK_MESH_COUNT = 7
MAX_EXTERNAL_AXES = 6


class Robot:
    """
    A six-axis industrial robot.

    Attributes:
        name: Robot model name
        manufacturer: Robot manufacturer
        base_frame: Robot base position
        joint_frames: Six frames whose Z-axes are the joint rotation axes
        joint_limits: Six joint limit intervals in degrees
        mounting_frame: Tool flange frame
        tool: Attached tool (in its own modelling space)
        tool_frame: Tool centre point at home position
        meshes: Eight meshes: base, six links and the attached tool
        external_axes: Attached external axes, each with an axis number

    Example:
        >>> robot = get_preset("IRB2600ID-15/1.85")
        >>> fk = robot.forward_kinematics([0, 0, 0, 0, 90, 0])
        >>> fk.tcp_frame.point
    """

    def __init__(
        self,
        name: str,
        joint_frames: Sequence[Frame],
        joint_limits: Sequence[Interval],
        base_frame: Frame | None = None,
        mounting_frame: Frame | None = None,
        tool: RobotTool | None = None,
        external_axes: Iterable[ExternalAxis] = (),
        meshes: Sequence[Mesh] | None = None,
        manufacturer: str = "ABB",
    ) -> None:
        if len(joint_frames) != JOINT_COUNT:
            raise RobotError(
                f"Robot '{name}' needs {JOINT_COUNT} joint frames, got {len(joint_frames)}"
            )
        if len(joint_limits) != JOINT_COUNT:
            raise RobotError(
                f"Robot '{name}' needs {JOINT_COUNT} joint limits, got {len(joint_limits)}"
            )
        if meshes is None:
            meshes = [placeholder_mesh() for _ in range(LINK_MESH_COUNT)]
        if len(meshes) != LINK_MESH_COUNT:
            raise RobotError(
                f"Robot '{name}' needs {LINK_MESH_COUNT} link meshes, got {len(meshes)}"
            )

        self.name = name
        self.manufacturer = manufacturer
        self.base_frame = copy_frame(base_frame) if base_frame is not None else Frame.worldXY()
        self.joint_frames = tuple(copy_frame(f) for f in joint_frames)
        self.joint_limits = tuple(joint_limits)
        self.mounting_frame = (
            copy_frame(mounting_frame)
            if mounting_frame is not None
            else copy_frame(self.joint_frames[-1])
        )
        self.link_meshes = tuple(mesh.copy() for mesh in meshes)
        self.external_axes = _number_axes(name, list(external_axes))

        self.tool = tool if tool is not None else RobotTool()
        attached = self.tool.attached_to(self.mounting_frame)
        self.tool_frame = attached.tool_frame
        self.meshes = (*self.link_meshes, attached.mesh)

        logger.debug(
            "robot_created",
            robot=self.name,
            tool=self.tool.name,
            external_axes=len(self.external_axes),
        )

    @property
    def moving_axis(self) -> Optional[ExternalAxis]:
        """The linear external axis that carries the robot, if any."""
        for axis in self.external_axes:
            if axis.moves_robot:
                return axis
        return None

    def external_axis(self, axis_number: int) -> Optional[ExternalAxis]:
        """External axis with the given axis number, if attached."""
        for axis in self.external_axes:
            if axis.axis_number == axis_number:
                return axis
        return None

    def is_attached(self, axis: ExternalAxis) -> bool:
        return any(a.name == axis.name for a in self.external_axes)

    def base_change(self, external_joint_position: ExternalJointPosition) -> Transformation:
        """
        Transformation of the robot base caused by the external axis that
        carries the robot. Undefined axis values count as zero.
        """
        axis = self.moving_axis
        if axis is None:
            return Transformation()
        value = external_joint_position[axis.axis_number]
        if not external_joint_position.is_defined(axis.axis_number):
            value = 0.0
        return axis.transformation_at(value)

    def forward_kinematics(
        self,
        robot_joint_position: RobotJointPosition | Sequence[float],
        external_joint_position: ExternalJointPosition | Sequence[float] | None = None,
        hide_mesh: bool = False,
    ) -> ForwardKinematics:
        """
        Pose the robot.

        Args:
            robot_joint_position: Six internal joint values in degrees
            external_joint_position: External axis values
            hide_mesh: Skip posing the meshes

        Returns:
            Calculated ForwardKinematics with limits checked
        """
        fk = ForwardKinematics(self, robot_joint_position, external_joint_position, hide_mesh)
        fk.calculate()
        fk.check_limits()
        return fk

    def inverse_kinematics(
        self,
        movement: "Movement",
        fixed_config: int | None = None,
        reference: RobotJointPosition | Sequence[float] | None = None,
    ) -> InverseKinematics:
        """
        Solve the joint values for a movement.

        Args:
            movement: Movement whose target is solved
            fixed_config: Axis configuration 0-7 to use; defaults to the
                configuration of the target, None selects automatically
            reference: Joint values the automatic selection stays closest to

        Returns:
            Calculated InverseKinematics
        """
        ik = InverseKinematics.from_movement(self, movement, fixed_config, reference)
        ik.calculate()
        return ik

    def solve_frame(
        self,
        target_frame: Frame,
        external_joint_position: ExternalJointPosition | None = None,
        fixed_config: int | None = None,
        reference: RobotJointPosition | Sequence[float] | None = None,
    ) -> InverseKinematics:
        """Solve the joint values for a world frame."""
        ik = InverseKinematics(self, target_frame, external_joint_position, fixed_config, reference)
        ik.calculate()
        return ik

    def transformed(self, transformation: Transformation) -> "Robot":
        """
        Copy of the robot with its geometry moved. External axes stay where
        they are.
        """
        return Robot(
            name=self.name,
            joint_frames=[f.transformed(transformation) for f in self.joint_frames],
            joint_limits=self.joint_limits,
            base_frame=self.base_frame.transformed(transformation),
            mounting_frame=self.mounting_frame.transformed(transformation),
            tool=self.tool,
            external_axes=self.external_axes,
            meshes=transform_meshes(self.link_meshes, transformation),
            manufacturer=self.manufacturer,
        )

    def with_tool(self, tool: RobotTool) -> "Robot":
        """Copy of the robot carrying another tool."""
        return Robot(
            name=self.name,
            joint_frames=self.joint_frames,
            joint_limits=self.joint_limits,
            base_frame=self.base_frame,
            mounting_frame=self.mounting_frame,
            tool=tool,
            external_axes=self.external_axes,
            meshes=self.link_meshes,
            manufacturer=self.manufacturer,
        )

    def __repr__(self) -> str:
        return (
            f"Robot(name='{self.name}', tool='{self.tool.name}', "
            f"external_axes={len(self.external_axes)})"
        )


def _number_axes(robot_name: str, axes: list[ExternalAxis]) -> tuple[ExternalAxis, ...]:
    """Validate external axes and assign free axis numbers in order."""
    if len(axes) > MAX_EXTERNAL_AXES:
        raise RobotError(
            f"Robot '{robot_name}' supports at most {MAX_EXTERNAL_AXES} external axes",
            details={"count": len(axes)},
        )
    if sum(1 for axis in axes if axis.moves_robot) > 1:
        raise RobotError(
            f"Robot '{robot_name}' can only be carried by one external axis",
            details={"axes": [a.name for a in axes if a.moves_robot]},
        )
    if any(axis.moves_robot and axis.axis_type is not AxisType.LINEAR for axis in axes):
        raise RobotError(f"Robot '{robot_name}': only a linear axis can carry the robot")

    taken: set[int] = set()
    for axis in axes:
        if axis.axis_number is None:
            continue
        if axis.axis_number in taken:
            raise RobotError(
                f"Robot '{robot_name}': external axis number {axis.axis_number} is used twice",
                details={"axis": axis.name},
            )
        taken.add(axis.axis_number)

    free = iter(n for n in range(MAX_EXTERNAL_AXES) if n not in taken)
    numbered = []
    for axis in axes:
        if axis.axis_number is None:
            axis = axis.with_axis_number(next(free))
        numbered.append(axis)
    return tuple(numbered)
