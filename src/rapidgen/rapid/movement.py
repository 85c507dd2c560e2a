"""
Movement action: MoveAbsJ, MoveL and MoveJ with their digital output variants.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING

from compas.geometry import Frame, Transformation

from rapidgen.core.exceptions import ActionError
from rapidgen.core.formatting import format_values
from rapidgen.kinematics.inverse import InverseKinematics
from rapidgen.kinematics.tool import RobotTool
from rapidgen.rapid.actions import Action, ActionType, DigitalOutput
from rapidgen.rapid.datatypes import SpeedData, WorkObject, ZoneData
from rapidgen.rapid.targets import RobotTarget

if TYPE_CHECKING:
    from rapidgen.kinematics.robot import Robot


class MovementType(IntEnum):
    """RAPID move instruction of a movement."""

    ABSOLUTE_JOINT = 0  # MoveAbsJ to a jointtarget
    LINEAR = 1  # MoveL to a robtarget
    JOINT = 2  # MoveJ to a robtarget


INSTRUCTIONS = {
    MovementType.ABSOLUTE_JOINT: "MoveAbsJ",
    MovementType.LINEAR: "MoveL",
    MovementType.JOINT: "MoveJ",
}

FIELD_TYPES = {
    "target": (RobotTarget,),
    "speed_data": (SpeedData,),
    "zone_data": (ZoneData,),
    "work_object": (WorkObject,),
    "tool": (RobotTool, type(None)),
    "digital_output": (DigitalOutput, type(None)),
}


@dataclass(frozen=True)
class Movement(Action):
    """
    Move the robot to a target.

    Attributes:
        target: Destination
        speed_data: Speed of the movement
        movement_type: MoveAbsJ, MoveL or MoveJ
        zone_data: Corner path at the end of the movement
        tool: Tool to use instead of the robot tool
        work_object: Coordinate system of the target
        digital_output: Digital output set at the end of the movement
    """

    target: RobotTarget
    speed_data: SpeedData = field(default_factory=lambda: SpeedData.predefined_speed(5))
    movement_type: MovementType = MovementType.ABSOLUTE_JOINT
    zone_data: ZoneData = field(default_factory=lambda: ZoneData.from_value(0))
    tool: RobotTool | None = None
    work_object: WorkObject = field(default_factory=WorkObject)
    digital_output: DigitalOutput | None = None
    action_type = ActionType.MOVEMENT

    def __post_init__(self) -> None:
        for name, types in FIELD_TYPES.items():
            value = getattr(self, name)
            if not isinstance(value, types):
                expected = " or ".join("None" if t is type(None) else t.__name__ for t in types)
                raise ActionError(
                    f"Movement {name} must be {expected}, got {type(value).__name__}",
                    details={"field": name},
                )
        try:
            movement_type = MovementType(self.movement_type)
        except ValueError:
            raise ActionError(
                f"Movement to '{self.target.name}': movement type must be 0, 1 or 2",
                details={"movement_type": self.movement_type},
            )
        object.__setattr__(self, "movement_type", movement_type)

    @property
    def is_linear(self) -> bool:
        return self.movement_type is MovementType.LINEAR

    @property
    def variable_name(self) -> str:
        """Name of the declared target variable."""
        if self.movement_type is MovementType.ABSOLUTE_JOINT:
            return self.target.joint_target_name
        return self.target.rob_target_name

    @property
    def global_target_frame(self) -> Frame:
        """Target frame in world coordinates through the work object."""
        return self.target.frame.transformed(
            Transformation.from_frame(self.work_object.global_frame)
        )

    def posed_global_target_frame(self, robot: "Robot") -> Frame:
        """
        World target frame with the work object moved by its external axis.

        The axis value comes from the target; an undefined value counts as 0.

        Raises:
            ActionError: If the work object axis is not attached to the robot
        """
        frame = self.global_target_frame
        axis = self.work_object.external_axis
        if axis is None:
            return frame

        attached = next((a for a in robot.external_axes if a.name == axis.name), None)
        if attached is None:
            raise ActionError(
                f"External axis '{axis.name}' of work object '{self.work_object.name}' "
                f"is not attached to robot '{robot.name}'"
            )
        position = self.target.external_joint_position
        number = attached.axis_number
        value = position[number] if position.is_defined(number) else 0.0
        return frame.transformed(attached.transformation_at(value))

    def solve(self, robot: "Robot") -> InverseKinematics:
        """Inverse kinematics of the target for a robot."""
        return robot.inverse_kinematics(self)

    def declaration_code(self, robot: "Robot | None" = None, ik: InverseKinematics | None = None) -> str:
        """
        Target declaration: a robtarget for MoveL and MoveJ, a jointtarget
        (with joint values from inverse kinematics) for MoveAbsJ.
        """
        if robot is None:
            raise ActionError(f"Movement to '{self.target.name}' needs a robot to be declared")
        if ik is None:
            ik = self.solve(robot)
        external = ik.external_joint_position.to_rapid()

        if self.movement_type is MovementType.ABSOLUTE_JOINT:
            internal = ik.robot_joint_position.to_rapid()
            return f"CONST jointtarget {self.target.joint_target_name} := [{internal}, {external}];"

        point = self.target.frame.point
        config = self.target.axis_config
        if config is None:
            config = ik.axis_configuration
        return (
            f"VAR robtarget {self.target.rob_target_name} := "
            f"[[{format_values((point.x, point.y, point.z))}], "
            f"[{format_values(self.target.quaternion, 6)}], "
            f"[0, 0, 0, {config}], {external}];"
        )

    def tool_name(self, robot: "Robot | None") -> str:
        if self.tool is not None:
            return self.tool.name
        if robot is not None:
            return robot.tool.name
        return "tool0"

    def instruction_code(self, robot: "Robot | None" = None) -> str:
        instruction = INSTRUCTIONS[self.movement_type]
        arguments = (
            f"{self.variable_name}, {self.speed_data.name}, {self.zone_data.name}, "
            f"{self.tool_name(robot)}\\WObj:={self.work_object.name}"
        )
        if self.digital_output is None:
            return f"{instruction} {arguments};"
        # No combined MoveAbsJ and SetDO instruction exists
        if self.movement_type is MovementType.ABSOLUTE_JOINT:
            return f"{instruction} {arguments};\n{self.digital_output.instruction_code(robot)}"
        return (
            f"{instruction}DO {arguments}, "
            f"{self.digital_output.name}, {self.digital_output.value};"
        )

    def __str__(self) -> str:
        if self.movement_type is MovementType.ABSOLUTE_JOINT:
            return f"Absolute Joint Movement ({self.target.name})"
        kind = "Linear" if self.is_linear else "Joint"
        return f"{kind} Movement ({self.target.name}\\{self.work_object.name})"
