"""
Actions: the instructions a RAPID program is built from.

Every action produces declaration code (placed before the procedure) and
instruction code (placed inside the procedure, in program order). Either may
be empty. Multi-line code is joined with ``\\n``; the generator indents each
line and converts line endings.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from rapidgen.core.exceptions import ActionError
from rapidgen.core.formatting import format_number
from rapidgen.kinematics.joint_positions import (
    ExternalJointPosition,
    JointPosition,
    RobotJointPosition,
)

if TYPE_CHECKING:
    from rapidgen.kinematics.robot import Robot


class ActionType(Enum):
    """Discriminator of the action variants."""

    COMMENT = "comment"
    TIMER = "timer"
    MOVEMENT = "movement"
    DIGITAL_OUTPUT = "digital_output"
    WAIT_DI = "wait_di"
    AUTO_AXIS_CONFIG = "auto_axis_config"
    CODE_LINE = "code_line"
    EXTERNAL_JOINT_POSITION = "external_joint_position"
    ROBOT_JOINT_POSITION = "robot_joint_position"


class CodeType(Enum):
    """Section of the program a comment or code line is written to."""

    DECLARATION = "declaration"
    INSTRUCTION = "instruction"


class Action(ABC):
    """Base class for all actions."""

    action_type: ActionType

    @abstractmethod
    def declaration_code(self, robot: "Robot | None" = None) -> str:
        """Code for the declaration section, or an empty string."""

    @abstractmethod
    def instruction_code(self, robot: "Robot | None" = None) -> str:
        """Code for the procedure body, or an empty string."""


def _signal_name(name: str, kind: str) -> str:
    if not name or name[0].isdigit() or not name.replace("_", "a").isalnum():
        raise ActionError(f"Invalid {kind} name: '{name}'")
    return name


@dataclass(frozen=True)
class Comment(Action):
    """A RAPID comment; each line of the text becomes a ``!`` line."""

    text: str
    code_type: CodeType = CodeType.INSTRUCTION
    action_type = ActionType.COMMENT

    def __post_init__(self) -> None:
        if not self.text:
            raise ActionError("A comment needs text")

    def _code(self) -> str:
        return "\n".join(f"! {line}" for line in self.text.splitlines())

    def declaration_code(self, robot=None) -> str:
        return self._code() if self.code_type is CodeType.DECLARATION else ""

    def instruction_code(self, robot=None) -> str:
        return self._code() if self.code_type is CodeType.INSTRUCTION else ""

    def __str__(self) -> str:
        return f"Comment ({self.text})"


@dataclass(frozen=True)
class Timer(Action):
    """Wait for a duration in seconds."""

    duration: float
    action_type = ActionType.TIMER

    def __post_init__(self) -> None:
        if self.duration < 0:
            raise ActionError(
                "Timer duration cannot be negative",
                details={"duration": self.duration},
            )

    def declaration_code(self, robot=None) -> str:
        return ""

    def instruction_code(self, robot=None) -> str:
        return f"WaitTime {format_number(self.duration, 3)};"

    def __str__(self) -> str:
        return f"Timer ({format_number(self.duration, 3)} sec.)"


@dataclass(frozen=True)
class DigitalOutput(Action):
    """Set a digital output signal."""

    name: str
    is_active: bool = True
    action_type = ActionType.DIGITAL_OUTPUT

    def __post_init__(self) -> None:
        _signal_name(self.name, "digital output")

    @property
    def value(self) -> int:
        return 1 if self.is_active else 0

    def declaration_code(self, robot=None) -> str:
        return ""

    def instruction_code(self, robot=None) -> str:
        return f"SetDO {self.name}, {self.value};"

    def __str__(self) -> str:
        return f"Digital Output ({self.name}\\{self.is_active})"


@dataclass(frozen=True)
class WaitDI(Action):
    """Wait until a digital input has a value."""

    name: str
    value: bool = True
    action_type = ActionType.WAIT_DI

    def __post_init__(self) -> None:
        _signal_name(self.name, "digital input")

    def declaration_code(self, robot=None) -> str:
        return ""

    def instruction_code(self, robot=None) -> str:
        return f"WaitDI {self.name}, {1 if self.value else 0};"


@dataclass(frozen=True)
class AutoAxisConfig(Action):
    """
    Switch the axis configuration monitoring of linear and joint movements.

    When enabled the controller chooses the axis configuration itself
    (``ConfL\\Off`` and ``ConfJ\\Off``).
    """

    enabled: bool = True
    action_type = ActionType.AUTO_AXIS_CONFIG

    def declaration_code(self, robot=None) -> str:
        return ""

    def instruction_code(self, robot=None) -> str:
        state = "Off" if self.enabled else "On"
        return f"ConfL\\{state};\nConfJ\\{state};"


@dataclass(frozen=True)
class CodeLine(Action):
    """A line of RAPID code written verbatim."""

    code: str
    code_type: CodeType = CodeType.INSTRUCTION
    action_type = ActionType.CODE_LINE

    def __post_init__(self) -> None:
        if not self.code.strip():
            raise ActionError("A code line cannot be empty")

    def declaration_code(self, robot=None) -> str:
        return self.code if self.code_type is CodeType.DECLARATION else ""

    def instruction_code(self, robot=None) -> str:
        return self.code if self.code_type is CodeType.INSTRUCTION else ""


@dataclass(frozen=True)
class JointPositionDeclaration(Action):
    """
    Declare a joint position as a RAPID constant: ``robjoint`` for the
    robot axes, ``extjoint`` for the external axes.
    """

    name: str
    position: JointPosition

    def __post_init__(self) -> None:
        _signal_name(self.name, "joint position")
        if not isinstance(self.position, (RobotJointPosition, ExternalJointPosition)):
            raise ActionError(f"Joint position '{self.name}' has an unsupported type")

    @property
    def action_type(self) -> ActionType:
        if isinstance(self.position, ExternalJointPosition):
            return ActionType.EXTERNAL_JOINT_POSITION
        return ActionType.ROBOT_JOINT_POSITION

    @property
    def rapid_type(self) -> str:
        if self.action_type is ActionType.EXTERNAL_JOINT_POSITION:
            return "extjoint"
        return "robjoint"

    def declaration_code(self, robot=None) -> str:
        return f"CONST {self.rapid_type} {self.name} := {self.position.to_rapid()};"

    def instruction_code(self, robot=None) -> str:
        return ""
