"""
RAPID module - Actions, data types and the RAPID code generator.
"""

from rapidgen.kinematics.joint_positions import ExternalJointPosition, RobotJointPosition
from rapidgen.kinematics.tool import RobotTool
from rapidgen.rapid.actions import (
    Action,
    ActionType,
    AutoAxisConfig,
    CodeLine,
    CodeType,
    Comment,
    DigitalOutput,
    JointPositionDeclaration,
    Timer,
    WaitDI,
)
from rapidgen.rapid.datatypes import SpeedData, WorkObject, ZoneData
from rapidgen.rapid.generator import RAPIDGenerator, generate
from rapidgen.rapid.movement import Movement, MovementType
from rapidgen.rapid.registry import ToolRegistry
from rapidgen.rapid.serialization import actions_from_dicts, from_dict, to_dict
from rapidgen.rapid.targets import RobotTarget

__all__ = [
    # Actions
    "Action",
    "ActionType",
    "CodeType",
    "Comment",
    "Timer",
    "DigitalOutput",
    "WaitDI",
    "AutoAxisConfig",
    "CodeLine",
    "JointPositionDeclaration",
    "Movement",
    "MovementType",
    # Data
    "SpeedData",
    "ZoneData",
    "WorkObject",
    "RobotTarget",
    "RobotTool",
    "RobotJointPosition",
    "ExternalJointPosition",
    # Generation
    "RAPIDGenerator",
    "ToolRegistry",
    "generate",
    # Serialization
    "to_dict",
    "from_dict",
    "actions_from_dicts",
]
