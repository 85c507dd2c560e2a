"""
Kinematics module - Robot model, external axes, forward and inverse kinematics.
"""

from rapidgen.kinematics.axes import (
    AxisType,
    ExternalAxis,
    create_linear_axis,
    create_rotational_axis,
)
from rapidgen.kinematics.forward import ForwardKinematics
from rapidgen.kinematics.inverse import IKSolution, InverseKinematics
from rapidgen.kinematics.joint_positions import (
    ExternalJointPosition,
    JointPosition,
    RobotJointPosition,
)
from rapidgen.kinematics.presets import get_preset, list_presets, robot_from_config
from rapidgen.kinematics.robot import Robot
from rapidgen.kinematics.tool import RobotTool

__all__ = [
    # External axes
    "AxisType",
    "ExternalAxis",
    "create_linear_axis",
    "create_rotational_axis",
    # Joint values
    "JointPosition",
    "RobotJointPosition",
    "ExternalJointPosition",
    # Robot
    "Robot",
    "RobotTool",
    "get_preset",
    "list_presets",
    "robot_from_config",
    # Kinematics
    "ForwardKinematics",
    "InverseKinematics",
    "IKSolution",
]
