"""
rapidgen - ABB RAPID code generation and kinematics for six-axis robots.

Builds RAPID program and system modules from ordered actions and computes
forward and inverse kinematics for robots with linear tracks and rotational
positioners.
"""

__version__ = "0.1.0"
__author__ = "rapidgen Contributors"

from rapidgen.kinematics import Robot, get_preset
from rapidgen.rapid import RAPIDGenerator, generate

__all__ = [
    "__version__",
    "Robot",
    "get_preset",
    "RAPIDGenerator",
    "generate",
]
