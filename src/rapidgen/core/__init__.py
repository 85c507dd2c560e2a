"""
Core module - Shared utilities, configuration, and base classes.
"""

from rapidgen.core.config import GeneratorSettings, JobConfig, load_job
from rapidgen.core.exceptions import (
    ActionError,
    AxisIndexError,
    AxisMismatchError,
    ConfigurationError,
    RapidGenError,
    RobotError,
)
from rapidgen.core.formatting import UNCONNECTED, format_number
from rapidgen.core.geometry import Interval

__all__ = [
    # Config
    "GeneratorSettings",
    "JobConfig",
    "load_job",
    # Exceptions
    "RapidGenError",
    "ConfigurationError",
    "RobotError",
    "ActionError",
    "AxisMismatchError",
    "AxisIndexError",
    # Formatting
    "UNCONNECTED",
    "format_number",
    # Geometry
    "Interval",
]
