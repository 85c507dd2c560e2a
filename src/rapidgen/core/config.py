"""
Configuration management for rapidgen.

A job file is a YAML document that names the robot to generate code for,
the tools registered for the system module, the generator settings and the
ordered list of actions. Example::

    settings:
      module_name: Weld
    robot:
      preset: IRB2600ID-15/1.85
      tool: torch
    tools:
      - name: torch
        tool_frame: {point: [0, 0, 250]}
    actions:
      - {type: comment, text: start}
      - {type: movement, movement_type: 2, target: {...}}
"""

import os
from pathlib import Path
from typing import Any

import yaml
from compas.geometry import Frame
from pydantic import BaseModel, Field, ValidationError, field_validator

from rapidgen.core.exceptions import ConfigurationError


class GeneratorSettings(BaseModel):
    """Settings for the RAPID code generator."""

    module_name: str = "MainModule"
    procedure_name: str = "main"
    indent: str = "\t"
    line_ending: str = os.linesep
    program_file_name: str = "main_T.mod"
    system_file_name: str = "BASE.sys"

    @field_validator("module_name", "procedure_name")
    @classmethod
    def _identifier(cls, value: str) -> str:
        if not value or not value.replace("_", "a").isalnum() or value[0].isdigit():
            raise ValueError(f"'{value}' is not a valid RAPID identifier")
        return value


class FrameConfig(BaseModel):
    """A pose given by origin and two axes."""

    point: list[float] = Field(default_factory=lambda: [0.0, 0.0, 0.0])
    xaxis: list[float] = Field(default_factory=lambda: [1.0, 0.0, 0.0])
    yaxis: list[float] = Field(default_factory=lambda: [0.0, 1.0, 0.0])

    @field_validator("point", "xaxis", "yaxis")
    @classmethod
    def _three_values(cls, value: list[float]) -> list[float]:
        if len(value) != 3:
            raise ValueError("expected three values")
        return value

    def to_frame(self) -> Frame:
        return Frame(self.point, self.xaxis, self.yaxis)


class ToolConfig(BaseModel):
    """Tool definition registered for the system module."""

    name: str
    attachment_frame: FrameConfig = Field(default_factory=FrameConfig)
    tool_frame: FrameConfig = Field(default_factory=FrameConfig)
    mass: float = 0.001


class ExternalAxisConfig(BaseModel):
    """External axis attached to the robot."""

    name: str
    type: str = "linear"
    attachment_frame: FrameConfig = Field(default_factory=FrameConfig)
    direction: list[float] | None = None
    limits: tuple[float, float] = (-1000.0, 1000.0)
    axis_number: int | None = None

    @field_validator("type")
    @classmethod
    def _known_type(cls, value: str) -> str:
        if value not in ("linear", "rotational"):
            raise ValueError(f"unknown external axis type '{value}'")
        return value


class RobotConfig(BaseModel):
    """Robot selection: a preset placed at a position."""

    preset: str = "IRB2600ID-15/1.85"
    position: FrameConfig = Field(default_factory=FrameConfig)
    tool: str | None = None
    external_axes: list[ExternalAxisConfig] = Field(default_factory=list)


class JobConfig(BaseModel):
    """Complete generation job."""

    settings: GeneratorSettings = Field(default_factory=GeneratorSettings)
    robot: RobotConfig = Field(default_factory=RobotConfig)
    tools: list[ToolConfig] = Field(default_factory=list)
    actions: list[dict[str, Any]] = Field(default_factory=list)


def load_job(path: str | Path) -> JobConfig:
    """
    Load and validate a job file.

    Args:
        path: Path to the YAML job file

    Returns:
        Validated JobConfig

    Raises:
        ConfigurationError: If the file is missing, is not valid YAML or does
            not match the job schema
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Job file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return JobConfig(**data)
    except (yaml.YAMLError, ValidationError, TypeError) as e:
        raise ConfigurationError(
            f"Failed to load job file: {path}",
            details={"error": str(e)},
        )
