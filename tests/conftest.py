"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest
from compas.geometry import Frame

from rapidgen.core.geometry import Interval
from rapidgen.kinematics.axes import create_linear_axis, create_rotational_axis
from rapidgen.kinematics.presets import get_preset
from rapidgen.kinematics.tool import RobotTool
from rapidgen.rapid.registry import ToolRegistry


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def robot():
    """IRB 2600ID at the world origin with tool0."""
    return get_preset("IRB2600ID-15/1.85")


@pytest.fixture
def torch():
    """Welding torch with its tool centre point 200 mm in front of the flange."""
    return RobotTool(
        name="torch",
        attachment_frame=Frame.worldXY(),
        tool_frame=Frame([0.0, 0.0, 200.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]),
        mass=2.5,
    )


@pytest.fixture
def track():
    """Linear track along world X."""
    return create_linear_axis("track", Frame.worldXY(), Interval(0.0, 4000.0))


@pytest.fixture
def turntable():
    """Turntable 1500 mm in front of the robot."""
    frame = Frame([1500.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0])
    return create_rotational_axis("table", frame, Interval(-360.0, 360.0))


@pytest.fixture
def track_robot(track, turntable):
    """IRB 2600ID carried by a linear track, with a turntable."""
    return get_preset("IRB2600ID-15/1.85", external_axes=[track, turntable])


@pytest.fixture
def registry(torch):
    """Tool registry holding the torch."""
    registry = ToolRegistry(owner="tests")
    registry.register(torch)
    return registry


@pytest.fixture
def job_file(temp_dir):
    """A complete job file."""
    content = """
settings:
  module_name: Weld
  line_ending: "\\n"

robot:
  preset: IRB2600ID-15/1.85
  tool: torch

tools:
  - name: torch
    tool_frame:
      point: [0, 0, 200]
    mass: 2.5

actions:
  - type: comment
    text: Weld seam
  - type: movement
    movement_type: 0
    speed_data: v100
    zone_data: fine
    target:
      name: home
      frame:
        point: [1000, 0, 1000]
        xaxis: [-1, 0, 0]
        yaxis: [0, 1, 0]
  - type: movement
    movement_type: 1
    speed_data: 50
    zone_data: 2
    target:
      name: seam_start
      frame:
        point: [1000, 200, 900]
        xaxis: [-1, 0, 0]
        yaxis: [0, 1, 0]
    digital_output:
      name: do_arc
      is_active: true
  - type: timer
    duration: 1.5
"""
    path = temp_dir / "job.yaml"
    path.write_text(content)
    return path
