"""
Preset robot definitions.

Each preset lists the joint frames of the robot at home position in its own
base coordinates, the joint limits and the flange frame. Link meshes are
empty placeholders unless the caller supplies loaded geometry.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

from compas.datastructures import Mesh
from compas.geometry import Frame, Transformation, Vector

from rapidgen.core.config import ExternalAxisConfig, RobotConfig, ToolConfig
from rapidgen.core.exceptions import RobotError
from rapidgen.core.geometry import Interval, frame_from_normal
from rapidgen.core.logging import get_logger
from rapidgen.kinematics.axes import (
    ExternalAxis,
    create_linear_axis,
    create_rotational_axis,
)
from rapidgen.kinematics.robot import Robot
from rapidgen.kinematics.tool import RobotTool

logger = get_logger(__name__)

X = (1.0, 0.0, 0.0)
Y = (0.0, 1.0, 0.0)
Z = (0.0, 0.0, 1.0)


@dataclass(frozen=True)
class RobotPreset:
    """Geometry of a robot model in base coordinates."""

    name: str
    manufacturer: str
    joint_axes: tuple[tuple[tuple[float, float, float], tuple[float, float, float]], ...]
    joint_limits: tuple[tuple[float, float], ...]
    flange: tuple[float, float, float]
    payload: float

    def joint_frames(self) -> list[Frame]:
        return [frame_from_normal(point, normal) for point, normal in self.joint_axes]

    def limits(self) -> list[Interval]:
        return [Interval(lo, hi) for lo, hi in self.joint_limits]

    def mounting_frame(self) -> Frame:
        # ABB tool0: Z out of the flange along X, X pointing down
        return Frame(self.flange, (0.0, 0.0, -1.0), (0.0, 1.0, 0.0))


PRESETS: dict[str, RobotPreset] = {
    "IRB2600ID-15/1.85": RobotPreset(
        name="IRB2600ID-15/1.85",
        manufacturer="ABB",
        joint_axes=(
            ((0.0, 0.0, 0.0), Z),
            ((150.0, 0.0, 445.0), Y),
            ((150.0, 0.0, 1345.0), Y),
            ((393.0, 0.0, 1495.0), X),
            ((936.0, 0.0, 1495.0), Y),
            ((1071.0, 0.0, 1495.0), X),
        ),
        joint_limits=(
            (-180.0, 180.0),
            (-95.0, 155.0),
            (-180.0, 75.0),
            (-175.0, 175.0),
            (-120.0, 120.0),
            (-400.0, 400.0),
        ),
        flange=(1071.0, 0.0, 1495.0),
        payload=15.0,
    ),
    "IRB140": RobotPreset(
        name="IRB140",
        manufacturer="ABB",
        joint_axes=(
            ((0.0, 0.0, 0.0), Z),
            ((70.0, 0.0, 352.0), Y),
            ((70.0, 0.0, 712.0), Y),
            ((250.0, 0.0, 712.0), X),
            ((450.0, 0.0, 712.0), Y),
            ((515.0, 0.0, 712.0), X),
        ),
        joint_limits=(
            (-180.0, 180.0),
            (-90.0, 110.0),
            (-230.0, 50.0),
            (-200.0, 200.0),
            (-115.0, 115.0),
            (-400.0, 400.0),
        ),
        flange=(515.0, 0.0, 712.0),
        payload=6.0,
    ),
}


def list_presets() -> list[str]:
    """Names of the available robot presets."""
    return list(PRESETS)


def get_preset(
    name: str,
    position: Frame | None = None,
    tool: RobotTool | None = None,
    external_axes: Iterable[ExternalAxis] = (),
    meshes: Sequence[Mesh] | None = None,
) -> Robot:
    """
    Build a preset robot.

    Args:
        name: Preset name, see ``list_presets``
        position: Base position of the robot (default world XY). Ignored when
            an external axis carries the robot: the robot is then placed on
            the attachment frame of that axis.
        tool: Tool mounted on the flange (default tool0)
        external_axes: External axes attached to the robot
        meshes: Seven link meshes in base coordinates

    Returns:
        Robot at the requested position

    Raises:
        RobotError: If the preset is unknown or the axes are invalid
    """
    if name not in PRESETS:
        raise RobotError(
            f"Unknown robot preset: {name}",
            details={"available": list_presets()},
        )
    preset = PRESETS[name]
    external_axes = list(external_axes)

    for axis in external_axes:
        if axis.moves_robot:
            position = axis.attachment_frame
            break
    if position is None:
        position = Frame.worldXY()

    robot = Robot(
        name=preset.name,
        joint_frames=preset.joint_frames(),
        joint_limits=preset.limits(),
        mounting_frame=preset.mounting_frame(),
        tool=tool,
        external_axes=external_axes,
        meshes=meshes,
        manufacturer=preset.manufacturer,
    )
    robot = robot.transformed(Transformation.from_frame(position))
    logger.info("robot_preset_loaded", preset=name, tool=robot.tool.name)
    return robot


def tool_from_config(config: ToolConfig) -> RobotTool:
    """Build a tool from its job file definition."""
    return RobotTool(
        name=config.name,
        attachment_frame=config.attachment_frame.to_frame(),
        tool_frame=config.tool_frame.to_frame(),
        mass=config.mass,
    )


def external_axis_from_config(config: ExternalAxisConfig) -> ExternalAxis:
    """Build an external axis from its job file definition."""
    limits = Interval(*config.limits)
    frame = config.attachment_frame.to_frame()
    if config.type == "linear":
        direction = Vector(*config.direction) if config.direction is not None else None
        return create_linear_axis(
            config.name, frame, limits, axis_direction=direction, axis_number=config.axis_number
        )
    return create_rotational_axis(config.name, frame, limits, axis_number=config.axis_number)


def robot_from_config(config: RobotConfig, tools: Sequence[ToolConfig] = ()) -> Robot:
    """
    Build the robot of a job.

    Args:
        config: Robot section of the job
        tools: Tool definitions of the job; ``config.tool`` names one of them

    Returns:
        Robot with its tool and external axes attached
    """
    tool = None
    if config.tool is not None:
        by_name = {t.name: t for t in tools}
        if config.tool not in by_name:
            raise RobotError(
                f"Robot tool '{config.tool}' is not defined",
                details={"tools": list(by_name)},
            )
        tool = tool_from_config(by_name[config.tool])

    return get_preset(
        config.preset,
        position=config.position.to_frame(),
        tool=tool,
        external_axes=[external_axis_from_config(a) for a in config.external_axes],
    )
