"""
RAPID data types used by movements: speed data, zone data and work objects.

Predefined values (``v100``, ``z10``, ``wobj0``, ...) exist on every ABB
controller and are never declared; user defined values are declared once per
generated program.
"""

from dataclasses import dataclass, field

from compas.geometry import Frame, Transformation

from rapidgen.core.exceptions import ActionError
from rapidgen.core.formatting import format_number, format_values
from rapidgen.core.geometry import frame_quaternion
from rapidgen.kinematics.axes import ExternalAxis

# ABB speed data presets: v_tcp (mm/s), v_ori (deg/s), v_leax (mm/s), v_reax (deg/s)
PREDEFINED_SPEEDS = (
    5, 10, 20, 30, 40, 50, 60, 80, 100, 150, 200, 300, 400, 500, 600,
    800, 1000, 1500, 2000, 2500, 3000, 4000, 5000, 6000, 7000,
)

# ABB zone data presets: pzone_tcp, pzone_ori, pzone_eax, zone_ori, zone_leax, zone_reax
PREDEFINED_ZONES = {
    "z0": (0.3, 0.3, 0.3, 0.03, 0.3, 0.03),
    "z1": (1, 1, 1, 0.1, 1, 0.1),
    "z5": (5, 8, 8, 0.8, 8, 0.8),
    "z10": (10, 15, 15, 1.5, 15, 1.5),
    "z15": (15, 23, 23, 2.3, 23, 2.3),
    "z20": (20, 30, 30, 3.0, 30, 3.0),
    "z30": (30, 45, 45, 4.5, 45, 4.5),
    "z40": (40, 60, 60, 6.0, 60, 6.0),
    "z50": (50, 75, 75, 7.5, 75, 7.5),
    "z60": (60, 90, 90, 9.0, 90, 9.0),
    "z80": (80, 120, 120, 12, 120, 12),
    "z100": (100, 150, 150, 15, 150, 15),
    "z150": (150, 225, 225, 23, 225, 23),
    "z200": (200, 300, 300, 30, 300, 30),
}


def _is_identifier(name: str) -> bool:
    return bool(name) and not name[0].isdigit() and name.replace("_", "a").isalnum()


@dataclass(frozen=True)
class SpeedData:
    """
    TCP and external axis velocities.

    Attributes:
        name: RAPID speeddata name
        v_tcp: TCP speed in mm/s
        v_ori: Reorientation speed in degrees/s
        v_leax: Linear external axis speed in mm/s
        v_reax: Rotational external axis speed in degrees/s
        predefined: True for the controller's built-in vXXX values
    """

    name: str
    v_tcp: float
    v_ori: float = 500.0
    v_leax: float = 5000.0
    v_reax: float = 1000.0
    predefined: bool = False

    def __post_init__(self) -> None:
        if not _is_identifier(self.name):
            raise ActionError(f"Invalid speed data name: '{self.name}'")
        if min(self.v_tcp, self.v_ori, self.v_leax, self.v_reax) < 0.0:
            raise ActionError(f"Speed data '{self.name}' has a negative speed")

    @classmethod
    def predefined_speed(cls, v_tcp: int) -> "SpeedData":
        if v_tcp not in PREDEFINED_SPEEDS:
            raise ActionError(
                f"v{v_tcp} is not a predefined speed",
                details={"available": list(PREDEFINED_SPEEDS)},
            )
        return cls(name=f"v{v_tcp}", v_tcp=float(v_tcp), predefined=True)

    @classmethod
    def from_value(cls, v_tcp: float) -> "SpeedData":
        """Nearest predefined speed for a TCP speed in mm/s."""
        closest = min(PREDEFINED_SPEEDS, key=lambda s: abs(s - v_tcp))
        return cls.predefined_speed(closest)

    def declaration_code(self) -> str:
        if self.predefined:
            return ""
        values = format_values((self.v_tcp, self.v_ori, self.v_leax, self.v_reax))
        return f"VAR speeddata {self.name} := [{values}];"


@dataclass(frozen=True)
class ZoneData:
    """
    Size of the corner path (blending) at the end of a movement.

    ``fine_point`` makes the robot stop exactly at the target.
    """

    name: str
    fine_point: bool = False
    pzone_tcp: float = 0.0
    pzone_ori: float = 0.0
    pzone_eax: float = 0.0
    zone_ori: float = 0.0
    zone_leax: float = 0.0
    zone_reax: float = 0.0
    predefined: bool = False

    def __post_init__(self) -> None:
        if not _is_identifier(self.name):
            raise ActionError(f"Invalid zone data name: '{self.name}'")
        values = (
            self.pzone_tcp,
            self.pzone_ori,
            self.pzone_eax,
            self.zone_ori,
            self.zone_leax,
            self.zone_reax,
        )
        if min(values) < 0.0:
            raise ActionError(f"Zone data '{self.name}' has a negative zone size")

    @classmethod
    def fine(cls) -> "ZoneData":
        return cls(name="fine", fine_point=True, predefined=True)

    @classmethod
    def from_value(cls, precision: float) -> "ZoneData":
        """
        Zone data for a corner path radius in mm.

        -1 gives ``fine``, the radius of a predefined zone (0, 1, 5, 10, ...)
        gives that zone and any other radius gives a user defined zone with
        the ABB proportions.
        """
        if precision == -1:
            return cls.fine()
        if precision < 0:
            raise ActionError(f"Invalid zone precision: {precision}")
        predefined_name = "z" + format_number(precision)
        if predefined_name in PREDEFINED_ZONES:
            return cls(predefined_name, False, *PREDEFINED_ZONES[predefined_name], predefined=True)
        name = "zone" + format_number(precision).replace(".", "_")
        return cls(
            name,
            False,
            precision,
            1.5 * precision,
            1.5 * precision,
            0.15 * precision,
            1.5 * precision,
            0.15 * precision,
        )

    def declaration_code(self) -> str:
        if self.predefined:
            return ""
        finep = "TRUE" if self.fine_point else "FALSE"
        values = format_values(
            (
                self.pzone_tcp,
                self.pzone_ori,
                self.pzone_eax,
                self.zone_ori,
                self.zone_leax,
                self.zone_reax,
            )
        )
        return f"VAR zonedata {self.name} := [{finep}, {values}];"


def pose_code(frame: Frame) -> str:
    """RAPID pose literal ``[[x, y, z], [q1, q2, q3, q4]]`` of a frame."""
    point = frame.point
    return (
        f"[[{format_values((point.x, point.y, point.z))}], "
        f"[{format_values(frame_quaternion(frame), 6)}]]"
    )


@dataclass(frozen=True)
class WorkObject:
    """
    Coordinate system that targets are defined in.

    Attributes:
        name: RAPID wobjdata name
        user_frame: User coordinate system in world coordinates
        object_frame: Object coordinate system within the user frame
        external_axis: Rotational axis that moves the work object, if any
        robot_hold: True if the robot holds the work object
    """

    name: str = "wobj0"
    user_frame: Frame = field(default_factory=Frame.worldXY)
    object_frame: Frame = field(default_factory=Frame.worldXY)
    external_axis: ExternalAxis | None = None
    robot_hold: bool = False

    def __post_init__(self) -> None:
        if not _is_identifier(self.name):
            raise ActionError(f"Invalid work object name: '{self.name}'")

    @property
    def predefined(self) -> bool:
        return self.name == "wobj0"

    @property
    def global_frame(self) -> Frame:
        """Object frame in world coordinates."""
        return self.object_frame.transformed(Transformation.from_frame(self.user_frame))

    def declaration_code(self) -> str:
        if self.predefined:
            return ""
        robhold = "TRUE" if self.robot_hold else "FALSE"
        if self.external_axis is None:
            ufprog, ufmec = "TRUE", ""
        else:
            ufprog, ufmec = "FALSE", self.external_axis.name
        return (
            f'PERS wobjdata {self.name} := [{robhold}, {ufprog}, "{ufmec}", '
            f"{pose_code(self.user_frame)}, {pose_code(self.object_frame)}];"
        )
