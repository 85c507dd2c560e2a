"""
Versioned dictionary (de)serialization of targets, data types and actions.

Every dictionary produced by ``to_dict`` carries a ``type`` and a
``version``. ``from_dict`` also accepts the shorter forms used in job files:
nested values without ``type``/``version``, speeds and zones given as numbers
or predefined names, and tools or external axes given by name.
"""

from typing import Any, Callable, Mapping

from compas.geometry import Frame

from rapidgen.core.exceptions import ConfigurationError, RapidGenError
from rapidgen.kinematics.joint_positions import ExternalJointPosition, RobotJointPosition
from rapidgen.kinematics.robot import Robot
from rapidgen.kinematics.tool import RobotTool
from rapidgen.rapid.actions import (
    AutoAxisConfig,
    CodeLine,
    CodeType,
    Comment,
    DigitalOutput,
    JointPositionDeclaration,
    Timer,
    WaitDI,
)
from rapidgen.rapid.datatypes import PREDEFINED_ZONES, SpeedData, WorkObject, ZoneData
from rapidgen.rapid.movement import Movement, MovementType
from rapidgen.rapid.targets import RobotTarget

SCHEMA_VERSION = 1


def frame_to_dict(frame: Frame) -> dict[str, list[float]]:
    return {
        "point": list(frame.point),
        "xaxis": list(frame.xaxis),
        "yaxis": list(frame.yaxis),
    }


def frame_from_dict(data: Mapping[str, Any]) -> Frame:
    return Frame(
        data.get("point", [0.0, 0.0, 0.0]),
        data.get("xaxis", [1.0, 0.0, 0.0]),
        data.get("yaxis", [0.0, 1.0, 0.0]),
    )


def _tagged(type_name: str, **fields: Any) -> dict[str, Any]:
    return {"type": type_name, "version": SCHEMA_VERSION, **fields}


def _external_values(position: ExternalJointPosition) -> list[float | None]:
    return [v if position.is_defined(i) else None for i, v in enumerate(position)]


def to_dict(value: Any) -> dict[str, Any]:
    """
    Serialize a value.

    Raises:
        ConfigurationError: If the value type has no serialized form
    """
    encoder = _ENCODERS.get(type(value))
    if encoder is None:
        raise ConfigurationError(f"Cannot serialize {type(value).__name__}")
    return encoder(value)


def _encode_movement(movement: Movement) -> dict[str, Any]:
    return _tagged(
        "movement",
        target=to_dict(movement.target),
        speed_data=to_dict(movement.speed_data),
        movement_type=int(movement.movement_type),
        zone_data=to_dict(movement.zone_data),
        tool=to_dict(movement.tool) if movement.tool is not None else None,
        work_object=to_dict(movement.work_object),
        digital_output=(
            to_dict(movement.digital_output) if movement.digital_output is not None else None
        ),
    )


_ENCODERS: dict[type, Callable[[Any], dict[str, Any]]] = {
    RobotJointPosition: lambda p: _tagged("robot_joint_position", values=p.to_list()),
    ExternalJointPosition: lambda p: _tagged("external_joint_position", values=_external_values(p)),
    SpeedData: lambda s: _tagged(
        "speed_data",
        name=s.name,
        v_tcp=s.v_tcp,
        v_ori=s.v_ori,
        v_leax=s.v_leax,
        v_reax=s.v_reax,
        predefined=s.predefined,
    ),
    ZoneData: lambda z: _tagged(
        "zone_data",
        name=z.name,
        fine_point=z.fine_point,
        pzone_tcp=z.pzone_tcp,
        pzone_ori=z.pzone_ori,
        pzone_eax=z.pzone_eax,
        zone_ori=z.zone_ori,
        zone_leax=z.zone_leax,
        zone_reax=z.zone_reax,
        predefined=z.predefined,
    ),
    WorkObject: lambda w: _tagged(
        "work_object",
        name=w.name,
        user_frame=frame_to_dict(w.user_frame),
        object_frame=frame_to_dict(w.object_frame),
        external_axis=w.external_axis.name if w.external_axis is not None else None,
        robot_hold=w.robot_hold,
    ),
    RobotTool: lambda t: _tagged(
        "robot_tool",
        name=t.name,
        attachment_frame=frame_to_dict(t.attachment_frame),
        tool_frame=frame_to_dict(t.tool_frame),
        mass=t.mass,
    ),
    RobotTarget: lambda t: _tagged(
        "robot_target",
        name=t.name,
        frame=frame_to_dict(t.frame),
        axis_config=t.axis_config,
        external_joint_position=_external_values(t.external_joint_position),
    ),
    Comment: lambda c: _tagged("comment", text=c.text, code_type=c.code_type.value),
    Timer: lambda t: _tagged("timer", duration=t.duration),
    DigitalOutput: lambda d: _tagged("digital_output", name=d.name, is_active=d.is_active),
    WaitDI: lambda w: _tagged("wait_di", name=w.name, value=w.value),
    AutoAxisConfig: lambda a: _tagged("auto_axis_config", enabled=a.enabled),
    CodeLine: lambda c: _tagged("code_line", code=c.code, code_type=c.code_type.value),
    JointPositionDeclaration: lambda j: _tagged(
        "joint_position_declaration", name=j.name, position=to_dict(j.position)
    ),
    Movement: _encode_movement,
}


class _Decoder:
    """Decodes dictionaries for one robot and set of named tools."""

    def __init__(self, robot: Robot | None, tools: Mapping[str, RobotTool]) -> None:
        self.robot = robot
        self.tools = dict(tools)

    def decode(self, data: Mapping[str, Any], expected: str | None = None) -> Any:
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"Expected a mapping, got {type(data).__name__}")
        type_name = data.get("type", expected)
        if type_name is None:
            raise ConfigurationError("Serialized value has no type", details={"data": dict(data)})
        if expected is not None and type_name != expected:
            raise ConfigurationError(
                f"Expected a '{expected}', got a '{type_name}'",
                details={"data": dict(data)},
            )
        version = data.get("version", SCHEMA_VERSION)
        if version > SCHEMA_VERSION:
            raise ConfigurationError(
                f"Unsupported schema version {version} for '{type_name}'",
                details={"supported": SCHEMA_VERSION},
            )
        method = getattr(self, f"_{type_name}", None)
        if method is None:
            raise ConfigurationError(f"Unknown serialized type: '{type_name}'")
        return method(data)

    def _robot_joint_position(self, data):
        return RobotJointPosition(*data.get("values", ()))

    def _external_joint_position(self, data):
        return ExternalJointPosition.from_values(data.get("values", ()))

    def _speed_data(self, data):
        return SpeedData(
            name=data["name"],
            v_tcp=data["v_tcp"],
            v_ori=data.get("v_ori", 500.0),
            v_leax=data.get("v_leax", 5000.0),
            v_reax=data.get("v_reax", 1000.0),
            predefined=data.get("predefined", False),
        )

    def _zone_data(self, data):
        return ZoneData(
            name=data["name"],
            fine_point=data.get("fine_point", False),
            pzone_tcp=data.get("pzone_tcp", 0.0),
            pzone_ori=data.get("pzone_ori", 0.0),
            pzone_eax=data.get("pzone_eax", 0.0),
            zone_ori=data.get("zone_ori", 0.0),
            zone_leax=data.get("zone_leax", 0.0),
            zone_reax=data.get("zone_reax", 0.0),
            predefined=data.get("predefined", False),
        )

    def _work_object(self, data):
        axis = None
        axis_name = data.get("external_axis")
        if axis_name is not None:
            if self.robot is None:
                raise ConfigurationError(
                    f"Work object '{data['name']}' needs a robot to resolve its external axis"
                )
            axis = next((a for a in self.robot.external_axes if a.name == axis_name), None)
            if axis is None:
                raise ConfigurationError(
                    f"External axis '{axis_name}' is not attached to the robot",
                    details={"axes": [a.name for a in self.robot.external_axes]},
                )
        return WorkObject(
            name=data.get("name", "wobj0"),
            user_frame=frame_from_dict(data.get("user_frame", {})),
            object_frame=frame_from_dict(data.get("object_frame", {})),
            external_axis=axis,
            robot_hold=data.get("robot_hold", False),
        )

    def _robot_tool(self, data):
        return RobotTool(
            name=data["name"],
            attachment_frame=frame_from_dict(data.get("attachment_frame", {})),
            tool_frame=frame_from_dict(data.get("tool_frame", {})),
            mass=data.get("mass", 0.001),
        )

    def _robot_target(self, data):
        return RobotTarget(
            name=data["name"],
            frame=frame_from_dict(data.get("frame", {})),
            axis_config=data.get("axis_config"),
            external_joint_position=ExternalJointPosition.from_values(
                data.get("external_joint_position", ())
            ),
        )

    def _comment(self, data):
        return Comment(data["text"], CodeType(data.get("code_type", "instruction")))

    def _timer(self, data):
        return Timer(data["duration"])

    def _digital_output(self, data):
        return DigitalOutput(data["name"], data.get("is_active", True))

    def _wait_di(self, data):
        return WaitDI(data["name"], data.get("value", True))

    def _auto_axis_config(self, data):
        return AutoAxisConfig(data.get("enabled", True))

    def _code_line(self, data):
        return CodeLine(data["code"], CodeType(data.get("code_type", "instruction")))

    def _joint_position_declaration(self, data):
        return JointPositionDeclaration(data["name"], self.decode(data["position"]))

    def _movement(self, data):
        return Movement(
            target=self.decode(data["target"], "robot_target"),
            speed_data=self._speed(data.get("speed_data", 5)),
            movement_type=MovementType(data.get("movement_type", 0)),
            zone_data=self._zone(data.get("zone_data", 0)),
            tool=self._tool(data.get("tool")),
            work_object=self.decode(data.get("work_object", {}), "work_object"),
            digital_output=(
                self.decode(data["digital_output"], "digital_output")
                if data.get("digital_output") is not None
                else None
            ),
        )

    def _speed(self, value):
        if isinstance(value, str):
            return SpeedData.predefined_speed(int(value.lstrip("v")))
        if isinstance(value, (int, float)):
            return SpeedData.from_value(value)
        return self.decode(value, "speed_data")

    def _zone(self, value):
        if isinstance(value, str):
            if value == "fine":
                return ZoneData.fine()
            if value not in PREDEFINED_ZONES:
                raise ConfigurationError(f"Unknown predefined zone: '{value}'")
            return ZoneData(value, False, *PREDEFINED_ZONES[value], predefined=True)
        if isinstance(value, (int, float)):
            return ZoneData.from_value(value)
        return self.decode(value, "zone_data")

    def _tool(self, value):
        if value is None:
            return None
        if isinstance(value, str):
            if value in self.tools:
                return self.tools[value]
            if self.robot is not None and value == self.robot.tool.name:
                return self.robot.tool
            raise ConfigurationError(
                f"Tool '{value}' is not defined",
                details={"tools": list(self.tools)},
            )
        return self.decode(value, "robot_tool")


def from_dict(
    data: Mapping[str, Any],
    robot: Robot | None = None,
    tools: Mapping[str, RobotTool] | None = None,
) -> Any:
    """
    Deserialize a value.

    Args:
        data: Serialized value with a ``type`` key
        robot: Robot used to resolve external axes of work objects by name
        tools: Tools that movements may refer to by name

    Raises:
        ConfigurationError: If the type is unknown, the version is newer than
            supported or required fields are missing
    """
    decoder = _Decoder(robot, tools or {})
    try:
        return decoder.decode(data)
    except RapidGenError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(
            "Invalid serialized value",
            details={"error": repr(e), "type": data.get("type") if isinstance(data, Mapping) else None},
        )


def actions_from_dicts(
    items: list[Mapping[str, Any]],
    robot: Robot | None = None,
    tools: Mapping[str, RobotTool] | None = None,
) -> list[Any]:
    """Deserialize an ordered list of actions."""
    return [from_dict(item, robot, tools) for item in items]
