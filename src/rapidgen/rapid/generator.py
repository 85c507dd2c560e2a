"""
RAPID code generator.

Builds the program module (``main_T.mod``) from an ordered list of actions
and the system module (``BASE.sys``) from a tool registry.

The program is generated in two passes over the actions. The declaration
pass writes every variable once, in order of first use; the instruction pass
writes the procedure body in program order.
"""

from typing import Callable, Iterable, Sequence

from rapidgen.core.config import GeneratorSettings
from rapidgen.core.exceptions import ActionError
from rapidgen.core.formatting import format_number, format_values
from rapidgen.core.logging import generation_context, get_logger
from rapidgen.kinematics.robot import Robot
from rapidgen.rapid.actions import Action, ActionType
from rapidgen.rapid.movement import Movement
from rapidgen.rapid.registry import ToolRegistry

logger = get_logger(__name__)

SYSTEM_MODULE_HEADER = (
    "MODULE BASE (SYSMODULE, NOSTEPIN, VIEWONLY)",
    "",
    " ! System module with basic predefined system data",
    " !************************************************",
    "",
    " ! System data tool0, wobj0 and load0",
    " ! Do not translate or delete tool0, wobj0, load0",
    " PERS tooldata tool0 := [TRUE, [[0, 0, 0], [1, 0, 0, 0]],",
    "\t\t\t\t\t\t[0.001, [0, 0, 0.001],[1, 0, 0, 0], 0, 0, 0]];",
    "",
    ' PERS wobjdata wobj0 := [FALSE, TRUE, "" , [[0, 0, 0],[1, 0, 0, 0]],',
    "\t\t\t\t\t\t[[0, 0, 0],[1, 0, 0, 0]]];",
    "",
    " PERS loaddata load0 := [0.001, [0, 0, 0.001],[1, 0, 0, 0], 0, 0, 0];",
    "",
)


class RAPIDGenerator:
    """
    Generates RAPID modules for a robot.

    The declaration registry (``declared``) and the diagnostics
    (``error_text``, ``first_movement_is_joint``) belong to the last
    generated program; use one generator per concurrent generation.

    Example:
        >>> generator = RAPIDGenerator(robot)
        >>> program = generator.create_program(actions, "MainModule")
        >>> system = generator.create_system_module(registry)
    """

    def __init__(self, robot: Robot, settings: GeneratorSettings | None = None) -> None:
        self.robot = robot
        self.settings = settings or GeneratorSettings()
        self.declared: dict[str, object] = {}
        self.error_text: list[str] = []
        self.first_movement_is_joint: bool | None = None
        self._declarers: dict[ActionType, Callable[[Action], list[str]]] = {
            ActionType.MOVEMENT: self._declare_movement,
            ActionType.EXTERNAL_JOINT_POSITION: self._declare_named,
            ActionType.ROBOT_JOINT_POSITION: self._declare_named,
        }

    def create_program(self, actions: Sequence[Action], module_name: str | None = None) -> str:
        """
        Generate the program module.

        Args:
            actions: Actions in program order
            module_name: Module name (defaults to the settings)

        Returns:
            Program module text with platform line endings
        """
        module_name = module_name or self.settings.module_name
        self.declared = {}
        self.error_text = []
        self.first_movement_is_joint = None

        with generation_context(module_name, self.robot.name):
            declarations: list[str] = []
            for action in actions:
                declare = self._declarers.get(action.action_type, self._declare_plain)
                declarations.extend(declare(action))

            instructions: list[str] = []
            for action in actions:
                if action.action_type is ActionType.MOVEMENT and self.first_movement_is_joint is None:
                    self.first_movement_is_joint = not action.is_linear
                code = action.instruction_code(self.robot)
                if code:
                    instructions.append(code)

            program = self._assemble(module_name, declarations, instructions)

            if self.first_movement_is_joint is False:
                logger.warning("first_movement_is_linear")
            for message in self.error_text:
                logger.warning("rapid_generation_warning", message=message)
            logger.info(
                "rapid_program_generated",
                actions=len(actions),
                declarations=len(declarations),
                instructions=len(instructions),
                warnings=len(self.error_text),
            )
        return program

    def create_system_module(self, registry: ToolRegistry | None = None) -> str:
        """
        Generate the system module with the predefined data and one tooldata
        per registered tool.
        """
        lines = list(SYSTEM_MODULE_HEADER)
        for tool in registry or ():
            x, y, z = tool.tcp_position
            lines.append(
                f" PERS tooldata {tool.name} := [TRUE, [[{format_values((x, y, z))}], "
                f"[{format_values(tool.quaternion, 6)}]],"
            )
            lines.append(
                f"\t\t\t\t\t\t[{format_number(tool.mass, 3)}, [0, 0, 0.001],[1, 0, 0, 0], 0, 0, 0]];"
            )
            lines.append("")
        lines.append("ENDMODULE")
        return self._join(lines)

    def _assemble(self, module_name: str, declarations: list[str], instructions: list[str]) -> str:
        indent = self.settings.indent
        lines = [f"MODULE {module_name}", ""]
        for code in declarations:
            lines.extend(indent + line for line in code.split("\n"))
        if declarations:
            lines.append("")
        lines.append(f"{indent}PROC {self.settings.procedure_name}()")
        for code in instructions:
            lines.extend(indent * 2 + line for line in code.split("\n"))
        lines.extend([f"{indent}ENDPROC", "", "ENDMODULE"])
        return self._join(lines)

    def _join(self, lines: Iterable[str]) -> str:
        return "\n".join(lines).replace("\n", self.settings.line_ending)

    def _is_declared(self, name: str, value: object) -> bool:
        existing = self.declared.get(name)
        if existing is None:
            return False
        if type(existing) is not type(value):
            raise ActionError(
                f"Name '{name}' is declared as both {type(existing).__name__} "
                f"and {type(value).__name__}",
                details={"name": name},
            )
        return True

    def _register(self, name: str, value: object, code: str) -> list[str]:
        if not code or self._is_declared(name, value):
            return []
        self.declared[name] = value
        return [code]

    def _declare_plain(self, action: Action) -> list[str]:
        code = action.declaration_code(self.robot)
        return [code] if code else []

    def _declare_named(self, action: Action) -> list[str]:
        return self._register(action.name, action, action.declaration_code(self.robot))

    def _declare_movement(self, movement: Movement) -> list[str]:
        codes = []
        for data in (movement.speed_data, movement.zone_data, movement.work_object):
            codes.extend(self._register(data.name, data, data.declaration_code()))

        name = movement.variable_name
        if not self._is_declared(name, movement.target):
            ik = movement.solve(self.robot)
            codes.extend(self._register(name, movement.target, movement.declaration_code(self.robot, ik)))
            self.error_text.extend(f"{movement.target.name}: {message}" for message in ik.error_text)
        return codes


def generate(
    module_name: str,
    actions: Sequence[Action],
    robot: Robot,
    registry: ToolRegistry | None = None,
    settings: GeneratorSettings | None = None,
) -> tuple[str, str]:
    """
    Generate the program and system modules.

    Args:
        module_name: Name of the program module
        actions: Actions in program order
        robot: Robot the program is generated for
        registry: Tools written to the system module
        settings: Generator settings

    Returns:
        Tuple of (program module text, system module text)
    """
    generator = RAPIDGenerator(robot, settings)
    program = generator.create_program(actions, module_name)
    system = generator.create_system_module(registry)
    return program, system
