"""
Command-line interface for rapidgen.

Provides commands for listing robot presets, evaluating forward and inverse
kinematics and generating RAPID modules from job files.
"""

from pathlib import Path
from typing import Optional

import click
from compas.geometry import Frame
from rich.console import Console
from rich.table import Table

from rapidgen import __version__
from rapidgen.core.config import load_job
from rapidgen.core.exceptions import RapidGenError
from rapidgen.core.formatting import format_number
from rapidgen.core.geometry import frame_quaternion
from rapidgen.core.logging import configure_logging
from rapidgen.kinematics.presets import PRESETS, get_preset, robot_from_config, tool_from_config
from rapidgen.rapid.generator import RAPIDGenerator
from rapidgen.rapid.registry import ToolRegistry
from rapidgen.rapid.serialization import actions_from_dicts

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", default="WARNING", help="Minimum log level")
@click.option("--json-logs", is_flag=True, help="Write logs as JSON lines")
def main(log_level: str, json_logs: bool) -> None:
    """rapidgen - ABB RAPID code generation and robot kinematics."""
    configure_logging(level=log_level, json_output=json_logs)


def _print_warnings(messages: list[str]) -> None:
    for message in messages:
        console.print(f"[yellow]⚠[/yellow] {message}")


# =============================================================================
# Robot Commands
# =============================================================================


@main.command("presets")
def presets() -> None:
    """List available robot presets."""
    table = Table(title="Robot Presets")
    table.add_column("Name", style="cyan")
    table.add_column("Manufacturer")
    table.add_column("Payload (kg)")
    table.add_column("Joint Limits (deg)")

    for name, preset in PRESETS.items():
        limits = ", ".join(
            f"[{format_number(lo)}, {format_number(hi)}]" for lo, hi in preset.joint_limits
        )
        table.add_row(name, preset.manufacturer, format_number(preset.payload), limits)

    console.print(table)


@main.command("fk")
@click.argument("preset")
@click.argument("joints", nargs=6, type=float)
def forward(preset: str, joints: tuple[float, ...]) -> None:
    """Tool centre point for six joint values (degrees)."""
    try:
        robot = get_preset(preset)
        fk = robot.forward_kinematics(list(joints), hide_mesh=True)
    except RapidGenError as e:
        console.print(f"[red]✗[/red] {e}")
        raise SystemExit(1)

    point = fk.tcp_frame.point
    quaternion = frame_quaternion(fk.tcp_frame)

    table = Table(title=f"Forward Kinematics: {robot.name}")
    table.add_column("Property", style="cyan")
    table.add_column("Value")
    table.add_row("Position", ", ".join(format_number(v) for v in point))
    table.add_row("Quaternion", ", ".join(format_number(v, 6) for v in quaternion))
    table.add_row("In limits", "✓" if fk.in_limits else "✗")
    console.print(table)
    _print_warnings(fk.error_text)


@main.command("ik")
@click.argument("preset")
@click.argument("x", type=float)
@click.argument("y", type=float)
@click.argument("z", type=float)
@click.option(
    "--quaternion",
    "-q",
    nargs=4,
    type=float,
    default=(0.0, 0.0, 1.0, 0.0),
    help="Target orientation as q1 q2 q3 q4 (default: tool pointing down)",
)
@click.option("--config", "-c", "config", type=int, default=None, help="Axis configuration 0-7")
def inverse(
    preset: str,
    x: float,
    y: float,
    z: float,
    quaternion: tuple[float, float, float, float],
    config: Optional[int],
) -> None:
    """Joint values for a target position and orientation."""
    try:
        robot = get_preset(preset)
        target = Frame.from_quaternion(list(quaternion), point=[x, y, z])
        ik = robot.solve_frame(target, fixed_config=config)
    except RapidGenError as e:
        console.print(f"[red]✗[/red] {e}")
        raise SystemExit(1)

    table = Table(title=f"Inverse Kinematics: {robot.name}")
    table.add_column("Axis", style="cyan")
    table.add_column("Value (deg)")
    table.add_column("In limits")
    for i, (value, ok) in enumerate(zip(ik.robot_joint_position, ik.internal_axis_in_limits)):
        table.add_row(str(i + 1), format_number(value), "✓" if ok else "✗")
    console.print(table)
    console.print(f"Axis configuration: {ik.axis_configuration}")
    _print_warnings(ik.error_text)


# =============================================================================
# Generation Commands
# =============================================================================


@main.command("generate")
@click.argument("job", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    help="Directory for the generated modules",
)
def generate_job(job: Path, output_dir: Path) -> None:
    """Generate the RAPID program and system modules of a job file."""
    try:
        config = load_job(job)
        registry = ToolRegistry(owner=str(job))
        tools = {}
        for tool_config in config.tools:
            tool = tool_from_config(tool_config)
            registry.register(tool)
            tools[tool.name] = tool

        robot = robot_from_config(config.robot, config.tools)
        actions = actions_from_dicts(config.actions, robot, tools)

        generator = RAPIDGenerator(robot, config.settings)
        program = generator.create_program(actions)
        system = generator.create_system_module(registry)
    except RapidGenError as e:
        console.print(f"[red]✗[/red] Failed to generate: {e}")
        raise SystemExit(1)

    output_dir.mkdir(parents=True, exist_ok=True)
    program_path = output_dir / config.settings.program_file_name
    system_path = output_dir / config.settings.system_file_name
    program_path.write_text(program, newline="")
    system_path.write_text(system, newline="")

    console.print(f"[green]✓[/green] Wrote {program_path}")
    console.print(f"[green]✓[/green] Wrote {system_path}")
    if generator.first_movement_is_joint is False:
        console.print("[yellow]⚠[/yellow] The first movement is linear; start with a joint movement")
    _print_warnings(generator.error_text)


if __name__ == "__main__":
    main()
