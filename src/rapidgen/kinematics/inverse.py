"""
Closed-form inverse kinematics for a six-axis robot with a spherical wrist.

The solver works directly on the joint frames of the robot:

1. The wrist centre (origin of joint 5) is moved with the rigid
   transformation that brings the home tool centre point onto the target.
2. Joint 1 turns the arm plane towards the wrist centre (two branches: the
   wrist centre in front of or behind axis 1).
3. Joints 2 and 3 place the wrist centre in the arm plane with the law of
   cosines (two branches: the wrist centre in front of or behind the lower
   arm).
4. Joints 4, 5 and 6 produce the remaining rotation, decomposed as
   X-Y-X Euler angles in the wrist basis (two branches: axis 5 positive or
   negative).

The eight candidates are indexed by the ABB axis configuration ``cfx``.
"""

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np
from compas.geometry import Frame, Rotation, Transformation

from rapidgen.core.exceptions import ActionError
from rapidgen.core.geometry import Interval, copy_frame
from rapidgen.core.logging import get_logger
from rapidgen.kinematics.joint_positions import ExternalJointPosition, RobotJointPosition

if TYPE_CHECKING:
    from rapidgen.kinematics.robot import Robot
    from rapidgen.rapid.movement import Movement

logger = get_logger(__name__)

EPSILON = 1e-9
REACH_TOLERANCE = 1e-6

BEHIND_AXIS_1 = 4
BEHIND_LOWER_ARM = 2
AXIS_5_NEGATIVE = 1


def axis_configuration(behind_axis_1: bool, behind_lower_arm: bool, axis_5_negative: bool) -> int:
    """ABB cfx value for the three branch choices."""
    return (
        BEHIND_AXIS_1 * behind_axis_1
        + BEHIND_LOWER_ARM * behind_lower_arm
        + AXIS_5_NEGATIVE * axis_5_negative
    )


def normalize_angle(value: float) -> float:
    """Wrap an angle in degrees into (-180, 180]."""
    value = (value + 180.0) % 360.0 - 180.0
    if value == -180.0:
        value = 180.0
    return value


def fit_angle(value: float, limits: Interval, reference: float = 0.0) -> float:
    """
    Choose among the equivalent angles value + k*360 the one within the limits
    that is closest to the reference. Returns the wrapped value if none fits.
    """
    value = normalize_angle(value)
    options = [value + k * 360.0 for k in (-2, -1, 0, 1, 2)]
    inside = [v for v in options if limits.contains(v)]
    if not inside:
        return value
    return min(inside, key=lambda v: (abs(v - reference), abs(v)))


@dataclass
class IKSolution:
    """One of the eight joint solutions for a target."""

    axis_configuration: int
    robot_joint_position: RobotJointPosition
    reachable: bool
    internal_axis_in_limits: list[bool]
    limit_violation: float

    @property
    def in_limits(self) -> bool:
        return all(self.internal_axis_in_limits)

    def distance_to(self, reference: RobotJointPosition) -> float:
        return float(np.linalg.norm(self.robot_joint_position.to_array() - reference.to_array()))


def _unit(vector) -> np.ndarray:
    array = np.array([vector[0], vector[1], vector[2]], dtype=float)
    return array / np.linalg.norm(array)


def _point(point) -> np.ndarray:
    return np.array([point[0], point[1], point[2]], dtype=float)


def _apply(transformation: Transformation, point: np.ndarray) -> np.ndarray:
    matrix = np.array(transformation.matrix, dtype=float)
    return matrix[:3, :3] @ point + matrix[:3, 3]


def _decompose_wrist(matrix: np.ndarray, reference_a: float) -> list[tuple[float, float, float]]:
    """
    Decompose a rotation matrix as Rx(a) * Ry(b) * Rx(c).

    Returns two solutions, the first with b >= 0 and the second with b <= 0.
    At a wrist singularity (b = 0 or 180) only a + c (or a - c) is defined;
    a is then kept at the reference.
    """
    sin_b = math.hypot(matrix[0, 1], matrix[0, 2])
    if sin_b < EPSILON:
        a = reference_a
        phi = math.atan2(matrix[2, 1], matrix[1, 1])
        if matrix[0, 0] > 0.0:
            return [(a, 0.0, phi - a), (a, 0.0, phi - a)]
        return [(a, math.pi, a - phi), (a, -math.pi, a - phi)]

    b = math.atan2(sin_b, matrix[0, 0])
    a = math.atan2(matrix[1, 0], -matrix[2, 0])
    c = math.atan2(matrix[0, 1], matrix[0, 2])
    return [(a, b, c), (a + math.pi, -b, c + math.pi)]


class InverseKinematics:
    """
    Joint values for a world target frame.

    Unreachable targets and limit violations do not raise; the best
    candidate is returned and the problems are collected in ``error_text``.

    Attributes:
        robot_joint_position: Solved internal joint values (degrees)
        external_joint_position: Resolved external axis values
        axis_configuration: Configuration (cfx) of the chosen solution
        solutions: All eight candidates by configuration
        error_text: Messages for out of reach and out of limits conditions
    """

    def __init__(
        self,
        robot: "Robot",
        target_frame: Frame,
        external_joint_position: ExternalJointPosition | Sequence[float] | None = None,
        fixed_config: int | None = None,
        reference: RobotJointPosition | Sequence[float] | None = None,
    ) -> None:
        if fixed_config is not None and not 0 <= fixed_config <= 7:
            raise ActionError(
                f"Axis configuration must be in 0-7, got {fixed_config}",
                details={"fixed_config": fixed_config},
            )
        self.robot = robot
        self.target_frame = copy_frame(target_frame)
        self.target_external_joint_position = ExternalJointPosition(
            external_joint_position if external_joint_position is not None else ()
        )
        self.fixed_config = fixed_config
        self.reference = RobotJointPosition(reference if reference is not None else ())

        self.robot_joint_position = RobotJointPosition()
        self.external_joint_position = ExternalJointPosition()
        self.axis_configuration = 0
        self.solutions: dict[int, IKSolution] = {}
        self.internal_axis_in_limits: list[bool] = [True] * 6
        self.external_axis_in_limits: list[bool] = [True] * 6
        self.error_text: list[str] = []

    @classmethod
    def from_movement(
        cls,
        robot: "Robot",
        movement: "Movement",
        fixed_config: int | None = None,
        reference: RobotJointPosition | Sequence[float] | None = None,
    ) -> "InverseKinematics":
        """Set up the solver for the target of a movement."""
        if fixed_config is None:
            fixed_config = movement.target.axis_config
        return cls(
            robot,
            movement.posed_global_target_frame(robot),
            movement.target.external_joint_position,
            fixed_config,
            reference,
        )

    @property
    def in_limits(self) -> bool:
        return all(self.internal_axis_in_limits) and all(self.external_axis_in_limits)

    def calculate(self) -> None:
        """Solve all candidates and select one."""
        self.error_text = []
        self.external_joint_position = self.resolve_external_joint_position()
        base_change = self.robot.base_change(self.external_joint_position)
        local_target = self.target_frame.transformed(base_change.inverted())

        self.solutions = self._solve(local_target)
        chosen = self._select()
        self.robot_joint_position = chosen.robot_joint_position
        self.axis_configuration = chosen.axis_configuration
        self.internal_axis_in_limits = list(chosen.internal_axis_in_limits)

        if not chosen.reachable:
            self.error_text.append("Target is out of reach.")
        for i, ok in enumerate(chosen.internal_axis_in_limits):
            if not ok:
                self.error_text.append(f"Internal axis value {i + 1} is not in range.")
        self._check_external_limits()

        if self.error_text:
            logger.warning(
                "inverse_kinematics_out_of_limits",
                robot=self.robot.name,
                axis_configuration=self.axis_configuration,
                messages=self.error_text,
            )
        else:
            logger.debug(
                "inverse_kinematics_solved",
                robot=self.robot.name,
                axis_configuration=self.axis_configuration,
            )

    def resolve_external_joint_position(self) -> ExternalJointPosition:
        """
        External axis values used for the solution.

        Attached axes take the target value when it is defined. Otherwise
        the axis carrying the robot moves to the point closest to the target
        and any other attached axis stays at zero. Slots without an attached
        axis keep the target value.
        """
        position = self.target_external_joint_position
        for axis in self.robot.external_axes:
            number = axis.axis_number
            if position.is_defined(number):
                continue
            if axis.moves_robot:
                value = axis.closest_value(self.target_frame.point)
            else:
                value = 0.0
            position = position.with_value(number, value)
        return position

    def _check_external_limits(self) -> None:
        self.external_axis_in_limits = [True] * 6
        for axis in self.robot.external_axes:
            number = axis.axis_number
            if not axis.axis_limits.contains(self.external_joint_position[number]):
                self.external_axis_in_limits[number] = False
                self.error_text.append(f"External axis value {number + 1} is not in range.")

    def _select(self) -> IKSolution:
        if self.fixed_config is not None:
            return self.solutions[self.fixed_config]

        valid = [s for s in self.solutions.values() if s.reachable and s.in_limits]
        if valid:
            return min(valid, key=lambda s: (s.distance_to(self.reference), s.axis_configuration))

        self.error_text.append("No axis configuration is within the joint limits.")
        return min(
            self.solutions.values(),
            key=lambda s: (
                not s.reachable,
                s.limit_violation,
                s.distance_to(self.reference),
                s.axis_configuration,
            ),
        )

    def _solve(self, target: Frame) -> dict[int, IKSolution]:
        robot = self.robot
        frames = robot.joint_frames
        reference = [math.radians(v) for v in self.reference]

        o1, n1 = _point(frames[0].point), _unit(frames[0].zaxis)
        p2, n2 = _point(frames[1].point), _unit(frames[1].zaxis)
        p3 = _point(frames[2].point)
        wc0 = _point(frames[4].point)

        to_target = Transformation.from_frame_to_frame(robot.tool_frame, target)
        wc = _apply(to_target, wc0)

        def horizontal(v: np.ndarray) -> np.ndarray:
            return v - np.dot(v, n1) * n1

        forward = horizontal(wc0 - o1)
        if np.linalg.norm(forward) < EPSILON:
            forward = horizontal(_unit(frames[1].xaxis))
        forward = forward / np.linalg.norm(forward)
        side = np.cross(n1, forward)

        w = horizontal(wc - o1)
        if np.linalg.norm(w) < EPSILON:
            theta1 = reference[0]
        else:
            theta1 = math.atan2(np.dot(w, side), np.dot(w, forward))

        ez = n1 - np.dot(n1, n2) * n2
        ez = ez / np.linalg.norm(ez)
        ex = np.cross(n2, ez)

        def flat(v: np.ndarray) -> np.ndarray:
            return np.array([np.dot(v, ez), np.dot(v, ex)])

        def angle(v2: np.ndarray) -> float:
            return math.atan2(v2[1], v2[0])

        u0 = flat(p3 - p2)
        f0 = flat(wc0 - p3)
        upper = float(np.linalg.norm(u0))
        fore = float(np.linalg.norm(f0))

        solutions: dict[int, IKSolution] = {}
        for behind_axis_1, t1 in ((False, theta1), (True, theta1 + math.pi)):
            undo_axis_1 = Rotation.from_axis_and_angle(frames[0].zaxis, -t1, point=frames[0].point)
            w2 = flat(_apply(undo_axis_1, wc) - p2)
            reach = float(np.linalg.norm(w2))
            if reach < EPSILON:
                cos_beta = 1.0
            else:
                cos_beta = (upper**2 + reach**2 - fore**2) / (2.0 * upper * reach)
            reachable = abs(cos_beta) <= 1.0 + REACH_TOLERANCE
            beta = math.acos(min(1.0, max(-1.0, cos_beta)))

            for behind_lower_arm, sign in ((False, -1.0), (True, 1.0)):
                angle_u = angle(w2) + sign * beta
                t2 = angle_u - angle(u0)
                u = upper * np.array([math.cos(angle_u), math.sin(angle_u)])
                t3 = angle(w2 - u) - angle(f0) - t2

                arm = (
                    Rotation.from_axis_and_angle(frames[0].zaxis, t1, point=frames[0].point)
                    * Rotation.from_axis_and_angle(frames[1].zaxis, t2, point=frames[1].point)
                    * Rotation.from_axis_and_angle(frames[2].zaxis, t3, point=frames[2].point)
                )
                wrist = arm.inverted() * to_target
                wrist_options = self._wrist_angles(np.array(wrist.matrix, dtype=float)[:3, :3], reference[3])

                for axis_5_negative, (t4, t5, t6) in zip((False, True), wrist_options):
                    config = axis_configuration(behind_axis_1, behind_lower_arm, axis_5_negative)
                    solutions[config] = self._candidate(
                        config, [t1, t2, t3, t4, t5, t6], reachable
                    )
        return solutions

    def _wrist_angles(self, matrix: np.ndarray, reference_a: float) -> list[tuple[float, float, float]]:
        frames = self.robot.joint_frames
        a4, a5, a6 = (_unit(frames[i].zaxis) for i in (3, 4, 5))
        e1 = a4
        e2 = a5 - np.dot(a5, e1) * e1
        e2 = e2 / np.linalg.norm(e2)
        e3 = np.cross(e1, e2)
        basis = np.column_stack([e1, e2, e3])
        local = basis.T @ matrix @ basis
        sign6 = 1.0 if np.dot(a6, a4) >= 0.0 else -1.0
        return [(a, b, sign6 * c) for a, b, c in _decompose_wrist(local, reference_a)]

    def _candidate(self, config: int, radians: list[float], reachable: bool) -> IKSolution:
        limits = self.robot.joint_limits
        values = [
            fit_angle(math.degrees(r), limit, ref)
            for r, limit, ref in zip(radians, limits, self.reference)
        ]
        in_limits = [limit.contains(v) for v, limit in zip(values, limits)]
        violation = sum(
            max(limit.min - v, v - limit.max, 0.0) for v, limit in zip(values, limits)
        )
        return IKSolution(
            axis_configuration=config,
            robot_joint_position=RobotJointPosition(*values),
            reachable=reachable,
            internal_axis_in_limits=in_limits,
            limit_violation=violation,
        )

    def solution(self, config: int) -> Optional[IKSolution]:
        return self.solutions.get(config)
