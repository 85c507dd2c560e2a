"""
Named robot targets.
"""

from dataclasses import dataclass, field

from compas.geometry import Frame

from rapidgen.core.exceptions import ActionError
from rapidgen.core.geometry import copy_frame, frame_quaternion
from rapidgen.kinematics.joint_positions import ExternalJointPosition


@dataclass(frozen=True)
class RobotTarget:
    """
    A named destination pose.

    Attributes:
        name: Target name, used for the RAPID robtarget (and, with a ``_jt``
            suffix, for the jointtarget)
        frame: Target pose in work object coordinates
        axis_config: Axis configuration 0-7, or None to select it automatically
        external_joint_position: External axis values; unconnected slots hold 9E9
    """

    name: str
    frame: Frame
    axis_config: int | None = None
    external_joint_position: ExternalJointPosition = field(default_factory=ExternalJointPosition)

    def __post_init__(self) -> None:
        if not self.name or self.name[0].isdigit() or not self.name.replace("_", "a").isalnum():
            raise ActionError(f"Invalid target name: '{self.name}'")
        if self.axis_config is not None and not 0 <= self.axis_config <= 7:
            raise ActionError(
                f"Target '{self.name}': axis configuration must be in 0-7",
                details={"axis_config": self.axis_config},
            )
        object.__setattr__(self, "frame", copy_frame(self.frame))
        if not isinstance(self.external_joint_position, ExternalJointPosition):
            object.__setattr__(
                self,
                "external_joint_position",
                ExternalJointPosition(self.external_joint_position),
            )

    @property
    def rob_target_name(self) -> str:
        return self.name

    @property
    def joint_target_name(self) -> str:
        return f"{self.name}_jt"

    @property
    def quaternion(self) -> tuple[float, float, float, float]:
        return frame_quaternion(self.frame)

    def __str__(self) -> str:
        return f"Target ({self.name})"
