"""
Custom exceptions for rapidgen.

All rapidgen exceptions inherit from RapidGenError for easy catching.
Limit violations and unreachable targets are not exceptions: they are
collected as messages on the kinematics results and the code generator.
"""

from typing import Any


class RapidGenError(Exception):
    """Base exception for all rapidgen errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(RapidGenError):
    """Raised when configuration is invalid or missing."""

    pass


class RobotError(RapidGenError):
    """Raised when a robot, tool or external axis definition is invalid."""

    pass


class ActionError(RapidGenError):
    """Raised when an action cannot be constructed from the given values."""

    pass


class AxisMismatchError(ActionError):
    """Raised when a defined axis value is combined with an undefined one."""

    def __init__(
        self,
        message: str,
        index: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.index = index


class AxisIndexError(RapidGenError, IndexError):
    """Raised when a joint position is indexed outside its slots."""

    def __init__(
        self,
        message: str,
        index: int | str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.index = index
