"""
Fixed-size joint value vectors.

``RobotJointPosition`` holds the six internal axis values of the robot arm
(degrees, default 0). ``ExternalJointPosition`` holds the six external axis
values; a slot without a connected axis holds the unconnected marker 9E9.

Arithmetic is element-wise and returns new instances. Two defined slots are
combined normally, two unconnected slots stay unconnected and a defined slot
combined with an unconnected one raises ``AxisMismatchError``.
"""

import numbers
import operator
from typing import Any, Callable, Iterable

import numpy as np

from rapidgen.core.exceptions import ActionError, AxisIndexError, AxisMismatchError
from rapidgen.core.formatting import (
    UNCONNECTED,
    format_number,
    format_values,
    is_unconnected,
)


class JointPosition:
    """Base class for six-slot joint value vectors."""

    size = 6
    default_value = 0.0
    label = "Joint Position"
    letters: str | None = None

    def __init__(self, *values: float) -> None:
        if len(values) == 1 and isinstance(values[0], (JointPosition, list, tuple, np.ndarray)):
            values = tuple(values[0])
        if len(values) > self.size:
            raise ActionError(
                f"{self.label} takes at most {self.size} values, got {len(values)}",
                details={"values": list(values)},
            )
        filled = [float(v) for v in values]
        filled.extend([self.default_value] * (self.size - len(filled)))
        self._values = tuple(filled)

    def _index(self, key: int | str) -> int:
        if isinstance(key, str):
            if self.letters is None or len(key) != 1 or key.lower() not in self.letters:
                raise AxisIndexError(f"{self.label}: unknown axis letter '{key}'", index=key)
            return self.letters.index(key.lower())
        if isinstance(key, numbers.Integral) and 0 <= key < self.size:
            return int(key)
        raise AxisIndexError(
            f"{self.label}: axis index {key} is outside 0-{self.size - 1}", index=key
        )

    def __getitem__(self, key: int | str) -> float:
        return self._values[self._index(key)]

    def __len__(self) -> int:
        return self.size

    def __iter__(self):
        return iter(self._values)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._values == other._values

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._values))

    def is_defined(self, key: int | str) -> bool:
        """Check whether a slot holds a value rather than the unconnected marker."""
        return not is_unconnected(self[key])

    def with_value(self, key: int | str, value: float) -> "JointPosition":
        """Copy with one slot replaced."""
        values = list(self._values)
        values[self._index(key)] = float(value)
        return type(self)(*values)

    def to_list(self) -> list[float]:
        return list(self._values)

    def to_array(self) -> np.ndarray:
        return np.array(self._values, dtype=float)

    def to_rapid(self, digits: int = 2) -> str:
        """RAPID array literal, e.g. ``[10, 20, 9E9, 9E9, 9E9, 9E9]``."""
        return f"[{format_values(self._values, digits)}]"

    def _combine(self, other: Any, op: Callable[[float, float], float], symbol: str):
        if isinstance(other, numbers.Real):
            scalar = float(other)
            return type(self)(
                *(v if is_unconnected(v) else op(v, scalar) for v in self._values)
            )
        if type(other) is not type(self):
            return NotImplemented

        mismatched = [
            i
            for i, (a, b) in enumerate(zip(self._values, other._values))
            if is_unconnected(a) != is_unconnected(b)
        ]
        if mismatched:
            raise AxisMismatchError(
                f"{self.label}: cannot apply '{symbol}' to a defined and an "
                f"undefined value at axis {mismatched[0]}",
                index=mismatched[0],
                details={"indices": mismatched},
            )
        return type(self)(
            *(
                UNCONNECTED if is_unconnected(a) else op(a, b)
                for a, b in zip(self._values, other._values)
            )
        )

    def _check_divisor(self, divisor: Any) -> None:
        if isinstance(divisor, numbers.Real):
            if divisor == 0:
                raise ZeroDivisionError(f"{self.label}: division by zero")
        elif isinstance(divisor, JointPosition):
            zeros = [i for i, v in enumerate(divisor._values) if v == 0.0]
            if zeros:
                raise ZeroDivisionError(
                    f"{self.label}: division by zero at axis {zeros[0]}"
                )

    def __add__(self, other):
        return self._combine(other, operator.add, "+")

    def __radd__(self, other):
        return self._combine(other, lambda a, b: b + a, "+")

    def __sub__(self, other):
        return self._combine(other, operator.sub, "-")

    def __rsub__(self, other):
        return self._combine(other, lambda a, b: b - a, "-")

    def __mul__(self, other):
        return self._combine(other, operator.mul, "*")

    def __rmul__(self, other):
        return self._combine(other, lambda a, b: b * a, "*")

    def __truediv__(self, other):
        self._check_divisor(other)
        return self._combine(other, operator.truediv, "/")

    def __rtruediv__(self, other):
        self._check_divisor(self)
        return self._combine(other, lambda a, b: b / a, "/")

    def __neg__(self):
        return self * -1

    def __str__(self) -> str:
        return f"{self.label} ({', '.join(format_number(v) for v in self._values)})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(repr(v) for v in self._values)})"


class RobotJointPosition(JointPosition):
    """The six internal axis values of the robot arm in degrees."""

    default_value = 0.0
    label = "Robot Joint Position"


class ExternalJointPosition(JointPosition):
    """
    The six external axis values (mm for linear axes, degrees for rotational
    axes). Slots are addressed by index 0-5 or by the RAPID letters a-f.

    Example:
        >>> position = ExternalJointPosition(10, 20)
        >>> len(position)
        6
        >>> str(position)
        'External Joint Position (10, 20, 9E9, 9E9, 9E9, 9E9)'
    """

    default_value = UNCONNECTED
    label = "External Joint Position"
    letters = "abcdef"

    @classmethod
    def from_values(cls, values: Iterable[float | None]) -> "ExternalJointPosition":
        """Build from values where None marks an unconnected slot."""
        return cls(*(UNCONNECTED if v is None else v for v in values))
