"""
Number rendering for generated RAPID code.
"""

import math

UNCONNECTED = 9e9
"""Value of an external axis slot that has no axis connected."""

UNCONNECTED_TOKEN = "9E9"


def is_unconnected(value: float) -> bool:
    """Check whether a value is the unconnected-axis marker."""
    return math.isclose(value, UNCONNECTED, rel_tol=1e-12)


def format_number(value: float, digits: int = 2) -> str:
    """
    Render a number with at most ``digits`` decimals.

    Trailing zeros and a trailing decimal point are removed, negative zero is
    written as ``0`` and the unconnected marker is written as ``9E9``.

    Example:
        >>> format_number(2.5)
        '2.5'
        >>> format_number(0.7071067811, 6)
        '0.707107'
        >>> format_number(9e9)
        '9E9'
    """
    if is_unconnected(value):
        return UNCONNECTED_TOKEN
    text = f"{value:.{digits}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


def format_values(values, digits: int = 2) -> str:
    """Render a sequence as a comma separated RAPID array body."""
    return ", ".join(format_number(v, digits) for v in values)
