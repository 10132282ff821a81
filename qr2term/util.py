"""Integer helpers shared by the matrix model and the renderer."""

from __future__ import annotations

import math

from .errors import InvariantViolation


def usize_sqrt(num: int) -> int:
    """Take the exact integer square root of a perfect square.

    Args:
        num: Non-negative pixel count.

    Returns:
        The side length ``s`` with ``s * s == num``.

    Raises:
        InvariantViolation: If ``num`` is negative or not a perfect square.
    """
    if num < 0:
        raise InvariantViolation(f"Pixel count must be non-negative, got {num}")
    root = math.isqrt(num)
    if root * root != num:
        raise InvariantViolation(f"Pixel count {num} is not a perfect square")
    return root


def half_up(num: int) -> int:
    """Return ``ceil(num / 2)`` for non-negative integers."""
    return (num + 1) // 2
