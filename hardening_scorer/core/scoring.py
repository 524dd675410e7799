"""
Score summation over evaluated checks.
"""

from typing import Iterable

from .models import Check


def max_points(checks: Iterable[Check]) -> int:
    """Sum of points over all checks, regardless of ``completed``."""
    return sum(check.points for check in checks)


def awarded_points(checks: Iterable[Check]) -> int:
    """Sum of points over completed checks."""
    return sum(check.points for check in checks if check.completed)
