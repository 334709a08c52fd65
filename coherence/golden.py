"""
coherence/golden.py - Angle Arithmetic and Golden Weighting

Shared numerics used by every engine component. The descending-PHI_INVERSE
weighting lives here once so the chiral protection score and the
consciousness score blend cannot drift apart.
"""

import math
from typing import Tuple

from .constants import PHI_INVERSE, TWO_PI

# Weights for golden_blend: PHI^-1, PHI^-2, PHI^-3 and the remainder.
# PHI^-1 + PHI^-2 == 1, so the remainder weight is -PHI^-3.
GOLDEN_WEIGHTS: Tuple[float, float, float, float] = (
    PHI_INVERSE,
    PHI_INVERSE ** 2,
    PHI_INVERSE ** 3,
    1 - PHI_INVERSE - PHI_INVERSE ** 2 - PHI_INVERSE ** 3,
)


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, float(value)))


def normalize_angle(theta: float) -> float:
    """
    Map any finite angle into [0, 2pi).

    Python's float modulo already yields a non-negative result for a positive
    divisor, but tiny negative inputs round up to exactly 2pi.
    """
    normalized = math.fmod(theta, TWO_PI)
    if normalized < 0:
        normalized += TWO_PI
    if normalized >= TWO_PI:
        normalized = 0.0
    return normalized


def wrap_angle(theta: float) -> float:
    """Map an angle into (-pi, pi]."""
    wrapped = math.fmod(theta, TWO_PI)
    if wrapped > math.pi:
        wrapped -= TWO_PI
    elif wrapped <= -math.pi:
        wrapped += TWO_PI
    return wrapped


def phase_difference(target: float, source: float) -> float:
    """
    Shortest signed difference target - source for phases in [0, 2pi).

    Args:
        target: Phase being moved toward
        source: Current phase

    Returns:
        float: Difference in [-pi, pi]
    """
    diff = target - source
    if diff > math.pi:
        diff -= TWO_PI
    if diff < -math.pi:
        diff += TWO_PI
    return diff


def circular_distance(a: float, b: float) -> float:
    """Minimal unsigned distance between two phases, in [0, pi]."""
    diff = abs(a - b)
    if diff > math.pi:
        diff = TWO_PI - diff
    return diff


def golden_blend(primary: float, secondary: float, tertiary: float, remainder: float) -> float:
    """
    Blend four factors with descending powers of PHI_INVERSE.

    score = PHI^-1*primary + PHI^-2*secondary + PHI^-3*tertiary
            + (1 - PHI^-1 - PHI^-2 - PHI^-3)*remainder

    Args:
        primary: Most heavily weighted factor
        secondary: Second factor
        tertiary: Third factor
        remainder: Factor carrying the leftover weight

    Returns:
        float: Blend clamped to [0, 1]
    """
    w1, w2, w3, w4 = GOLDEN_WEIGHTS
    score = w1 * primary + w2 * secondary + w3 * tertiary + w4 * remainder
    return clamp(score, 0.0, 1.0)
