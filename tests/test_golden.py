"""
tests/test_golden.py - Tests for coherence/golden.py and the golden constants

Every test has assert statements.
"""

import math

import pytest

from coherence.constants import GOLDEN_ANGLE, PHI, PHI_INVERSE, TWO_PI
from coherence.golden import (
    GOLDEN_WEIGHTS,
    circular_distance,
    clamp,
    golden_blend,
    normalize_angle,
    phase_difference,
    wrap_angle,
)


class TestGoldenConstants:
    """PHI identities hold to 10 digits."""

    def test_phi_squared(self):
        """PHI * PHI == PHI + 1."""
        assert abs(PHI * PHI - (PHI + 1)) < 1e-10, f"PHI^2={PHI * PHI}, PHI+1={PHI + 1}"

    def test_phi_inverse(self):
        """PHI^-1 == PHI - 1."""
        assert abs(PHI_INVERSE - (PHI - 1)) < 1e-10
        assert abs(PHI * PHI_INVERSE - 1) < 1e-10

    def test_golden_angle(self):
        """Golden angle is 2pi / PHI^2, about 137.5 degrees."""
        assert abs(math.degrees(GOLDEN_ANGLE) - 137.5077640500378) < 1e-9


class TestNormalizeAngle:
    """normalize_angle maps into [0, 2pi)."""

    @pytest.mark.parametrize("theta", [
        0.0, 1.0, -1.0, TWO_PI, -TWO_PI, 7 * math.pi / 2, -100.25, 1e6, -1e-17,
    ])
    def test_in_range(self, theta):
        """Result always lies in [0, 2pi)."""
        result = normalize_angle(theta)
        assert 0.0 <= result < TWO_PI, f"normalize_angle({theta}) = {result}"

    def test_wraps_multiple_turns(self):
        """7pi/2 normalizes to 3pi/2."""
        assert normalize_angle(7 * math.pi / 2) == pytest.approx(3 * math.pi / 2)

    def test_negative(self):
        """-pi/2 normalizes to 3pi/2."""
        assert normalize_angle(-math.pi / 2) == pytest.approx(3 * math.pi / 2)

    def test_tiny_negative_does_not_hit_two_pi(self):
        """-1e-17 + 2pi rounds to 2pi in floats; result must wrap to 0."""
        assert normalize_angle(-1e-17) < TWO_PI


class TestWrapAngle:
    """wrap_angle maps into (-pi, pi]."""

    def test_pi_stays(self):
        assert wrap_angle(math.pi) == pytest.approx(math.pi)

    def test_minus_pi_maps_to_pi(self):
        """-pi is excluded from the range."""
        assert wrap_angle(-math.pi) == pytest.approx(math.pi)

    def test_three_halves_pi(self):
        assert wrap_angle(3 * math.pi / 2) == pytest.approx(-math.pi / 2)


class TestPhaseDifference:
    """Shortest signed difference and circular distance."""

    def test_across_seam(self):
        """0.1 vs 2pi-0.1 is 0.2 apart, not 2pi-0.2."""
        diff = phase_difference(0.1, TWO_PI - 0.1)
        assert diff == pytest.approx(0.2), f"Expected +0.2, got {diff}"

    def test_sign(self):
        """Moving from 1.0 to 0.5 is negative."""
        assert phase_difference(0.5, 1.0) == pytest.approx(-0.5)

    def test_circular_distance_symmetric(self):
        assert circular_distance(0.1, TWO_PI - 0.1) == pytest.approx(0.2)
        assert circular_distance(TWO_PI - 0.1, 0.1) == pytest.approx(0.2)

    def test_circular_distance_max_pi(self):
        assert circular_distance(0.0, math.pi) == pytest.approx(math.pi)


class TestGoldenBlend:
    """Descending PHI^-1 weighting."""

    def test_weights_sum_to_one(self):
        assert sum(GOLDEN_WEIGHTS) == pytest.approx(1.0)

    def test_remainder_weight_is_negative_phi_cubed(self):
        """PHI^-1 + PHI^-2 == 1 leaves -PHI^-3 for the remainder."""
        assert GOLDEN_WEIGHTS[3] == pytest.approx(-PHI_INVERSE ** 3)

    def test_all_ones(self):
        assert golden_blend(1.0, 1.0, 1.0, 1.0) == pytest.approx(1.0)

    def test_clamped_to_unit(self):
        """A lone remainder factor blends negative and clamps to 0."""
        assert golden_blend(0.0, 0.0, 0.0, 1.0) == 0.0
        assert golden_blend(2.0, 2.0, 2.0, 0.0) == 1.0

    def test_clamp(self):
        assert clamp(5, 0, 1) == 1.0
        assert clamp(-5, 0, 1) == 0.0
        assert clamp(0.3, 0, 1) == 0.3
