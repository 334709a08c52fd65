"""
tests/test_resonance.py - Tests for coherence/resonance.py
"""

import math
from dataclasses import replace

import pytest

from coherence.constants import LAMBDA_MAX, LAMBDA_MIN, PHI_INVERSE, TWO_PI
from coherence.resonance import (
    clamp_lambda,
    compute_natural_frequency,
    compute_quality_factor,
    compute_resonance,
    create_resonance_state,
    is_in_resonant_band,
    tune_constraint,
)
from coherence.types_config import ResonanceConfig


class TestCreate:

    def test_defaults(self):
        """x=0, lambda=PHI^-1, coherence=0.5."""
        state = create_resonance_state()
        assert state.x == 0.0
        assert state.lambda_ == pytest.approx(0.6180339887498949)
        assert state.coherence == 0.5

    def test_lambda_clamped(self):
        assert create_resonance_state(lambda_=100).lambda_ == LAMBDA_MAX
        assert create_resonance_state(lambda_=-1).lambda_ == LAMBDA_MIN
        assert clamp_lambda(1.0) == 1.0


class TestBand:

    def test_inclusive_edges(self):
        assert is_in_resonant_band(0.4)
        assert is_in_resonant_band(0.85)

    def test_outside(self):
        assert not is_in_resonant_band(0.3999)
        assert not is_in_resonant_band(0.8501)


class TestComputeResonance:

    def test_at_rest(self):
        """f(0)=0 at x=0: no motion, instant coherence 1 blended with 0.5."""
        state = compute_resonance(create_resonance_state(), lambda x: 0.0)
        assert state.x == 0.0
        assert state.velocity == 0.0
        assert state.coherence == pytest.approx(PHI_INVERSE + (1 - PHI_INVERSE) * 0.5)

    def test_euler_step(self):
        config = ResonanceConfig(dt=0.1)
        state = create_resonance_state(initial_x=1.0, lambda_=0.5)
        stepped = compute_resonance(state, lambda x: 2.0, config=config)
        assert stepped.velocity == pytest.approx(1.5)
        assert stepped.x == pytest.approx(1.15)
        assert stepped.phase == pytest.approx(0.15)

    def test_state_clamped(self):
        stepped = compute_resonance(create_resonance_state(), lambda x: 1e6)
        assert stepped.x == 10.0

    def test_lambda_override_clamped(self):
        stepped = compute_resonance(create_resonance_state(), lambda x: 0.0, lambda_=50.0)
        assert stepped.lambda_ == LAMBDA_MAX

    def test_large_swing_drops_coherence(self):
        """Velocity swing above 2.0 zeroes instant coherence."""
        stepped = compute_resonance(create_resonance_state(), lambda x: 5.0)
        assert stepped.coherence == pytest.approx((1 - PHI_INVERSE) * 0.5)

    def test_invariants_over_many_steps(self):
        state = create_resonance_state(initial_x=3.0)
        for _ in range(500):
            state = compute_resonance(state, lambda x: math.sin(x) * 3)
            assert 0.0 <= state.coherence <= 1.0
            assert 0.0 <= state.phase < TWO_PI
            assert LAMBDA_MIN <= state.lambda_ <= LAMBDA_MAX
            assert -10.0 <= state.x <= 10.0


class TestTuning:

    def test_high_coherence_raises_damping(self):
        state = replace(create_resonance_state(), coherence=0.8)
        tuned = tune_constraint(state, 0.6)
        assert tuned.lambda_ == pytest.approx(PHI_INVERSE + 0.2 * 0.1 * PHI_INVERSE)

    def test_low_coherence_lowers_damping(self):
        state = replace(create_resonance_state(), coherence=0.3)
        assert tune_constraint(state, 0.6).lambda_ < state.lambda_

    def test_target_clamped_to_band(self):
        """A target of 0.1 is treated as 0.4."""
        state = replace(create_resonance_state(), coherence=0.4)
        assert tune_constraint(state, 0.1).lambda_ == pytest.approx(state.lambda_)


class TestDerived:

    def test_quality_factor(self):
        assert compute_quality_factor(create_resonance_state(lambda_=0.5)) == pytest.approx(1.0)

    def test_quality_factor_infinite(self):
        assert compute_quality_factor(replace(create_resonance_state(), lambda_=0.0)) == math.inf

    def test_natural_frequency(self):
        assert compute_natural_frequency(create_resonance_state(lambda_=1.0)) == pytest.approx(math.sqrt(0.75))

    def test_overdamped(self):
        assert compute_natural_frequency(create_resonance_state(lambda_=2.0)) == 0.0
