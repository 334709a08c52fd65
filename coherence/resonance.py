"""
coherence/resonance.py - Damped Scalar Resonance Controller

dx/dt = f(x) - lambda * x, Euler-integrated, with a coherence signal that
falls when the velocity swings between frames and a proportional loop that
tunes lambda toward a target coherence.
"""

import math
from dataclasses import replace
from typing import Callable, Optional

from .constants import (
    COHERENCE_MAX,
    COHERENCE_MIN,
    LAMBDA_MAX,
    LAMBDA_MIN,
    MAX_VELOCITY_SWING,
    PHI_INVERSE,
    TWO_PI,
)
from .golden import clamp
from .types_config import DEFAULT_RESONANCE_CONFIG, ResonanceConfig
from .types_state import ResonanceState


def clamp_lambda(lambda_: float) -> float:
    return clamp(lambda_, LAMBDA_MIN, LAMBDA_MAX)


def create_resonance_state(initial_x: float = 0.0, lambda_: float = PHI_INVERSE) -> ResonanceState:
    return ResonanceState(
        x=initial_x,
        lambda_=clamp_lambda(lambda_),
        coherence=0.5,
        velocity=0.0,
        phase=0.0,
    )


def is_in_resonant_band(coherence: float) -> bool:
    """Inclusive at both 0.4 and 0.85."""
    return COHERENCE_MIN <= coherence <= COHERENCE_MAX


def _smoothed_coherence(velocity: float, previous_velocity: float, previous_coherence: float) -> float:
    instant = 1 - min(abs(velocity - previous_velocity) / MAX_VELOCITY_SWING, 1)
    blended = PHI_INVERSE * instant + (1 - PHI_INVERSE) * previous_coherence
    return clamp(blended, 0.0, 1.0)


def compute_resonance(
    state: ResonanceState,
    f: Callable[[float], float],
    lambda_: Optional[float] = None,
    config: ResonanceConfig = DEFAULT_RESONANCE_CONFIG,
) -> ResonanceState:
    """
    One Euler step of dx/dt = f(x) - lambda*x.

    Args:
        state: Current state
        f: Driving force f(x)
        lambda_: Damping override (clamped); state.lambda_ when None
        config: Step size and state bounds

    Returns:
        ResonanceState with x clamped to [min_state, max_state], phase
        advanced by |velocity|*dt mod 2pi and smoothed coherence
    """
    effective_lambda = state.lambda_ if lambda_ is None else clamp_lambda(lambda_)

    velocity = f(state.x) - effective_lambda * state.x
    new_x = clamp(state.x + velocity * config.dt, config.min_state, config.max_state)
    new_phase = math.fmod(state.phase + abs(velocity) * config.dt, TWO_PI)

    return ResonanceState(
        x=new_x,
        lambda_=effective_lambda,
        coherence=_smoothed_coherence(velocity, state.velocity, state.coherence),
        velocity=velocity,
        phase=new_phase,
    )


def tune_constraint(state: ResonanceState, target_coherence: float, tuning_rate: float = 0.1) -> ResonanceState:
    """
    Proportional lambda update toward a band-clamped target.

    Coherence above target raises damping, below target lowers it.
    """
    target = clamp(target_coherence, COHERENCE_MIN, COHERENCE_MAX)
    error = state.coherence - target
    return replace(state, lambda_=clamp_lambda(state.lambda_ + error * tuning_rate * PHI_INVERSE))


def compute_quality_factor(state: ResonanceState) -> float:
    """Q = 1 / (2*lambda); math.inf for lambda <= 0."""
    if state.lambda_ <= 0:
        return math.inf
    return 1 / (2 * state.lambda_)


def compute_natural_frequency(state: ResonanceState) -> float:
    """sqrt(1 - (lambda/2)^2), or 0 when over-damped."""
    damping_term = (state.lambda_ / 2) ** 2
    if damping_term >= 1:
        return 0.0
    return math.sqrt(1 - damping_term)
