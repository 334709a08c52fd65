"""
coherence/bridge_operator.py - Rotate / Golden-Scale Operator Algebra

R(theta): z -> z * e^{i*theta}
G:        z -> PHI * z * e^{i*GOLDEN_ANGLE}
Xi = RG - GR, the non-commutative residue ("emergence").

States are points in the complex plane carried as BridgeState; the complex
arithmetic stays internal.
"""

import cmath
import math
from typing import Sequence

from .constants import ALPHA, EMERGENCE_THRESHOLD, GOLDEN_ANGLE, PHI, PHI_INVERSE
from .golden import wrap_angle
from .types_result import BridgeSpectrum
from .types_state import BridgeState


def create_bridge_state(real: float, imag: float) -> BridgeState:
    z = complex(real, imag)
    return BridgeState(real=real, imag=imag, amplitude=abs(z), phase=cmath.phase(z), emergence=0.0)


def create_bridge_state_from_polar(amplitude: float, phase: float) -> BridgeState:
    z = cmath.rect(amplitude, phase)
    return BridgeState(real=z.real, imag=z.imag, amplitude=amplitude, phase=phase, emergence=0.0)


def _as_complex(state: BridgeState) -> complex:
    return complex(state.real, state.imag)


def rotate(state: BridgeState, angle: float) -> BridgeState:
    """R operator: rotate by angle; amplitude and emergence carried over."""
    z = _as_complex(state) * cmath.exp(1j * angle)
    return BridgeState(
        real=z.real,
        imag=z.imag,
        amplitude=state.amplitude,
        phase=wrap_angle(state.phase + angle),
        emergence=state.emergence,
    )


def golden_scale(state: BridgeState) -> BridgeState:
    """G operator: scale by PHI, then rotate by the golden angle."""
    z = (PHI * _as_complex(state)) * cmath.exp(1j * GOLDEN_ANGLE)
    return BridgeState(
        real=z.real,
        imag=z.imag,
        amplitude=PHI * state.amplitude,
        phase=wrap_angle(state.phase + GOLDEN_ANGLE),
        emergence=state.emergence,
    )


def golden_scale_inverse(state: BridgeState) -> BridgeState:
    """G^-1: scale by PHI^-1 and rotate back by the golden angle."""
    z = (PHI_INVERSE * _as_complex(state)) * cmath.exp(-1j * GOLDEN_ANGLE)
    return BridgeState(
        real=z.real,
        imag=z.imag,
        amplitude=PHI_INVERSE * state.amplitude,
        phase=wrap_angle(state.phase - GOLDEN_ANGLE),
        emergence=state.emergence,
    )


def compute_emergence(state: BridgeState, angle: float = GOLDEN_ANGLE) -> BridgeState:
    """
    Xi = RG(state) - GR(state), componentwise.

    RG scales first and rotates second; GR rotates first. The amplitude of
    the returned state is the emergence magnitude.

    Args:
        state: Input state
        angle: Rotation angle for R

    Returns:
        BridgeState of the difference, emergence == amplitude
    """
    rg = rotate(golden_scale(state), angle)
    gr = golden_scale(rotate(state, angle))

    xi = complex(rg.real - gr.real, rg.imag - gr.imag)
    magnitude = abs(xi)
    return BridgeState(
        real=xi.real,
        imag=xi.imag,
        amplitude=magnitude,
        phase=math.atan2(xi.imag, xi.real),
        emergence=magnitude,
    )


def is_emergent(xi: BridgeState, threshold: float = EMERGENCE_THRESHOLD) -> bool:
    return xi.amplitude > threshold


def compute_commutator_magnitude(state: BridgeState, angle: float = GOLDEN_ANGLE) -> float:
    """|[R, G]| evaluated at state."""
    return compute_emergence(state, angle).amplitude


def apply_bridge(state: BridgeState, alpha: float = ALPHA) -> BridgeState:
    """B = (1 + alpha*Xi): perturb by alpha*Xi(state) and renormalize."""
    xi = compute_emergence(state)
    z = _as_complex(state) + alpha * _as_complex(xi)
    return BridgeState(
        real=z.real,
        imag=z.imag,
        amplitude=abs(z),
        phase=math.atan2(z.imag, z.real),
        emergence=xi.amplitude,
    )


def compute_spectrum(states: Sequence[BridgeState]) -> BridgeSpectrum:
    """
    Emergence magnitudes of all states, sorted descending.

    spectral_gap is top - second, or the top value alone for a single state.
    """
    if not states:
        return BridgeSpectrum(mean_emergence=0.0, max_emergence=0.0, spectral_gap=0.0)

    emergences = sorted((compute_emergence(s).amplitude for s in states), reverse=True)
    mean = sum(emergences) / len(emergences)
    gap = emergences[0] - emergences[1] if len(emergences) > 1 else emergences[0]
    return BridgeSpectrum(mean_emergence=mean, max_emergence=emergences[0], spectral_gap=gap)
