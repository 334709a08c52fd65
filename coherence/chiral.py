"""
coherence/chiral.py - Non-Reciprocal (Chiral) Pair Dynamics

J_ab != J_ba: the force one element exerts on the other differs by the
chirality coefficient eta. Winding across the 0/2pi seam is tracked as an
integer topological charge.
"""

import math
from dataclasses import replace
from typing import Tuple

from receipts import StopRule

from .constants import (
    CHARGED_WINDING_FACTOR,
    CHIRAL_DT,
    CHIRAL_ETA,
    GAMMA_FLOOR,
    NEUTRAL_WINDING_FACTOR,
    PHI,
    PHI_INVERSE,
    PROTECTION_THRESHOLD,
)
from .golden import golden_blend, normalize_angle
from .types_state import ChiralState, CouplingMatrix


def compute_chiral_velocity(eta: float, gamma: float) -> float:
    """
    Chiral velocity c = eta / gamma.

    Raises:
        StopRule: If gamma <= 0
    """
    if gamma <= 0:
        raise StopRule(f"Friction coefficient gamma must be positive, got {gamma}")
    return eta / gamma


def create_chiral_state(phase: float = 0.0, eta: float = CHIRAL_ETA, gamma: float = 1.0) -> ChiralState:
    """
    Create a chiral element at rest on its natural chiral velocity.

    Raises:
        StopRule: If gamma <= 0
    """
    velocity = compute_chiral_velocity(eta, gamma)
    return ChiralState(
        phase=normalize_angle(phase),
        eta=eta,
        gamma=max(GAMMA_FLOOR, gamma),
        velocity=velocity,
        topological_charge=0,
        stability=_stability_from_eta(eta),
    )


def compute_winding_number(old_phase: float, new_phase: float, charge: int) -> int:
    """A jump above pi is a -2pi wrap (charge - 1); below -pi is +2pi (charge + 1)."""
    delta = new_phase - old_phase
    if delta > math.pi:
        return charge - 1
    if delta < -math.pi:
        return charge + 1
    return charge


def compute_coupling_matrix(
    state_a: ChiralState,
    state_b: ChiralState,
    eta: float = CHIRAL_ETA,
) -> CouplingMatrix:
    """
    Pair coupling for a -> b.

    base = sin(phase_b - phase_a) * PHI^-1
    forward = base * (1 + eta), backward = base * (1 - eta)
    """
    base = math.sin(state_b.phase - state_a.phase) * PHI_INVERSE
    forward = base * (1 + eta)
    backward = base * (1 - eta)
    return CouplingMatrix(forward=forward, backward=backward, asymmetry=abs(forward - backward))


def apply_non_reciprocity(
    state_a: ChiralState,
    state_b: ChiralState,
    eta: float = CHIRAL_ETA,
    dt: float = CHIRAL_DT,
) -> Tuple[ChiralState, ChiralState]:
    """
    Couple two chiral elements for one Euler step.

    A is driven by backward / gamma_a and B by -forward / gamma_b, so the two
    updates differ whenever eta != 0.

    Args:
        state_a: First element
        state_b: Second element
        eta: Chirality coefficient used for this interaction
        dt: Step size; the 0.016 default assumes a 60 Hz caller

    Returns:
        Tuple (new_a, new_b)
    """
    coupling = compute_coupling_matrix(state_a, state_b, eta)

    force_on_a = coupling.backward / state_a.gamma
    force_on_b = -coupling.forward / state_b.gamma

    new_phase_a = normalize_angle(state_a.phase + force_on_a * dt)
    new_phase_b = normalize_angle(state_b.phase + force_on_b * dt)

    new_a = replace(
        state_a,
        phase=new_phase_a,
        velocity=force_on_a,
        topological_charge=compute_winding_number(state_a.phase, new_phase_a, state_a.topological_charge),
        stability=_stability_from_coupling(coupling.backward, coupling.forward),
    )
    new_b = replace(
        state_b,
        phase=new_phase_b,
        velocity=force_on_b,
        topological_charge=compute_winding_number(state_b.phase, new_phase_b, state_b.topological_charge),
        stability=_stability_from_coupling(coupling.forward, coupling.backward),
    )
    return new_a, new_b


def evolve_chiral_state(state: ChiralState, dt: float = CHIRAL_DT, external_force: float = 0.0) -> ChiralState:
    """Integrate one element under an external force: v += F / gamma, phase += v * dt."""
    velocity = state.velocity + external_force / state.gamma
    new_phase = normalize_angle(state.phase + velocity * dt)
    return replace(
        state,
        phase=new_phase,
        velocity=velocity,
        topological_charge=compute_winding_number(state.phase, new_phase, state.topological_charge),
        stability=_stability_from_eta(state.eta),
    )


def get_topological_protection(state: ChiralState) -> float:
    """
    Protection score in [0, 1].

    Four factors, blended with descending powers of PHI^-1:
      - eta deviation from CHIRAL_ETA (relative), exp(-2 * dev)
      - chiral velocity eta/gamma deviation from 1.0, exp(-dev)
      - gamma deviation from eta (relative), exp(-dev)
      - winding bonus: 1.0 with nonzero charge, else 0.8
    """
    eta_deviation = abs(state.eta - CHIRAL_ETA) / CHIRAL_ETA
    eta_factor = math.exp(-eta_deviation * 2)

    velocity_deviation = abs(compute_chiral_velocity(state.eta, state.gamma) - 1.0)
    velocity_factor = math.exp(-velocity_deviation)

    gamma_deviation = abs(state.gamma - state.eta) / max(state.eta, GAMMA_FLOOR)
    gamma_factor = math.exp(-gamma_deviation)

    charge_factor = CHARGED_WINDING_FACTOR if state.topological_charge != 0 else NEUTRAL_WINDING_FACTOR

    return golden_blend(eta_factor, velocity_factor, gamma_factor, charge_factor)


def is_topologically_protected(state: ChiralState, threshold: float = PROTECTION_THRESHOLD) -> bool:
    return get_topological_protection(state) >= threshold


def _stability_from_eta(eta: float) -> float:
    deviation = abs(eta - CHIRAL_ETA) / CHIRAL_ETA
    return math.exp(-deviation * PHI)


def _stability_from_coupling(coupling_in: float, coupling_out: float) -> float:
    asymmetry = abs(coupling_in - coupling_out)
    return math.exp(-abs(asymmetry - CHIRAL_ETA) * 2)
