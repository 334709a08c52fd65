"""
coherence/validation.py - Invariant Checks

Each validator reads one state type, evaluates the matching golden_constraints
registry entries plus the structural invariants sympy cannot express, and
returns the invariant_violation receipts it emitted. An empty list means the
state is valid.
"""

import math
from typing import Any, Dict, Iterable, List

import golden_constraints
from receipts import StopRule, emit_receipt

from .types_config import DEFAULT_RESONANCE_CONFIG, ResonanceConfig
from .types_state import BridgeState, ChiralState, OscillatorSystem, QueenState, ResonanceState
from .kuramoto import compute_order_parameter

AMPLITUDE_TOLERANCE = 1e-9


def emit_violation_receipt(component: str, violation: Dict[str, Any]) -> dict:
    """Emit invariant_violation receipt."""
    return emit_receipt("invariant_violation", {
        "tenant_id": "engine",
        "component": component,
        "constraint_id": violation["constraint_id"],
        "metric": violation["metric"],
        "value": violation["value"],
        "bound": violation["bound"],
        "classification": "violation",
        "action": "halt",
    })


def _check(component: str, **metrics: float) -> List[Dict[str, Any]]:
    _, violations = golden_constraints.evaluate_all(component, **metrics)
    return violations


def _receipts(component: str, violations: Iterable[Dict[str, Any]]) -> List[dict]:
    return [emit_violation_receipt(component, v) for v in violations]


def validate_oscillator_system(system: OscillatorSystem) -> List[dict]:
    """Order parameter within [0, 1] and every phase normalized."""
    violations = _check("kuramoto", r=compute_order_parameter(system.oscillators).r)
    for osc in system.oscillators:
        violations.extend(
            dict(v, constraint_id=f"{v['constraint_id']}:{osc.id}")
            for v in _check("kuramoto", phase=osc.phase)
        )
    return _receipts("kuramoto", violations)


def validate_chiral_state(state: ChiralState) -> List[dict]:
    violations = _check("chiral", gamma=state.gamma, stability=state.stability, phase=state.phase)
    return _receipts("chiral", violations)


def validate_queen_state(queen: QueenState) -> List[dict]:
    """
    Queen and worker phases normalized, coherence in [0, 1], and the
    coherence history no longer than max_history_length.
    """
    violations = _check("queen", coherence=queen.coherence, phase=queen.phase)
    for worker in queen.workers:
        violations.extend(
            dict(v, constraint_id=f"{v['constraint_id']}:{worker.id}")
            for v in _check("queen", phase=worker.phase)
        )

    if len(queen.coherence_history) > queen.max_history_length:
        violations.append({
            "constraint_id": "history_bounded",
            "metric": "coherence_history",
            "value": float(len(queen.coherence_history)),
            "bound": float(queen.max_history_length),
        })
    return _receipts("queen", violations)


def validate_resonance_state(state: ResonanceState, config: ResonanceConfig = DEFAULT_RESONANCE_CONFIG) -> List[dict]:
    violations = _check("resonance", lambda_=state.lambda_, coherence=state.coherence, phase=state.phase)
    if not config.min_state <= state.x <= config.max_state:
        violations.append({
            "constraint_id": "state_bounded",
            "metric": "x",
            "value": float(state.x),
            "bound": (config.min_state, config.max_state),
        })
    return _receipts("resonance", violations)


def validate_bridge_state(state: BridgeState) -> List[dict]:
    """Amplitude non-negative and consistent with the cartesian components."""
    violations = _check("bridge", amplitude=state.amplitude, phase=state.phase)
    modulus = math.hypot(state.real, state.imag)
    if abs(modulus - state.amplitude) > AMPLITUDE_TOLERANCE * max(1.0, modulus):
        violations.append({
            "constraint_id": "amplitude_consistent",
            "metric": "amplitude",
            "value": float(state.amplitude),
            "bound": modulus,
        })
    return _receipts("bridge", violations)


def require_valid(violations: List[dict]) -> None:
    """
    Raise if any violation receipt is present.

    Raises:
        StopRule: Listing the violated constraint ids
    """
    if violations:
        ids = ", ".join(v["constraint_id"] for v in violations)
        raise StopRule(f"{len(violations)} invariant violation(s): {ids}")
