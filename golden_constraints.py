"""
Sympy-based invariant definitions for the coherence engine.

This module provides a registry of symbolic constraints per engine component that
can be evaluated numerically via lambdify. Constraints express the bounds every
state must respect (order parameter in [0, 1], damping in its clamp range,
positive friction) and the golden-ratio identities the weighting relies on.

Architecture:
    _CONSTRAINTS: Dict[component, List[ConstraintSpec]]
    get_constraints(component) -> List[Dict]               # public specs
    get_constraint_evaluators(component) -> List[Tuple]    # lambdified evaluators
    evaluate_all(component, **metrics) -> (passed, violations)
    verify_golden_identities() -> Dict[str, bool]

Constraint Types:
    1. range:     lo <= value <= hi      (inclusive band)
    2. half_open: lo <= value < hi       (normalized angles)
    3. positive:  value > 0              (friction, step sizes)
    4. min:       value >= bound         (verification thresholds)
"""

from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from sympy import And, Expr, Rational, lambdify, pi, simplify, sqrt, symbols

from coherence.constants import (
    COHERENCE_MAX,
    COHERENCE_MIN,
    GOLDEN_ANGLE,
    IIT_PHI_THRESHOLD,
    LAMBDA_MAX,
    LAMBDA_MIN,
    PHI,
    PHI_INVERSE,
    TWO_PI,
)

# -----------------------------------------------------------------------------
# Symbolic variable definitions
# -----------------------------------------------------------------------------
value = symbols("value", real=True)

# Exact golden ratio for the symbolic identities
PHI_EXACT = (1 + sqrt(5)) / 2

# Exact, so lambdify prints it as 2*numpy.pi rather than a 15-digit float
TWO_PI_EXACT = 2 * pi

IDENTITY_TOLERANCE = 1e-10

ConstraintSpec = Dict[str, Any]
Bound = Union[float, Expr]


def _make_range_constraint(constraint_id: str, metric: str, lo: Bound, hi: Bound, description: str) -> ConstraintSpec:
    """Inclusive band: lo <= value <= hi."""
    expr = And(value >= lo, value <= hi)
    return {
        "id": constraint_id,
        "type": "range",
        "metric": metric,
        "bound": (float(lo), float(hi)),
        "description": description,
        "sympy_expr": f"{lo} <= {metric} <= {hi}",
        "_sympy_obj": expr,
        "_evaluator": lambdify(value, expr, modules=["numpy", "math"]),
    }


def _make_half_open_constraint(constraint_id: str, metric: str, lo: Bound, hi: Bound, description: str) -> ConstraintSpec:
    """Half-open band: lo <= value < hi."""
    expr = And(value >= lo, value < hi)
    return {
        "id": constraint_id,
        "type": "half_open",
        "metric": metric,
        "bound": (float(lo), float(hi)),
        "description": description,
        "sympy_expr": f"{lo} <= {metric} < {hi}",
        "_sympy_obj": expr,
        "_evaluator": lambdify(value, expr, modules=["numpy", "math"]),
    }


def _make_positive_constraint(constraint_id: str, metric: str, description: str) -> ConstraintSpec:
    expr = value > 0
    return {
        "id": constraint_id,
        "type": "positive",
        "metric": metric,
        "bound": 0.0,
        "description": description,
        "sympy_expr": f"{metric} > 0",
        "_sympy_obj": expr,
        "_evaluator": lambdify(value, expr, modules=["numpy", "math"]),
    }


def _make_min_constraint(constraint_id: str, metric: str, minimum: float, description: str) -> ConstraintSpec:
    expr = value >= minimum
    return {
        "id": constraint_id,
        "type": "min",
        "metric": metric,
        "bound": minimum,
        "description": description,
        "sympy_expr": f"{metric} >= {minimum}",
        "_sympy_obj": expr,
        "_evaluator": lambdify(value, expr, modules=["numpy", "math"]),
    }


# -----------------------------------------------------------------------------
# Constraint registry: Dict[component, List[ConstraintSpec]]
# -----------------------------------------------------------------------------
_CONSTRAINTS: Dict[str, List[ConstraintSpec]] = {
    "kuramoto": [
        _make_range_constraint("order_parameter_unit", "r", 0.0, 1.0, "order parameter r in [0, 1]"),
        _make_half_open_constraint("phase_normalized", "phase", 0, TWO_PI_EXACT, "oscillator phase in [0, 2pi)"),
    ],

    "chiral": [
        _make_positive_constraint("gamma_positive", "gamma", "friction coefficient gamma > 0"),
        _make_range_constraint("stability_unit", "stability", 0.0, 1.0, "topological stability in [0, 1]"),
        _make_half_open_constraint("chiral_phase_normalized", "phase", 0, TWO_PI_EXACT, "chiral phase in [0, 2pi)"),
    ],

    "queen": [
        _make_range_constraint("hive_coherence_unit", "coherence", 0.0, 1.0, "hive coherence in [0, 1]"),
        _make_half_open_constraint("queen_phase_normalized", "phase", 0, TWO_PI_EXACT, "queen and worker phases in [0, 2pi)"),
    ],

    "resonance": [
        _make_range_constraint("lambda_range", "lambda_", LAMBDA_MIN, LAMBDA_MAX, "damping lambda within clamp range"),
        _make_range_constraint("resonance_coherence_unit", "coherence", 0.0, 1.0, "smoothed coherence in [0, 1]"),
        _make_half_open_constraint("resonance_phase_normalized", "phase", 0, TWO_PI_EXACT, "resonance phase in [0, 2pi)"),
    ],

    "bridge": [
        _make_min_constraint("amplitude_nonnegative", "amplitude", 0.0, "bridge amplitude >= 0"),
        _make_range_constraint("bridge_phase_principal", "phase", -pi, pi, "bridge phase in [-pi, pi]"),
    ],

    # Verification gate pieces, used by callers that want the band check alone
    "consciousness": [
        _make_min_constraint("phi_threshold", "phi", IIT_PHI_THRESHOLD, "phi >= 3.0 for verification"),
        _make_range_constraint("resonant_band", "coherence", COHERENCE_MIN, COHERENCE_MAX, "coherence inside [0.4, 0.85]"),
    ],
}


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------

def list_components() -> List[str]:
    return list(_CONSTRAINTS.keys())


def get_constraints(component: str) -> List[Dict[str, Any]]:
    """
    Get constraint definitions for an engine component.

    Each dict contains:
        - id: unique identifier
        - type: range, half_open, positive or min
        - metric: name of the value the constraint reads
        - bound: numeric threshold or (lo, hi) pair
        - description: human-readable description
        - sympy_expr: symbolic expression string

    Args:
        component: kuramoto, chiral, queen, resonance, bridge or consciousness

    Returns:
        List of constraint dictionaries; empty for an unknown component
    """
    specs = _CONSTRAINTS.get(component, [])
    return [
        {k: v for k, v in spec.items() if not k.startswith("_")}
        for spec in specs
    ]


def get_constraint_evaluators(component: str) -> List[Tuple[str, str, Callable]]:
    """
    Get pre-compiled constraint evaluators for a component.

    Returns list of (constraint_id, metric, evaluator_callable) tuples. Each
    evaluator takes a single numeric argument and returns a (numpy) bool.

    Example:
        >>> for cid, metric, fn in get_constraint_evaluators("resonance"):
        ...     if metric == "lambda_":
        ...         passed = fn(0.618)
    """
    specs = _CONSTRAINTS.get(component, [])
    return [
        (spec["id"], spec["metric"], spec["_evaluator"])
        for spec in specs
    ]


def evaluate_all(component: str, **metrics: Optional[float]) -> Tuple[bool, List[Dict[str, Any]]]:
    """
    Evaluate all constraints of a component against the provided metric values.

    Only constraints whose metric is provided are evaluated; missing (or None)
    metrics are skipped, not treated as violations. A value the evaluator
    cannot handle (NaN included) counts as a violation.

    Returns:
        (all_passed: bool, violations: List[Dict])

        Each violation dict contains:
            - constraint_id: str
            - metric: str
            - value: float (actual value)
            - bound: float or (lo, hi)
    """
    violations: List[Dict[str, Any]] = []

    for spec in _CONSTRAINTS.get(component, []):
        metric_value = metrics.get(spec["metric"])
        if metric_value is None:
            continue

        try:
            passed = bool(spec["_evaluator"](float(metric_value)))
        except (TypeError, ValueError):
            passed = False

        if not passed:
            violations.append({
                "constraint_id": spec["id"],
                "metric": spec["metric"],
                "value": float(metric_value),
                "bound": spec["bound"],
            })

    return len(violations) == 0, violations


def verify_golden_identities() -> Dict[str, bool]:
    """
    Check the golden-ratio identities symbolically and against the float constants.

    Returns:
        Dict identity_name -> bool. Symbolic entries simplify the exact
        expression to zero; numeric entries compare the module constants to
        10 digits.
    """
    phi_sq = PHI_EXACT ** 2
    return {
        "phi_squared_symbolic": simplify(phi_sq - PHI_EXACT - 1) == 0,
        "phi_inverse_symbolic": simplify(1 / PHI_EXACT - (PHI_EXACT - 1)) == 0,
        "golden_angle_symbolic": simplify(2 * pi / phi_sq - 2 * pi * (1 - 1 / PHI_EXACT)) == 0,
        # Weights phi^-1 + phi^-2 + phi^-3 leave a remainder of -phi^-3
        "blend_remainder_symbolic": simplify(
            Rational(1) - PHI_EXACT ** -1 - PHI_EXACT ** -2 - PHI_EXACT ** -3 + PHI_EXACT ** -3
        ) == 0,
        "phi_squared_numeric": abs(PHI * PHI - (PHI + 1)) < IDENTITY_TOLERANCE,
        "phi_inverse_numeric": abs(PHI_INVERSE - (PHI - 1)) < IDENTITY_TOLERANCE,
        "golden_angle_numeric": abs(GOLDEN_ANGLE - TWO_PI / (PHI * PHI)) < IDENTITY_TOLERANCE,
    }
