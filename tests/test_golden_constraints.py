"""
Tests for golden_constraints module.

Tests cover:
- Registry correctness per component
- Lambdify evaluator functionality
- evaluate_all() skipping missing metrics and reporting violations
- Symbolic and numeric golden-ratio identities
"""

import math

import pytest

import golden_constraints


class TestGetConstraints:
    """get_constraints() public view."""

    def test_resonance_returns_list(self):
        cons = golden_constraints.get_constraints("resonance")
        assert isinstance(cons, list)
        assert len(cons) >= 1

    def test_constraint_has_required_keys(self):
        for component in golden_constraints.list_components():
            for c in golden_constraints.get_constraints(component):
                for key in ("id", "type", "metric", "bound", "description", "sympy_expr"):
                    assert key in c, f"{component}:{c.get('id')} missing {key}"
                # Internal keys should NOT be exposed
                assert "_evaluator" not in c
                assert "_sympy_obj" not in c

    def test_unknown_component_empty(self):
        assert golden_constraints.get_constraints("nonexistent") == []


class TestEvaluators:
    """get_constraint_evaluators() lambdified callables."""

    def _evaluator(self, component, metric):
        for cid, m, fn in golden_constraints.get_constraint_evaluators(component):
            if m == metric:
                return fn
        raise AssertionError(f"No {metric} evaluator for {component}")

    def test_lambda_range(self):
        fn = self._evaluator("resonance", "lambda_")
        # lambdify returns numpy bool, use == not is
        assert fn(0.001) == True
        assert fn(2.0) == True
        assert fn(2.01) == False
        assert fn(0.0) == False

    def test_band_inclusive(self):
        fn = self._evaluator("consciousness", "coherence")
        assert fn(0.4) == True
        assert fn(0.85) == True
        assert fn(0.86) == False

    def test_phase_half_open(self):
        fn = self._evaluator("kuramoto", "phase")
        assert fn(0.0) == True
        assert fn(2 * math.pi) == False

    def test_phase_just_below_two_pi(self):
        fn = self._evaluator("chiral", "phase")
        assert fn(math.nextafter(2 * math.pi, 0.0)) == True
        assert fn(2 * math.pi) == False

    def test_bridge_phase_closed_at_pi(self):
        fn = self._evaluator("bridge", "phase")
        assert fn(math.pi) == True
        assert fn(-math.pi) == True
        assert fn(math.nextafter(math.pi, 4.0)) == False

    def test_angle_bounds_are_exact(self):
        """Bounds are stored as the float pi values, not a rounded literal."""
        bridge = {c["id"]: c for c in golden_constraints.get_constraints("bridge")}
        assert bridge["bridge_phase_principal"]["bound"] == (-math.pi, math.pi)
        kuramoto = {c["id"]: c for c in golden_constraints.get_constraints("kuramoto")}
        assert kuramoto["phase_normalized"]["bound"] == (0.0, 2 * math.pi)

    def test_gamma_positive(self):
        fn = self._evaluator("chiral", "gamma")
        assert fn(0.5) == True
        assert fn(0.0) == False


class TestEvaluateAll:

    def test_all_pass(self):
        passed, violations = golden_constraints.evaluate_all("resonance", lambda_=0.6, coherence=0.5, phase=1.0)
        assert passed
        assert violations == []

    def test_missing_metrics_skipped(self):
        passed, violations = golden_constraints.evaluate_all("resonance")
        assert passed and violations == []

    def test_violation_reported(self):
        passed, violations = golden_constraints.evaluate_all("chiral", gamma=-1.0, stability=0.5)
        assert not passed
        assert len(violations) == 1
        assert violations[0]["constraint_id"] == "gamma_positive"
        assert violations[0]["value"] == -1.0

    def test_nan_is_violation(self):
        passed, _ = golden_constraints.evaluate_all("kuramoto", r=float("nan"))
        assert not passed


class TestGoldenIdentities:

    def test_all_hold(self):
        results = golden_constraints.verify_golden_identities()
        failed = [name for name, ok in results.items() if not ok]
        assert not failed, f"Identities failed: {failed}"

    def test_symbolic_and_numeric_present(self):
        results = golden_constraints.verify_golden_identities()
        assert "phi_squared_symbolic" in results
        assert "phi_squared_numeric" in results
        assert "golden_angle_numeric" in results
