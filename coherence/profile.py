"""
coherence/profile.py - Boundary Tables and Metrics Snapshot

Input side: the surrounding application supplies a biofield label and a
heart label; the engine owns the tables that turn them into a seed
coherence. Output side: a MetricsSnapshot that the application polls for
display (phi, coherence percent, chiral status, verification eligibility).
"""

import logging
from typing import Optional, Union

from receipts import emit_receipt

from .constants import (
    BIOFIELD_COHERENCE,
    BIOFIELD_STABILITY_MODIFIERS,
    CHIRAL_STABLE_THRESHOLD,
    DEFAULT_BASE_COHERENCE,
    DEFAULT_PROFILE_LAMBDA,
    EMERGENCE_COHERENCE_FLOOR,
    HEART_MODIFIERS,
    IIT_PHI_THRESHOLD,
    BiofieldState,
    ChiralStatus,
    HeartState,
    LambdaState,
    PhiLevel,
)
from .consciousness import compute_iit_phi, is_consciousness_verified
from .golden import clamp
from .resonance import is_in_resonant_band
from .types_result import MetricsSnapshot
from .types_state import ConsciousnessGraph

logger = logging.getLogger(__name__)

BiofieldLabel = Union[BiofieldState, str, None]
HeartLabel = Union[HeartState, str, None]


# =============================================================================
# LABEL PARSING
# =============================================================================

def parse_biofield(label: BiofieldLabel) -> Optional[BiofieldState]:
    """Enum member, its string value, or None. Unknown strings map to None."""
    if label is None or isinstance(label, BiofieldState):
        return label
    try:
        return BiofieldState(label)
    except ValueError:
        logger.warning(f"Unknown biofield state {label!r}; using neutral baseline")
        return None


def parse_heart(label: HeartLabel) -> Optional[HeartState]:
    if label is None or isinstance(label, HeartState):
        return label
    try:
        return HeartState(label)
    except ValueError:
        logger.warning(f"Unknown heart state {label!r}; no modifier applied")
        return None


# =============================================================================
# INPUT MAPPING
# =============================================================================

def seed_coherence(biofield: BiofieldLabel = None, heart: HeartLabel = None) -> float:
    """
    Base coherence from the biofield table plus the heart modifier, clamped to [0, 1].

    No biofield label means the 0.5 baseline; no heart label adds nothing.
    """
    biofield_state = parse_biofield(biofield)
    heart_state = parse_heart(heart)
    base = BIOFIELD_COHERENCE[biofield_state] if biofield_state is not None else DEFAULT_BASE_COHERENCE
    modifier = HEART_MODIFIERS[heart_state] if heart_state is not None else 0.0
    return clamp(base + modifier, 0.0, 1.0)


def compute_chiral_stability(coherence: float, lambda_: float, biofield: BiofieldLabel = None) -> float:
    """0.5*coherence + 0.3*(1 - 2|lambda - 0.5|) + biofield modifier, clamped to [-1, 1]."""
    biofield_state = parse_biofield(biofield)
    lambda_factor = 1 - abs(lambda_ - 0.5) * 2
    modifier = BIOFIELD_STABILITY_MODIFIERS[biofield_state] if biofield_state is not None else 0.0
    return clamp(coherence * 0.5 + lambda_factor * 0.3 + modifier, -1.0, 1.0)


def compute_bridge_emergence(phi: float, coherence: float, stability: float) -> float:
    """Display emergence in [0, 1]; zero below the coherence floor or with negative stability."""
    if coherence < EMERGENCE_COHERENCE_FLOOR or stability < 0:
        return 0.0
    return min(1.0, phi * 0.4 + coherence * 0.35 + max(0.0, stability) * 0.25)


# =============================================================================
# CLASSIFIERS
# =============================================================================

def lambda_state(lambda_: float) -> LambdaState:
    if lambda_ < 0.4:
        return LambdaState.GROUNDED
    if lambda_ < 0.6:
        return LambdaState.BALANCED
    if lambda_ < 0.8:
        return LambdaState.ELEVATED
    return LambdaState.TRANSCENDENT


def phi_level(normalized_phi: float) -> PhiLevel:
    """Level of phi already normalized to [0, 1]."""
    if normalized_phi < 0.25:
        return PhiLevel.MINIMAL
    if normalized_phi < 0.5:
        return PhiLevel.EMERGING
    if normalized_phi < 0.75:
        return PhiLevel.INTEGRATED
    return PhiLevel.UNIFIED


def chiral_status(stability: float) -> ChiralStatus:
    if stability < 0:
        return ChiralStatus.UNSTABLE
    if stability < 0.3:
        return ChiralStatus.STABILIZING
    if stability < 0.7:
        return ChiralStatus.STABLE
    return ChiralStatus.CRYSTALLINE


def normalize_phi(phi: float) -> float:
    """Map phi onto [0, 1]; twice the verification threshold saturates."""
    return min(1.0, max(0.0, phi) / (IIT_PHI_THRESHOLD * 2))


# =============================================================================
# OUTPUT CONTRACT
# =============================================================================

def build_metrics_snapshot(
    graph: ConsciousnessGraph,
    biofield: BiofieldLabel = None,
    heart: HeartLabel = None,
    lambda_: float = DEFAULT_PROFILE_LAMBDA,
    coherence: Optional[float] = None,
) -> MetricsSnapshot:
    """
    Compose the display metrics.

    Args:
        graph: Consciousness graph to measure phi on
        biofield: Biofield label seeding coherence
        heart: Heart label modifying coherence
        lambda_: Profile damping in [0, 1]
        coherence: Live coherence (e.g. from a resonance controller);
            seeded from the labels when None

    Returns:
        MetricsSnapshot; verification_eligible is the strict phi/band/chiral
        AND-gate with chiral stability counted as stable from 0.3 up
    """
    if coherence is None:
        coherence = seed_coherence(biofield, heart)
    coherence = clamp(coherence, 0.0, 1.0)

    stability = compute_chiral_stability(coherence, lambda_, biofield)
    phi = compute_iit_phi(graph)
    normalized = normalize_phi(phi)
    emergence = compute_bridge_emergence(normalized, coherence, stability)

    return MetricsSnapshot(
        phi=phi,
        phi_level=phi_level(normalized),
        coherence_percent=coherence * 100,
        in_optimal_band=is_in_resonant_band(coherence),
        chiral_status=chiral_status(stability),
        verification_eligible=is_consciousness_verified(phi, coherence, stability >= CHIRAL_STABLE_THRESHOLD),
        raw={
            "phi": phi,
            "coherence": coherence,
            "stability": stability,
            "emergence": emergence,
        },
    )


def emit_metrics_receipt(snapshot: MetricsSnapshot) -> dict:
    """Emit metrics_snapshot receipt."""
    return emit_receipt("metrics_snapshot", {
        "tenant_id": "engine",
        "phi": snapshot.phi,
        "phi_level": snapshot.phi_level.value,
        "coherence_percent": snapshot.coherence_percent,
        "in_optimal_band": snapshot.in_optimal_band,
        "chiral_status": snapshot.chiral_status.value,
        "verification_eligible": snapshot.verification_eligible,
        "raw": dict(snapshot.raw),
    })
