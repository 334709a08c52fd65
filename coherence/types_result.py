"""
coherence/types_result.py - Result Containers

Immutable result containers returned by composite engine operations.
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple

from .constants import ChiralStatus, PhiLevel
from .types_state import CoherenceResult, OscillatorSystem, QueenState


@dataclass(frozen=True)
class KuramotoRun:
    """Final system plus the coherence samples taken every 10th step."""
    system: OscillatorSystem
    samples: Tuple[CoherenceResult, ...]
    receipt: dict = field(default_factory=dict)


@dataclass(frozen=True)
class SyncCycleResult:
    queen: QueenState
    coherence: float
    synchronized: bool
    desynced_count: int


@dataclass(frozen=True)
class BridgeSpectrum:
    mean_emergence: float
    max_emergence: float
    spectral_gap: float


@dataclass(frozen=True)
class MetricsSnapshot:
    """Display-facing metrics polled by the surrounding application."""
    phi: float
    phi_level: PhiLevel
    coherence_percent: float
    in_optimal_band: bool
    chiral_status: ChiralStatus
    verification_eligible: bool
    raw: Dict[str, float] = field(default_factory=dict)
