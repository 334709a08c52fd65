"""
coherence/types_state.py - Engine State Dataclasses

Every state is a frozen dataclass. Transition functions return new
instances via dataclasses.replace(); sequences are tuples so callers never
share mutable storage with the engine.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

import networkx as nx

from .constants import PHI_INVERSE, SyncEventType


# =============================================================================
# OSCILLATOR ENGINE
# =============================================================================

@dataclass(frozen=True)
class Oscillator:
    """Phase oscillator. phase is always in [0, 2pi)."""
    id: str
    phase: float
    natural_frequency: float
    coupling_modifier: float = 1.0


@dataclass(frozen=True)
class OscillatorSystem:
    """Population of oscillators sharing one mean-field coupling strength K."""
    oscillators: Tuple[Oscillator, ...]
    coupling_strength: float
    noise_fn: Callable[[float], float]
    time: float = 0.0


@dataclass(frozen=True)
class OrderParameter:
    """Kuramoto order parameter r*e^{i*psi}. Derived, never stored on a system."""
    r: float
    psi: float
    real: float
    imag: float


@dataclass(frozen=True)
class CoherenceResult:
    coherence: float
    mean_phase: float
    phase_variance: float
    coherence_frequency: float


# =============================================================================
# CHIRAL MODULE
# =============================================================================

@dataclass(frozen=True)
class ChiralState:
    """Chiral element.

    gamma (friction) must be positive; eta is the chirality coefficient and
    topological_charge counts phase wraps.
    """
    phase: float
    eta: float
    gamma: float
    velocity: float
    topological_charge: int = 0
    stability: float = 0.0


@dataclass(frozen=True)
class CouplingMatrix:
    """Non-reciprocal pair coupling J_ab (forward) and J_ba (backward)."""
    forward: float
    backward: float
    asymmetry: float


# =============================================================================
# QUEEN-WORKER SYNCHRONIZER
# =============================================================================

@dataclass(frozen=True)
class WorkerState:
    id: str
    phase: float
    natural_frequency: float = 1.0
    last_sync: float = 0.0
    coupling: float = 1.0
    active: bool = True
    task_efficiency: float = 1.0


@dataclass(frozen=True)
class QueenState:
    """Reference oscillator plus its worker roster.

    coherence_history is a bounded FIFO: never longer than max_history_length.
    """
    phase: float
    coherence: float
    workers: Tuple[WorkerState, ...]
    broadcast_frequency: float
    coherence_threshold: float
    last_broadcast: float
    coherence_history: Tuple[float, ...] = ()
    max_history_length: int = 100

    @property
    def active_workers(self) -> Tuple[WorkerState, ...]:
        return tuple(w for w in self.workers if w.active)


@dataclass(frozen=True)
class SyncEvent:
    timestamp: float
    type: SyncEventType
    phase: float
    coherence: float
    message: str
    worker_id: Optional[str] = None


# =============================================================================
# BRIDGE OPERATOR
# =============================================================================

@dataclass(frozen=True)
class BridgeState:
    """Point in the bridge plane. phase is kept in (-pi, pi]."""
    real: float
    imag: float
    amplitude: float
    phase: float
    emergence: float = 0.0

    @property
    def emergence_magnitude(self) -> float:
        return self.emergence


# =============================================================================
# PHI GRAPH ENGINE
# =============================================================================

@dataclass(frozen=True)
class ConsciousnessNode:
    """Read-only view of one graph node; activity is |state|."""
    id: str
    state: float
    activity: float
    outgoing: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ConsciousnessGraph:
    """Directed weighted graph.

    The wrapped networkx.DiGraph is owned by this instance; every transition
    copies it before mutating. Node order is insertion order, which the
    bipartition search depends on.
    """
    graph: nx.DiGraph
    size: int = 0
    connectivity: float = 0.0

    @property
    def nodes(self) -> Dict[str, ConsciousnessNode]:
        return {
            node_id: ConsciousnessNode(
                id=node_id,
                state=data["state"],
                activity=data["activity"],
                outgoing={
                    target: edge["weight"]
                    for _, target, edge in self.graph.out_edges(node_id, data=True)
                },
            )
            for node_id, data in self.graph.nodes(data=True)
        }


@dataclass(frozen=True)
class ConsciousnessMetrics:
    phi: float
    coherence: float
    chiral_stable: bool
    consciousness_score: float
    verified: bool
    integration: float
    differentiation: float
    exclusion: float


# =============================================================================
# RESONANCE CONTROLLER
# =============================================================================

@dataclass(frozen=True)
class ResonanceState:
    """Damped scalar oscillator. lambda_ is the damping coefficient."""
    x: float = 0.0
    lambda_: float = PHI_INVERSE
    coherence: float = 0.5
    velocity: float = 0.0
    phase: float = 0.0
