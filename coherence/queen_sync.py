"""
coherence/queen_sync.py - Queen-Worker Hierarchical Synchronization

One reference oscillator (the queen) broadcasts a phase; active workers
align toward it each cycle. Hive coherence reuses the Kuramoto order
parameter over {queen} + active workers.
"""

import logging
import math
import time
from dataclasses import replace
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from receipts import StopRule, emit_receipt

from .constants import (
    COUPLING_MAX,
    COUPLING_MIN,
    DESYNC_PHASE_LIMIT,
    OPTIMAL_COUPLING_BASELINE,
    OVERSHOOT_COUPLING,
    OVERSHOOT_MARGIN,
    PASSIVE_DRIFT_RATE,
    QUEEN_COUPLING,
    TREND_THRESHOLD,
    TREND_WINDOW,
    TWO_PI,
    CoherenceTrend,
    SyncEventType,
)
from .golden import circular_distance, normalize_angle, phase_difference
from .kuramoto import compute_order_parameter, create_oscillator
from .types_config import QueenConfig
from .types_result import SyncCycleResult
from .types_state import QueenState, SyncEvent, WorkerState

logger = logging.getLogger(__name__)


def _clock(now: Optional[float]) -> float:
    return time.time() if now is None else now


# =============================================================================
# CONSTRUCTORS
# =============================================================================

def create_worker(
    worker_id: str,
    natural_frequency: float = 1.0,
    initial_phase: Optional[float] = None,
    coupling: float = 1.0,
    rng: Optional[np.random.Generator] = None,
    now: Optional[float] = None,
) -> WorkerState:
    """Create an active worker; a missing phase is drawn uniformly from rng."""
    if initial_phase is None:
        if rng is None:
            rng = np.random.default_rng()
        initial_phase = rng.random() * TWO_PI
    return WorkerState(
        id=worker_id,
        phase=normalize_angle(float(initial_phase)),
        natural_frequency=natural_frequency,
        last_sync=_clock(now),
        coupling=coupling,
        active=True,
        task_efficiency=1.0,
    )


def create_queen_system(
    workers: Sequence[Union[WorkerState, str]],
    config: QueenConfig = QueenConfig(),
    rng: Optional[np.random.Generator] = None,
    now: Optional[float] = None,
) -> QueenState:
    """
    Create a queen with the given roster.

    Args:
        workers: WorkerState instances or bare ids (ids get random phases)
        config: Queen configuration
        rng: Generator for phases of workers given as ids
        now: Timestamp override

    Returns:
        QueenState with its initial coherence measured

    Raises:
        StopRule: If config.max_history_length is not positive
    """
    if config.max_history_length <= 0:
        raise StopRule(f"max_history_length must be positive, got {config.max_history_length}")

    timestamp = _clock(now)
    roster = tuple(
        create_worker(w, rng=rng, now=timestamp) if isinstance(w, str) else w
        for w in workers
    )
    queen = QueenState(
        phase=normalize_angle(config.initial_phase),
        coherence=0.0,
        workers=roster,
        broadcast_frequency=config.broadcast_frequency,
        coherence_threshold=config.coherence_threshold,
        last_broadcast=timestamp,
        coherence_history=(),
        max_history_length=config.max_history_length,
    )
    return replace(queen, coherence=measure_hive_coherence(queen))


# =============================================================================
# BROADCAST / ALIGN
# =============================================================================

def queen_broadcast(queen: QueenState, phase: float, now: Optional[float] = None) -> Tuple[QueenState, SyncEvent]:
    """Set the queen's reference phase."""
    normalized = normalize_angle(phase)
    timestamp = _clock(now)
    updated = replace(queen, phase=normalized, last_broadcast=timestamp)
    event = SyncEvent(
        timestamp=timestamp,
        type=SyncEventType.BROADCAST,
        phase=normalized,
        coherence=queen.coherence,
        message=f"Queen broadcast phase {normalized:.4f} rad",
    )
    return updated, event


def worker_align(
    worker: WorkerState,
    queen_phase: float,
    coupling: Optional[float] = None,
    now: Optional[float] = None,
) -> WorkerState:
    """
    Move one worker toward the queen.

    phase += coupling_eff * sin(shortest_diff) + natural_frequency * 0.01
    coupling_eff = (coupling or worker.coupling) * task_efficiency

    An inactive worker is returned as-is, last_sync included.
    """
    if not worker.active:
        return worker

    effective = (worker.coupling if coupling is None else coupling) * worker.task_efficiency
    adjustment = effective * math.sin(phase_difference(queen_phase, worker.phase))
    drift = worker.natural_frequency * PASSIVE_DRIFT_RATE

    return replace(
        worker,
        phase=normalize_angle(worker.phase + adjustment + drift),
        last_sync=_clock(now),
    )


def align_all_workers(queen: QueenState, coupling: Optional[float] = None, now: Optional[float] = None) -> QueenState:
    """Align every worker, re-measure coherence and record it in the bounded history."""
    timestamp = _clock(now)
    aligned = tuple(worker_align(w, queen.phase, coupling, now=timestamp) for w in queen.workers)
    updated = replace(queen, workers=aligned)
    coherence = measure_hive_coherence(updated)
    history = queen.coherence_history + (coherence,)
    # [-0:] would keep everything
    history = history[-queen.max_history_length:] if queen.max_history_length > 0 else ()
    return replace(updated, coherence=coherence, coherence_history=history)


# =============================================================================
# MEASUREMENT
# =============================================================================

def measure_hive_coherence(queen: QueenState) -> float:
    """
    Order parameter r over the queen and the active workers.

    A hive with no active workers is trivially coherent (1.0).
    """
    active = queen.active_workers
    if not active:
        return 1.0

    oscillators = [create_oscillator("queen", queen.broadcast_frequency, queen.phase, QUEEN_COUPLING)]
    oscillators.extend(
        create_oscillator(w.id, w.natural_frequency, w.phase, w.coupling) for w in active
    )
    return compute_order_parameter(oscillators).r


def measure_queen_alignment(queen: QueenState) -> float:
    """Mean cos(worker - queen) over active workers, rescaled to [0, 1]."""
    active = queen.active_workers
    if not active:
        return 1.0
    total = sum(math.cos(w.phase - queen.phase) for w in active)
    return (total / len(active) + 1) / 2


def is_hive_synchronized(queen: QueenState, threshold: Optional[float] = None) -> bool:
    return queen.coherence >= (queen.coherence_threshold if threshold is None else threshold)


def get_desynced_workers(queen: QueenState, max_phase_diff: float = DESYNC_PHASE_LIMIT) -> Tuple[WorkerState, ...]:
    """Active workers whose circular distance to the queen exceeds max_phase_diff."""
    return tuple(
        w for w in queen.active_workers
        if circular_distance(w.phase, queen.phase) > max_phase_diff
    )


# =============================================================================
# ROSTER
# =============================================================================

def add_worker(
    queen: QueenState,
    worker: Union[WorkerState, str],
    now: Optional[float] = None,
) -> Tuple[QueenState, SyncEvent]:
    """Join a worker; a bare id joins already in phase with the queen."""
    timestamp = _clock(now)
    joined = create_worker(worker, 1.0, queen.phase, now=timestamp) if isinstance(worker, str) else worker

    updated = replace(queen, workers=queen.workers + (joined,))
    updated = replace(updated, coherence=measure_hive_coherence(updated))

    event = SyncEvent(
        timestamp=timestamp,
        type=SyncEventType.JOIN,
        worker_id=joined.id,
        phase=joined.phase,
        coherence=updated.coherence,
        message=f"Worker {joined.id} joined hive",
    )
    return updated, event


def remove_worker(queen: QueenState, worker_id: str, now: Optional[float] = None) -> Tuple[QueenState, SyncEvent]:
    """
    Remove the first worker with worker_id.

    An unknown id is not an error: the queen comes back unchanged with a
    LEAVE event whose message says the worker was not found.
    """
    timestamp = _clock(now)
    index = next((i for i, w in enumerate(queen.workers) if w.id == worker_id), None)

    if index is None:
        logger.warning(f"Worker {worker_id} not found; roster unchanged")
        return queen, SyncEvent(
            timestamp=timestamp,
            type=SyncEventType.LEAVE,
            worker_id=worker_id,
            phase=0.0,
            coherence=queen.coherence,
            message=f"Worker {worker_id} not found",
        )

    removed = queen.workers[index]
    updated = replace(queen, workers=queen.workers[:index] + queen.workers[index + 1:])
    updated = replace(updated, coherence=measure_hive_coherence(updated))

    return updated, SyncEvent(
        timestamp=timestamp,
        type=SyncEventType.LEAVE,
        worker_id=worker_id,
        phase=removed.phase,
        coherence=updated.coherence,
        message=f"Worker {worker_id} left hive",
    )


# =============================================================================
# TICK
# =============================================================================

def sync_cycle(queen: QueenState, coupling: Optional[float] = None, now: Optional[float] = None) -> SyncCycleResult:
    """One externally driven tick: broadcast, align all workers, re-measure."""
    broadcasted, _ = queen_broadcast(queen, queen.phase, now=now)
    aligned = align_all_workers(broadcasted, coupling, now=now)
    return SyncCycleResult(
        queen=aligned,
        coherence=aligned.coherence,
        synchronized=is_hive_synchronized(aligned),
        desynced_count=len(get_desynced_workers(aligned)),
    )


def calculate_optimal_coupling(queen: QueenState, target_coherence: float = 0.9) -> float:
    """
    Proportional coupling suggestion.

    0.5 baseline, +0.5*error when under target, 0.3 when overshooting by
    more than 0.1; result clamped to [0.1, 1.0].
    """
    error = target_coherence - queen.coherence
    coupling = OPTIMAL_COUPLING_BASELINE
    if error > 0:
        coupling = OPTIMAL_COUPLING_BASELINE + error * 0.5
    if error < -OVERSHOOT_MARGIN:
        coupling = OVERSHOOT_COUPLING
    return max(COUPLING_MIN, min(COUPLING_MAX, coupling))


def get_coherence_trend(queen: QueenState) -> CoherenceTrend:
    """Compare the mean of the last 5 history samples with the (up to) 5 before them."""
    history = queen.coherence_history
    if len(history) < TREND_WINDOW:
        return CoherenceTrend.STABLE

    recent = history[-TREND_WINDOW:]
    older = history[-2 * TREND_WINDOW:-TREND_WINDOW]
    if not older:
        return CoherenceTrend.STABLE

    diff = sum(recent) / len(recent) - sum(older) / len(older)
    if diff > TREND_THRESHOLD:
        return CoherenceTrend.IMPROVING
    if diff < -TREND_THRESHOLD:
        return CoherenceTrend.DEGRADING
    return CoherenceTrend.STABLE


def emit_sync_receipt(event: SyncEvent) -> dict:
    """Emit sync_event receipt."""
    return emit_receipt("sync_event", {
        "tenant_id": "engine",
        "event_type": event.type.value,
        "worker_id": event.worker_id,
        "phase": event.phase,
        "coherence": event.coherence,
        "message": event.message,
        "event_ts": event.timestamp,
    })
