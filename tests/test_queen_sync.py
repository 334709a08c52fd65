"""
tests/test_queen_sync.py - Tests for coherence/queen_sync.py

Validates:
- Tight hive stays coherent through sync cycles
- Roster join/leave semantics, unknown ids included
- Bounded coherence history and trend detection
- Coupling suggestion and sync receipts
"""

import math
from dataclasses import replace

import numpy as np
import pytest

from receipts import StopRule
from coherence.constants import CoherenceTrend, SyncEventType, TWO_PI
from coherence.queen_sync import (
    add_worker,
    align_all_workers,
    calculate_optimal_coupling,
    create_queen_system,
    create_worker,
    emit_sync_receipt,
    get_coherence_trend,
    get_desynced_workers,
    is_hive_synchronized,
    measure_hive_coherence,
    measure_queen_alignment,
    queen_broadcast,
    remove_worker,
    sync_cycle,
    worker_align,
)
from coherence.types_config import QueenConfig
from coherence.types_state import WorkerState

NOW = 1_700_000_000.0


def _tight_hive(config=QueenConfig(initial_phase=0.025)):
    """3 equal-frequency workers within 0.05 rad of each other."""
    workers = [
        WorkerState(id=f"w{i}", phase=phase, natural_frequency=1.0)
        for i, phase in enumerate((0.0, 0.02, 0.05))
    ]
    return create_queen_system(workers, config, now=NOW)


class TestCreateQueen:

    def test_tight_hive_coherent(self):
        """Workers within 0.05 rad give hive coherence > 0.9."""
        queen = _tight_hive()
        assert queen.coherence > 0.9, f"Expected > 0.9, got {queen.coherence}"
        assert is_hive_synchronized(queen)

    def test_ids_get_seeded_phases(self):
        a = create_queen_system(["a", "b"], rng=np.random.default_rng(3), now=NOW)
        b = create_queen_system(["a", "b"], rng=np.random.default_rng(3), now=NOW)
        assert [w.phase for w in a.workers] == [w.phase for w in b.workers]
        for w in a.workers:
            assert 0.0 <= w.phase < TWO_PI

    def test_nonpositive_history_raises(self):
        with pytest.raises(StopRule):
            create_queen_system([], QueenConfig(max_history_length=0))

    def test_empty_hive_trivially_coherent(self):
        queen = create_queen_system([], now=NOW)
        assert measure_hive_coherence(queen) == 1.0

    def test_create_worker_timestamp(self):
        worker = create_worker("w", initial_phase=1.0, now=NOW)
        assert worker.last_sync == NOW
        assert worker.active


class TestBroadcastAlign:

    def test_broadcast_normalizes(self):
        queen = _tight_hive()
        updated, event = queen_broadcast(queen, TWO_PI + 1.0, now=NOW + 1)
        assert updated.phase == pytest.approx(1.0)
        assert updated.last_broadcast == NOW + 1
        assert event.type == SyncEventType.BROADCAST
        assert queen.phase == pytest.approx(0.025), "Input queen must not change"

    def test_worker_moves_toward_queen(self):
        worker = WorkerState(id="w", phase=0.5, natural_frequency=0.0)
        aligned = worker_align(worker, queen_phase=0.0, coupling=0.5, now=NOW)
        assert aligned.phase < 0.5
        assert aligned.phase == pytest.approx(0.5 - 0.5 * math.sin(0.5))

    def test_inactive_worker_unchanged(self):
        worker = WorkerState(id="w", phase=0.5, active=False, last_sync=1.0)
        assert worker_align(worker, 0.0, now=NOW) is worker

    def test_task_efficiency_scales_coupling(self):
        worker = WorkerState(id="w", phase=0.5, natural_frequency=0.0, task_efficiency=0.0)
        assert worker_align(worker, 0.0, now=NOW).phase == pytest.approx(0.5)

    def test_sync_cycles_keep_hive_coherent(self):
        queen = _tight_hive()
        for i in range(20):
            result = sync_cycle(queen, now=NOW + i)
            queen = result.queen
        assert result.coherence > 0.9
        assert result.synchronized
        assert result.desynced_count == 0

    def test_alignment_measure(self):
        assert measure_queen_alignment(_tight_hive()) > 0.99


class TestRoster:

    def test_remove_unknown_worker(self):
        """Unknown id: count and coherence unchanged, message says not found."""
        queen = _tight_hive()
        updated, event = remove_worker(queen, "ghost", now=NOW)
        assert len(updated.workers) == len(queen.workers)
        assert updated.coherence == queen.coherence
        assert "not found" in event.message
        assert event.type == SyncEventType.LEAVE

    def test_remove_known_worker(self):
        queen = _tight_hive()
        updated, event = remove_worker(queen, "w1", now=NOW)
        assert [w.id for w in updated.workers] == ["w0", "w2"]
        assert event.worker_id == "w1"
        assert "left" in event.message

    def test_add_worker_by_id_joins_in_phase(self):
        queen = _tight_hive()
        updated, event = add_worker(queen, "w9", now=NOW)
        assert len(updated.workers) == 4
        assert updated.workers[-1].phase == pytest.approx(queen.phase)
        assert event.type == SyncEventType.JOIN

    def test_desynced_workers(self):
        queen = _tight_hive()
        queen, _ = add_worker(queen, WorkerState(id="far", phase=math.pi), now=NOW)
        desynced = get_desynced_workers(queen)
        assert [w.id for w in desynced] == ["far"]

    def test_inactive_workers_excluded(self):
        queen = _tight_hive()
        queen, _ = add_worker(queen, WorkerState(id="off", phase=math.pi, active=False), now=NOW)
        assert get_desynced_workers(queen) == ()
        assert queen.coherence > 0.9


class TestHistory:

    def test_history_bounded(self):
        """History keeps only the newest max_history_length samples."""
        queen = _tight_hive(QueenConfig(initial_phase=0.025, max_history_length=3))
        for i in range(5):
            queen = align_all_workers(queen, now=NOW + i)
        assert len(queen.coherence_history) == 3

    def test_zero_history_length_keeps_nothing(self):
        """A zero limit set after construction must not let history grow."""
        queen = replace(_tight_hive(), max_history_length=0)
        for i in range(3):
            queen = align_all_workers(queen, now=NOW + i)
        assert queen.coherence_history == ()

    def test_trend_improving(self):
        queen = replace(_tight_hive(), coherence_history=(0.1,) * 5 + (0.9,) * 5)
        assert get_coherence_trend(queen) == CoherenceTrend.IMPROVING

    def test_trend_degrading(self):
        queen = replace(_tight_hive(), coherence_history=(0.9,) * 5 + (0.1,) * 5)
        assert get_coherence_trend(queen) == CoherenceTrend.DEGRADING

    def test_trend_short_history_stable(self):
        queen = replace(_tight_hive(), coherence_history=(0.1, 0.9))
        assert get_coherence_trend(queen) == CoherenceTrend.STABLE


class TestOptimalCoupling:

    def test_under_target(self):
        queen = replace(_tight_hive(), coherence=0.5)
        assert calculate_optimal_coupling(queen, 0.9) == pytest.approx(0.7)

    def test_overshoot(self):
        queen = replace(_tight_hive(), coherence=1.0)
        assert calculate_optimal_coupling(queen, 0.8) == pytest.approx(0.3)

    def test_clamped(self):
        queen = replace(_tight_hive(), coherence=0.0)
        assert calculate_optimal_coupling(queen, 10.0) == pytest.approx(1.0)


class TestSyncReceipt:

    def test_receipt_fields(self):
        _, event = remove_worker(_tight_hive(), "w0", now=NOW)
        receipt = emit_sync_receipt(event)
        assert receipt["receipt_type"] == "sync_event"
        assert receipt["event_type"] == "leave"
        assert receipt["worker_id"] == "w0"
        assert receipt["event_ts"] == NOW
