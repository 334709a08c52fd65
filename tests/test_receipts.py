"""
tests/test_receipts.py - Tests for receipts.py

Every test has assert statements.
"""

import json

import numpy as np
import pytest


class TestDualHash:

    def test_format(self):
        """dual_hash is sha256:blake3."""
        from receipts import dual_hash

        h = dual_hash("abc")
        sha, b3 = h.split(":")
        assert len(sha) == 64 and len(b3) == 64

    def test_bytes_and_str_agree(self):
        from receipts import dual_hash

        assert dual_hash("abc") == dual_hash(b"abc")


class TestEmitReceipt:

    def test_fields(self):
        from receipts import emit_receipt

        receipt = emit_receipt("sync_event", {"tenant_id": "engine", "phase": 1.0})
        assert receipt["receipt_type"] == "sync_event"
        assert receipt["tenant_id"] == "engine"
        assert receipt["phase"] == 1.0
        assert "ts" in receipt and "payload_hash" in receipt

    def test_default_tenant(self):
        from receipts import emit_receipt

        assert emit_receipt("metrics_snapshot", {})["tenant_id"] == "engine"

    def test_payload_hash_ignores_timestamp(self):
        from receipts import emit_receipt

        a = emit_receipt("metrics_snapshot", {"value": 1})
        b = emit_receipt("metrics_snapshot", {"value": 1})
        assert a["payload_hash"] == b["payload_hash"]

    def test_unregistered_type_halts(self):
        from receipts import RECEIPT_TYPES, StopRule, emit_receipt

        assert "anomaly" not in RECEIPT_TYPES
        with pytest.raises(StopRule):
            emit_receipt("anomaly", {"value": 1})

    def test_numpy_payload_is_plain(self):
        """numpy scalars hash like floats and the receipt dumps as JSON."""
        from receipts import emit_receipt

        a = emit_receipt("kuramoto_simulation", {"r": np.float64(0.5), "ok": np.bool_(True), "phases": np.array([0.0, 1.0])})
        b = emit_receipt("kuramoto_simulation", {"r": 0.5, "ok": True, "phases": [0.0, 1.0]})
        assert a["payload_hash"] == b["payload_hash"]
        assert a["ok"] is True
        assert a["phases"] == [0.0, 1.0]
        json.dumps(a)

    def test_unserializable_payload_rejected(self):
        from receipts import emit_receipt

        with pytest.raises(TypeError):
            emit_receipt("sync_event", {"worker": object()})


class TestMerkle:

    def test_empty(self):
        from receipts import dual_hash, merkle

        assert merkle([]) == dual_hash(b"empty")

    def test_order_sensitive(self):
        from receipts import merkle

        assert merkle([1, 2, 3]) != merkle([3, 2, 1])

    def test_single_item(self):
        from receipts import dual_hash, merkle

        assert merkle([0.5]) == dual_hash("0.5")

    def test_numpy_items_match_floats(self):
        from receipts import merkle

        assert merkle([np.float64(0.25), np.float64(0.75)]) == merkle([0.25, 0.75])


class TestStopRule:

    def test_is_exception(self):
        from receipts import StopRule

        with pytest.raises(StopRule):
            raise StopRule("halt")
