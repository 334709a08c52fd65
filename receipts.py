"""
receipts.py - Engine Receipts

Every coherence event the engine reports (a simulation run, a sync step, a
metrics snapshot, an invariant violation) leaves a receipt built here. The
receipt type must be one of RECEIPT_TYPES. Payload values are reduced to
plain JSON types first, so numpy scalars coming out of the engine hash the
same as the equivalent Python floats and the receipt can be dumped as is.

Never single hash. Always dual_hash (SHA256:BLAKE3).
"""

import hashlib
import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Union

import blake3
import numpy as np

__all__ = [
    "RECEIPT_TYPES",
    "dual_hash",
    "emit_receipt",
    "merkle",
    "StopRule",
]

# =============================================================================
# CONSTANTS
# =============================================================================

RECEIPT_TYPES = (
    "kuramoto_simulation",
    "sync_event",
    "metrics_snapshot",
    "invariant_violation",
)

DEFAULT_TENANT = "engine"


class StopRule(Exception):
    """Raised on an invalid constructor argument or a broken invariant. Never catch silently."""
    pass


# =============================================================================
# HASHING
# =============================================================================

def dual_hash(data: Union[bytes, str]) -> str:
    """
    SHA256:BLAKE3 - ALWAYS use this, never single hash.

    Returns:
        str: "sha256_hex:blake3_hex" format
    """
    if isinstance(data, str):
        data = data.encode()
    sha = hashlib.sha256(data).hexdigest()
    b3 = blake3.blake3(data).hexdigest()
    return f"{sha}:{b3}"


def _json_default(obj: Any) -> Any:
    if isinstance(obj, np.generic):
        return obj.item()
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    raise TypeError(f"{type(obj).__name__} is not receipt-serializable")


def _canonical(data: Any) -> str:
    return json.dumps(data, sort_keys=True, default=_json_default)


# =============================================================================
# RECEIPTS
# =============================================================================

def emit_receipt(receipt_type: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build a receipt for an engine event.

    The payload hash covers only the data fields, so two receipts for the
    same deterministic computation share a payload_hash even though their
    timestamps differ. Tuples in the payload come back as lists.

    Args:
        receipt_type: One of RECEIPT_TYPES
        data: Receipt payload (tenant_id defaults to 'engine')

    Returns:
        dict: Receipt with ts, tenant_id, payload_hash and the data fields

    Raises:
        StopRule: If receipt_type is not registered
    """
    if receipt_type not in RECEIPT_TYPES:
        raise StopRule(f"Unknown receipt type {receipt_type!r}")

    canonical = _canonical(data)
    return {
        "receipt_type": receipt_type,
        "ts": datetime.now(timezone.utc).isoformat(),
        "tenant_id": data.get("tenant_id", DEFAULT_TENANT),
        "payload_hash": dual_hash(canonical),
        **json.loads(canonical),
    }


def merkle(items: List[Any]) -> str:
    """
    Merkle root of items, in dual_hash format.

    Used to fingerprint coherence sample traces so a run can be compared
    against a replay with the same seed. An odd level repeats its last hash.
    """
    if not items:
        return dual_hash(b"empty")
    hashes = [dual_hash(_canonical(i)) for i in items]
    while len(hashes) > 1:
        if len(hashes) % 2:
            hashes.append(hashes[-1])
        hashes = [dual_hash(hashes[i] + hashes[i + 1])
                  for i in range(0, len(hashes), 2)]
    return hashes[0]
