"""Canonical JSON and hashing utilities for evidence snapshots."""

import hashlib
import json
from decimal import Decimal
from typing import Any


def _canonical_value(obj: Any) -> Any:
    """Convert value for canonical representation."""
    if obj is None or isinstance(obj, (bool, str)):
        return obj
    if isinstance(obj, int):
        return obj
    if isinstance(obj, (float, Decimal)):
        # Float noise from weighting must not change the hash
        return round(float(obj), 6)
    if isinstance(obj, dict):
        return {str(k): _canonical_value(v) for k, v in sorted(obj.items())}
    if isinstance(obj, (list, tuple)):
        return [_canonical_value(v) for v in obj]
    return str(obj)


def canonical_json(obj: Any) -> str:
    """Produce canonical JSON string (sorted keys, consistent formatting)."""
    return json.dumps(_canonical_value(obj), sort_keys=True, separators=(",", ":"))


def evidence_hash(rows: list[dict]) -> str:
    """SHA256 of the canonical evidence set, independent of row order."""
    ordered = sorted(rows, key=canonical_json)
    return hashlib.sha256(canonical_json(ordered).encode()).hexdigest()
