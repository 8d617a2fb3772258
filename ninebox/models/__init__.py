"""Database models."""

from ninebox.models.tenant import Tenant
from ninebox.models.mapping import QuadrantLabel, SignalMapping, SourceMapping
from ninebox.models.signal import SignalSnapshot, SourceRecord
from ninebox.models.assessment import Assessment, EvidenceRecord

__all__ = [
    "Tenant",
    "SourceMapping",
    "SignalMapping",
    "QuadrantLabel",
    "SignalSnapshot",
    "SourceRecord",
    "Assessment",
    "EvidenceRecord",
]
