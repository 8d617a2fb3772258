"""Read-only adapters over upstream talent data (signal store, raw source systems)."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ninebox.engine.constants import (
    AVERAGED_SOURCES,
    SOURCE_SCALES,
    contributes_to_axis,
    signal_category_for,
)
from ninebox.engine.scorer import MappingLike, SourceData
from ninebox.models import SignalMapping, SignalSnapshot, SourceRecord
from ninebox.schemas.scoring import RawObservation, SignalObservation


def _to_observation(snapshot: SignalSnapshot) -> SignalObservation:
    return SignalObservation(
        signal_id=str(snapshot.id),
        signal_code=snapshot.signal_code,
        signal_category=snapshot.signal_category,
        score=snapshot.score,
        confidence=snapshot.confidence,
        bias_risk_level=snapshot.bias_risk_level,
    )


class SignalStore:
    """Current signal snapshots for one tenant."""

    def __init__(self, db: AsyncSession, tenant_id: str):
        self.db = db
        self.tenant_id = tenant_id

    async def get_current_signal(
        self, employee_id: str, signal_code: str
    ) -> SignalObservation | None:
        """Latest current snapshot of one signal, or None."""
        result = await self.db.execute(
            select(SignalSnapshot)
            .where(
                SignalSnapshot.tenant_id == self.tenant_id,
                SignalSnapshot.employee_id == employee_id,
                SignalSnapshot.signal_code == signal_code,
                SignalSnapshot.is_current.is_(True),
            )
            .order_by(SignalSnapshot.captured_at.desc())
            .limit(1)
        )
        snapshot = result.scalar_one_or_none()
        return _to_observation(snapshot) if snapshot else None

    async def get_current_signals(
        self, employee_id: str, category: str
    ) -> list[SignalObservation]:
        """All current snapshots in a category (one per signal code)."""
        result = await self.db.execute(
            select(SignalSnapshot)
            .where(
                SignalSnapshot.tenant_id == self.tenant_id,
                SignalSnapshot.employee_id == employee_id,
                SignalSnapshot.signal_category == category,
                SignalSnapshot.is_current.is_(True),
            )
            .order_by(SignalSnapshot.signal_code, SignalSnapshot.captured_at.desc())
        )
        latest: dict[str, SignalObservation] = {}
        for snapshot in result.scalars():
            latest.setdefault(snapshot.signal_code, _to_observation(snapshot))
        return list(latest.values())


class RawSourceProvider:
    """Latest native-scale value per raw source type (appraisal, goals, potential)."""

    def __init__(self, db: AsyncSession, tenant_id: str):
        self.db = db
        self.tenant_id = tenant_id

    def _current(self, employee_id: str, source_type: str):
        return (
            SourceRecord.tenant_id == self.tenant_id,
            SourceRecord.employee_id == employee_id,
            SourceRecord.source_type == source_type,
            SourceRecord.is_current.is_(True),
        )

    async def get_latest(self, employee_id: str, source_type: str) -> RawObservation | None:
        """
        Latest current value for ``source_type``; averaged sources (goal
        progress, competency ratings) return the mean of all current records.
        """
        if source_type not in SOURCE_SCALES:
            raise ValueError(f"Unknown raw source type: {source_type}")

        if source_type in AVERAGED_SOURCES:
            result = await self.db.execute(
                select(func.avg(SourceRecord.value), func.count(SourceRecord.id)).where(
                    *self._current(employee_id, source_type)
                )
            )
            average, count = result.one()
            if not count:
                return None
            return RawObservation(value=float(average))

        result = await self.db.execute(
            select(SourceRecord)
            .where(*self._current(employee_id, source_type))
            .order_by(SourceRecord.recorded_at.desc())
            .limit(1)
        )
        record = result.scalar_one_or_none()
        if not record:
            return None
        return RawObservation(source_id=str(record.id), value=record.value)


async def load_mapped_signals(
    employee_id: str,
    axis: str,
    signal_mappings: list[SignalMapping],
    signal_store: SignalStore,
) -> list[SignalObservation] | None:
    """
    Current snapshots of the signals mapped to ``axis``, carrying each
    mapping's weight and threshold.

    Returns None when the tenant has no signal mappings at all; signal
    sources then read every current signal of their category.
    """
    if not signal_mappings:
        return None
    observations = []
    for mapping in signal_mappings:
        if not mapping.is_active or not contributes_to_axis(mapping.contributes_to, axis):
            continue
        signal = await signal_store.get_current_signal(employee_id, mapping.signal_code)
        if signal is None:
            continue
        observations.append(
            signal.model_copy(
                update={
                    "weight": mapping.weight,
                    "minimum_confidence": mapping.minimum_confidence,
                }
            )
        )
    return observations


async def load_source_data(
    employee_id: str,
    axis: str,
    mappings: list[MappingLike],
    signal_store: SignalStore,
    raw_sources: RawSourceProvider,
    signal_mappings: list[SignalMapping] | None = None,
) -> dict[str, SourceData]:
    """Fetch the current data for every active mapping of one axis, keyed by source type."""
    mapped = await load_mapped_signals(
        employee_id, axis, signal_mappings or [], signal_store
    )
    data: dict[str, SourceData] = {}
    for mapping in mappings:
        if not mapping.is_active or mapping.source_type in data:
            continue
        category = signal_category_for(mapping.source_type)
        if category is None:
            data[mapping.source_type] = await raw_sources.get_latest(
                employee_id, mapping.source_type
            )
        elif mapped is not None:
            data[mapping.source_type] = [
                s for s in mapped if s.signal_category == category
            ] or None
        else:
            signals = await signal_store.get_current_signals(employee_id, category)
            data[mapping.source_type] = signals or None
    return data
