"""Rating sources, signal mappings and quadrant labels, scoped per tenant."""

import logging
from collections import defaultdict
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ninebox.config import settings
from ninebox.engine.constants import (
    AXES,
    DEFAULT_PERFORMANCE_SOURCES,
    DEFAULT_POTENTIAL_SOURCES,
    DEFAULT_QUADRANT_LABELS,
    DEFAULT_SIGNAL_WEIGHT,
    MAX_RATING,
    MIN_RATING,
    SIGNAL_CONTRIBUTIONS,
    SOURCE_SCALES,
    signal_category_for,
)
from ninebox.errors import ValidationError
from ninebox.models import QuadrantLabel, SignalMapping, SignalSnapshot, SourceMapping

logger = logging.getLogger(__name__)

_UNSET = object()
_CLEARABLE_LABEL_FIELDS = frozenset({"custom_label", "description", "color_code"})


def _now() -> datetime:
    return datetime.now(timezone.utc)


def validate_axis(axis: str) -> None:
    if axis not in AXES:
        raise ValidationError(f"Invalid axis: {axis}. Allowed: {', '.join(AXES)}")


def validate_level(name: str, level: int) -> None:
    if not MIN_RATING <= level <= MAX_RATING:
        raise ValidationError(f"{name} must be between {MIN_RATING} and {MAX_RATING}")


def validate_mapping(
    axis: str,
    source_type: str,
    weight: float,
    minimum_confidence: float | None,
) -> None:
    """Reject unknown source types and out-of-range weight/threshold values."""
    validate_axis(axis)
    is_signal = signal_category_for(source_type) is not None
    if not is_signal and source_type not in SOURCE_SCALES:
        raise ValidationError(f"Unknown source type: {source_type}")
    if not 0.0 <= weight <= 1.0:
        raise ValidationError(f"Weight for {source_type} must be between 0 and 1")
    if minimum_confidence is not None:
        if not is_signal:
            raise ValidationError(
                f"minimum_confidence only applies to signal sources, not {source_type}"
            )
        if not 0.0 <= minimum_confidence <= 1.0:
            raise ValidationError(
                f"Minimum confidence for {source_type} must be between 0 and 1"
            )


def validate_signal_mapping(
    signal_code: str,
    contributes_to: str,
    weight: float,
    minimum_confidence: float,
) -> None:
    if not signal_code or not signal_code.strip():
        raise ValidationError("signal_code is required")
    if contributes_to not in SIGNAL_CONTRIBUTIONS:
        raise ValidationError(
            f"Invalid contributes_to: {contributes_to}. "
            f"Allowed: {', '.join(SIGNAL_CONTRIBUTIONS)}"
        )
    if not 0.0 <= weight <= 1.0:
        raise ValidationError(f"Weight for signal {signal_code} must be between 0 and 1")
    if not 0.0 <= minimum_confidence <= 1.0:
        raise ValidationError(
            f"Minimum confidence for signal {signal_code} must be between 0 and 1"
        )


class SourceMappingRegistry:
    """CRUD over rating sources, signal mappings and quadrant labels for one tenant."""

    def __init__(self, db: AsyncSession, tenant_id: str):
        self.db = db
        self.tenant_id = tenant_id

    # Rating sources

    async def list_mappings(
        self, axis: str | None = None, active_only: bool = False
    ) -> list[SourceMapping]:
        """Mappings ordered by axis then priority."""
        query = select(SourceMapping).where(SourceMapping.tenant_id == self.tenant_id)
        if axis is not None:
            validate_axis(axis)
            query = query.where(SourceMapping.axis == axis)
        if active_only:
            query = query.where(SourceMapping.is_active.is_(True))
        result = await self.db.execute(
            query.order_by(
                SourceMapping.axis, SourceMapping.priority, SourceMapping.source_type
            )
        )
        return list(result.scalars().all())

    async def get_mapping(self, mapping_id: str) -> SourceMapping | None:
        result = await self.db.execute(
            select(SourceMapping).where(
                SourceMapping.id == mapping_id,
                SourceMapping.tenant_id == self.tenant_id,
            )
        )
        return result.scalar_one_or_none()

    async def upsert_mapping(
        self,
        axis: str,
        source_type: str,
        weight: float,
        priority: int = 1,
        is_active: bool = True,
        minimum_confidence: float | None = None,
    ) -> SourceMapping:
        """Create the (axis, source_type) mapping or update it if it exists."""
        validate_mapping(axis, source_type, weight, minimum_confidence)
        result = await self.db.execute(
            select(SourceMapping).where(
                SourceMapping.tenant_id == self.tenant_id,
                SourceMapping.axis == axis,
                SourceMapping.source_type == source_type,
            )
        )
        mapping = result.scalar_one_or_none()
        now = _now()
        if mapping:
            mapping.weight = weight
            mapping.priority = priority
            mapping.is_active = is_active
            mapping.minimum_confidence = minimum_confidence
            mapping.updated_at = now
        else:
            mapping = SourceMapping(
                id=str(uuid4()),
                tenant_id=self.tenant_id,
                axis=axis,
                source_type=source_type,
                weight=weight,
                priority=priority,
                is_active=is_active,
                minimum_confidence=minimum_confidence,
                created_at=now,
                updated_at=now,
            )
            self.db.add(mapping)
        await self.db.flush()
        return mapping

    async def update_mapping(
        self,
        mapping: SourceMapping,
        weight: float | None = None,
        priority: int | None = None,
        is_active: bool | None = None,
        minimum_confidence=_UNSET,
    ) -> SourceMapping:
        """Partial update; ``minimum_confidence=None`` resets to the default threshold."""
        new_weight = mapping.weight if weight is None else weight
        new_threshold = (
            mapping.minimum_confidence
            if minimum_confidence is _UNSET
            else minimum_confidence
        )
        validate_mapping(mapping.axis, mapping.source_type, new_weight, new_threshold)
        mapping.weight = new_weight
        mapping.minimum_confidence = new_threshold
        if priority is not None:
            mapping.priority = priority
        if is_active is not None:
            mapping.is_active = is_active
        mapping.updated_at = _now()
        await self.db.flush()
        return mapping

    async def delete_mapping(self, mapping: SourceMapping) -> None:
        await self.db.delete(mapping)
        await self.db.flush()

    async def initialize_default_sources(self) -> list[SourceMapping]:
        """Seed the industry-standard mappings for both axes in one call."""
        defaults = [("performance", src) for src in DEFAULT_PERFORMANCE_SOURCES] + [
            ("potential", src) for src in DEFAULT_POTENTIAL_SOURCES
        ]
        created = []
        for axis, src in defaults:
            created.append(
                await self.upsert_mapping(
                    axis=axis,
                    source_type=src["source_type"],
                    weight=src["weight"],
                    priority=src["priority"],
                    minimum_confidence=src.get("minimum_confidence"),
                )
            )
        logger.info(
            "Initialized %d default rating sources for tenant %s", len(created), self.tenant_id
        )
        return created

    # Signal mappings

    async def list_signal_mappings(
        self, axis: str | None = None, active_only: bool = False
    ) -> list[SignalMapping]:
        """Per-signal mappings; with ``axis``, those feeding it (including "both")."""
        query = select(SignalMapping).where(SignalMapping.tenant_id == self.tenant_id)
        if axis is not None:
            validate_axis(axis)
            query = query.where(SignalMapping.contributes_to.in_((axis, "both")))
        if active_only:
            query = query.where(SignalMapping.is_active.is_(True))
        result = await self.db.execute(query.order_by(SignalMapping.signal_code))
        return list(result.scalars().all())

    async def get_signal_mapping(self, mapping_id: str) -> SignalMapping | None:
        result = await self.db.execute(
            select(SignalMapping).where(
                SignalMapping.id == mapping_id,
                SignalMapping.tenant_id == self.tenant_id,
            )
        )
        return result.scalar_one_or_none()

    async def upsert_signal_mapping(
        self,
        signal_code: str,
        contributes_to: str,
        weight: float = DEFAULT_SIGNAL_WEIGHT,
        minimum_confidence: float | None = None,
        is_active: bool = True,
    ) -> SignalMapping:
        """Create the mapping for ``signal_code`` or replace its settings."""
        if minimum_confidence is None:
            minimum_confidence = settings.default_signal_minimum_confidence
        validate_signal_mapping(signal_code, contributes_to, weight, minimum_confidence)
        result = await self.db.execute(
            select(SignalMapping).where(
                SignalMapping.tenant_id == self.tenant_id,
                SignalMapping.signal_code == signal_code,
            )
        )
        mapping = result.scalar_one_or_none()
        now = _now()
        if mapping:
            mapping.contributes_to = contributes_to
            mapping.weight = weight
            mapping.minimum_confidence = minimum_confidence
            mapping.is_active = is_active
            mapping.updated_at = now
        else:
            mapping = SignalMapping(
                id=str(uuid4()),
                tenant_id=self.tenant_id,
                signal_code=signal_code,
                contributes_to=contributes_to,
                weight=weight,
                minimum_confidence=minimum_confidence,
                is_active=is_active,
                created_at=now,
                updated_at=now,
            )
            self.db.add(mapping)
        await self.db.flush()
        return mapping

    async def update_signal_mapping(
        self,
        mapping: SignalMapping,
        contributes_to: str | None = None,
        weight: float | None = None,
        minimum_confidence: float | None = None,
        is_active: bool | None = None,
    ) -> SignalMapping:
        """Partial update; None leaves a field unchanged."""
        new_target = mapping.contributes_to if contributes_to is None else contributes_to
        new_weight = mapping.weight if weight is None else weight
        new_threshold = (
            mapping.minimum_confidence if minimum_confidence is None else minimum_confidence
        )
        validate_signal_mapping(mapping.signal_code, new_target, new_weight, new_threshold)
        mapping.contributes_to = new_target
        mapping.weight = new_weight
        mapping.minimum_confidence = new_threshold
        if is_active is not None:
            mapping.is_active = is_active
        mapping.updated_at = _now()
        await self.db.flush()
        return mapping

    async def delete_signal_mapping(self, mapping: SignalMapping) -> None:
        await self.db.delete(mapping)
        await self.db.flush()

    async def initialize_default_signal_mappings(self) -> list[SignalMapping]:
        """
        Map every known signal read by an active signal source, at full weight.

        A signal feeds the axis (or axes) whose sources read its category.
        Codes that already have a mapping are left untouched.
        """
        axes_by_category: dict[str, set[str]] = defaultdict(set)
        for source in await self.list_mappings(active_only=True):
            category = signal_category_for(source.source_type)
            if category is not None:
                axes_by_category[category].add(source.axis)
        if not axes_by_category:
            return []

        result = await self.db.execute(
            select(SignalSnapshot.signal_code, SignalSnapshot.signal_category)
            .where(
                SignalSnapshot.tenant_id == self.tenant_id,
                SignalSnapshot.signal_category.in_(list(axes_by_category)),
            )
            .distinct()
            .order_by(SignalSnapshot.signal_code)
        )
        mapped = {m.signal_code for m in await self.list_signal_mappings()}
        created = []
        for signal_code, category in result.all():
            if signal_code in mapped:
                continue
            axes = axes_by_category[category]
            created.append(
                await self.upsert_signal_mapping(
                    signal_code,
                    contributes_to=next(iter(axes)) if len(axes) == 1 else "both",
                )
            )
            mapped.add(signal_code)
        logger.info(
            "Initialized %d default signal mappings for tenant %s", len(created), self.tenant_id
        )
        return created

    # Quadrant labels

    async def list_labels(self) -> list[QuadrantLabel]:
        result = await self.db.execute(
            select(QuadrantLabel)
            .where(QuadrantLabel.tenant_id == self.tenant_id)
            .order_by(
                QuadrantLabel.potential_level.desc(), QuadrantLabel.performance_level.desc()
            )
        )
        return list(result.scalars().all())

    async def get_label(
        self, performance_level: int, potential_level: int
    ) -> QuadrantLabel | None:
        result = await self.db.execute(
            select(QuadrantLabel).where(
                QuadrantLabel.tenant_id == self.tenant_id,
                QuadrantLabel.performance_level == performance_level,
                QuadrantLabel.potential_level == potential_level,
            )
        )
        return result.scalar_one_or_none()

    async def upsert_label(
        self,
        performance_level: int,
        potential_level: int,
        **fields,
    ) -> QuadrantLabel:
        """Create or edit the label for one grid cell.

        Only the given fields change. ``custom_label``, ``description`` and
        ``color_code`` are cleared by passing None; the other fields ignore None.
        """
        validate_level("performance_level", performance_level)
        validate_level("potential_level", potential_level)
        label = await self.get_label(performance_level, potential_level)
        updates = {
            k: v for k, v in fields.items() if v is not None or k in _CLEARABLE_LABEL_FIELDS
        }
        if label is None:
            default_label, color, actions = DEFAULT_QUADRANT_LABELS[
                (performance_level, potential_level)
            ]
            label = QuadrantLabel(
                id=str(uuid4()),
                tenant_id=self.tenant_id,
                performance_level=performance_level,
                potential_level=potential_level,
                default_label=default_label,
                color_code=color,
                suggested_actions=list(actions),
                use_custom_label=False,
                updated_at=_now(),
            )
        elif not updates:
            return label
        for key, value in updates.items():
            setattr(label, key, value)
        if label.use_custom_label and not label.custom_label:
            raise ValidationError("use_custom_label requires a custom_label")
        label.updated_at = _now()
        self.db.add(label)
        await self.db.flush()
        return label

    async def initialize_default_labels(self) -> list[QuadrantLabel]:
        """Create any missing grid cells with the standard labels and colors."""
        labels = []
        for performance_level, potential_level in DEFAULT_QUADRANT_LABELS:
            labels.append(await self.upsert_label(performance_level, potential_level))
        return labels
