"""Admin endpoints - rating sources, signal mappings and quadrant labels."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ninebox.auth.middleware import TenantDep
from ninebox.database import get_db
from ninebox.schemas.admin import (
    QuadrantLabelOut,
    QuadrantLabelRequest,
    SignalMappingOut,
    SignalMappingRequest,
    SignalMappingUpdate,
    SourceMappingOut,
    SourceMappingRequest,
    SourceMappingUpdate,
)
from ninebox.storage.registry import SourceMappingRegistry

router = APIRouter()


def _registry(tenant, db: AsyncSession) -> SourceMappingRegistry:
    return SourceMappingRegistry(db, str(tenant.tenant_id))


async def _get_mapping_or_404(registry: SourceMappingRegistry, mapping_id: str):
    mapping = await registry.get_mapping(mapping_id)
    if not mapping:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Rating source not found",
        )
    return mapping


@router.get("/rating-sources", response_model=list[SourceMappingOut])
async def list_rating_sources(
    tenant: TenantDep,
    db: Annotated[AsyncSession, Depends(get_db)],
    axis: str | None = None,
):
    """Configured rating sources, by axis then priority."""
    return await _registry(tenant, db).list_mappings(axis=axis)


@router.post("/rating-sources", response_model=SourceMappingOut)
async def upsert_rating_source(
    body: SourceMappingRequest,
    tenant: TenantDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create or update the mapping for (axis, source_type)."""
    mapping = await _registry(tenant, db).upsert_mapping(**body.model_dump())
    await db.commit()
    return mapping


@router.patch("/rating-sources/{mapping_id}", response_model=SourceMappingOut)
async def update_rating_source(
    mapping_id: UUID,
    body: SourceMappingUpdate,
    tenant: TenantDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Change weight, priority, activity or minimum confidence of a mapping."""
    registry = _registry(tenant, db)
    mapping = await _get_mapping_or_404(registry, str(mapping_id))
    mapping = await registry.update_mapping(mapping, **body.model_dump(exclude_unset=True))
    await db.commit()
    return mapping


@router.delete("/rating-sources/{mapping_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_rating_source(
    mapping_id: UUID,
    tenant: TenantDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Remove a mapping. Stored evidence keeps referring to its source type."""
    registry = _registry(tenant, db)
    mapping = await _get_mapping_or_404(registry, str(mapping_id))
    await registry.delete_mapping(mapping)
    await db.commit()


@router.post("/rating-sources/initialize-defaults", response_model=list[SourceMappingOut])
async def initialize_default_sources(
    tenant: TenantDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Seed the standard performance and potential sources."""
    mappings = await _registry(tenant, db).initialize_default_sources()
    await db.commit()
    return mappings


async def _get_signal_mapping_or_404(registry: SourceMappingRegistry, mapping_id: str):
    mapping = await registry.get_signal_mapping(mapping_id)
    if not mapping:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Signal mapping not found",
        )
    return mapping


@router.get("/signal-mappings", response_model=list[SignalMappingOut])
async def list_signal_mappings(
    tenant: TenantDep,
    db: Annotated[AsyncSession, Depends(get_db)],
    axis: str | None = None,
):
    """Per-signal mappings; with ``axis``, the ones feeding it."""
    return await _registry(tenant, db).list_signal_mappings(axis=axis)


@router.post("/signal-mappings", response_model=SignalMappingOut)
async def upsert_signal_mapping(
    body: SignalMappingRequest,
    tenant: TenantDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create or update the mapping of one signal code."""
    mapping = await _registry(tenant, db).upsert_signal_mapping(**body.model_dump())
    await db.commit()
    return mapping


@router.patch("/signal-mappings/{mapping_id}", response_model=SignalMappingOut)
async def update_signal_mapping(
    mapping_id: UUID,
    body: SignalMappingUpdate,
    tenant: TenantDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    registry = _registry(tenant, db)
    mapping = await _get_signal_mapping_or_404(registry, str(mapping_id))
    mapping = await registry.update_signal_mapping(mapping, **body.model_dump(exclude_unset=True))
    await db.commit()
    return mapping


@router.delete("/signal-mappings/{mapping_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_signal_mapping(
    mapping_id: UUID,
    tenant: TenantDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    registry = _registry(tenant, db)
    mapping = await _get_signal_mapping_or_404(registry, str(mapping_id))
    await registry.delete_signal_mapping(mapping)
    await db.commit()


@router.post("/signal-mappings/initialize-defaults", response_model=list[SignalMappingOut])
async def initialize_default_signal_mappings(
    tenant: TenantDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Map every known signal read by an active signal source, at full weight."""
    mappings = await _registry(tenant, db).initialize_default_signal_mappings()
    await db.commit()
    return mappings


@router.get("/quadrant-labels", response_model=list[QuadrantLabelOut])
async def list_quadrant_labels(
    tenant: TenantDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Configured grid cells, top row (high potential) first."""
    return await _registry(tenant, db).list_labels()


@router.put(
    "/quadrant-labels/{performance_level}/{potential_level}",
    response_model=QuadrantLabelOut,
)
async def upsert_quadrant_label(
    performance_level: int,
    potential_level: int,
    body: QuadrantLabelRequest,
    tenant: TenantDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Edit label, custom label toggle, description, actions or color of one cell."""
    label = await _registry(tenant, db).upsert_label(
        performance_level, potential_level, **body.model_dump(exclude_unset=True)
    )
    await db.commit()
    return label


@router.post("/quadrant-labels/initialize-defaults", response_model=list[QuadrantLabelOut])
async def initialize_default_labels(
    tenant: TenantDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create any missing cells with the standard labels and colors."""
    labels = await _registry(tenant, db).initialize_default_labels()
    await db.commit()
    return labels
