"""Shared fixtures: in-memory SQLite database, tenant and talent data factories."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from ninebox.database import Base
from ninebox.models import SignalSnapshot, SourceRecord, Tenant
from ninebox.storage.registry import SourceMappingRegistry


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


async def _create_engine(url: str, **kwargs):
    engine = create_async_engine(url, **kwargs)
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return engine


@pytest.fixture
async def engine():
    engine = await _create_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    yield engine
    await engine.dispose()


@pytest.fixture
async def file_engine(tmp_path):
    """File-backed database: each session gets its own connection."""
    engine = await _create_engine(f"sqlite+aiosqlite:///{tmp_path / 'ninebox.db'}")
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def tenant(db):
    tenant = Tenant(
        tenant_id=str(uuid4()),
        name="Test Tenant",
        api_key_hash=f"hash-{uuid4()}",
        created_at=datetime.now(timezone.utc),
    )
    db.add(tenant)
    await db.commit()
    return tenant


@pytest.fixture
def tenant_id(tenant):
    return str(tenant.tenant_id)


@pytest.fixture
def employee_id():
    return str(uuid4())


@pytest.fixture
async def default_sources(db, tenant_id):
    registry = SourceMappingRegistry(db, tenant_id)
    mappings = await registry.initialize_default_sources()
    await db.commit()
    return mappings


@pytest.fixture
def add_record(db, tenant_id):
    """Factory: insert a current raw source record."""

    async def _add(employee_id, source_type, value, age_days=0, is_current=True):
        record = SourceRecord(
            id=str(uuid4()),
            tenant_id=tenant_id,
            employee_id=employee_id,
            source_type=source_type,
            value=value,
            is_current=is_current,
            recorded_at=datetime.now(timezone.utc) - timedelta(days=age_days),
        )
        db.add(record)
        await db.commit()
        return record

    return _add


@pytest.fixture
def add_signal(db, tenant_id):
    """Factory: insert a signal snapshot."""

    async def _add(
        employee_id,
        category,
        score,
        confidence=0.8,
        bias_risk_level=None,
        signal_code=None,
        is_current=True,
    ):
        snapshot = SignalSnapshot(
            id=str(uuid4()),
            tenant_id=tenant_id,
            employee_id=employee_id,
            signal_code=signal_code or f"{category}_{uuid4().hex[:6]}",
            signal_category=category,
            score=score,
            confidence=confidence,
            bias_risk_level=bias_risk_level,
            is_current=is_current,
            captured_at=datetime.now(timezone.utc),
        )
        db.add(snapshot)
        await db.commit()
        return snapshot

    return _add
