#!/usr/bin/env python3
"""
Seed script: creates a demo tenant and API key, default rating sources and
quadrant labels, and sample talent data for two employees.
Run after migrations: python scripts/seed.py
"""

import asyncio
import os
import sys
from datetime import datetime, timezone
from uuid import uuid4

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select

from ninebox.auth.middleware import hash_api_key
from ninebox.database import async_session_maker, engine
from ninebox.models import SignalSnapshot, SourceRecord, Tenant
from ninebox.storage.registry import SourceMappingRegistry


API_KEY = "sk_demo_ninebox_12345"  # Demo API key - print this for user

# Strong performer with a medium-bias leadership signal; no competency data
EMPLOYEE_A = "0b3c7a52-3f65-4d1a-9a51-6d0f1f8e2a01"
# Only a potential assessment on record: performance axis has no data
EMPLOYEE_B = "0b3c7a52-3f65-4d1a-9a51-6d0f1f8e2a02"


def _sample_data(tenant_id: str, now: datetime) -> list:
    records = [
        (EMPLOYEE_A, "appraisal_overall_score", 4.2),
        (EMPLOYEE_A, "goal_achievement", 82.0),
        (EMPLOYEE_A, "goal_achievement", 74.6),
        (EMPLOYEE_A, "potential_assessment", 71.0),
        (EMPLOYEE_B, "potential_assessment", 55.0),
    ]
    signals = [
        (EMPLOYEE_A, "strategic_thinking", "leadership", 0.82, 0.78, "low"),
        (EMPLOYEE_A, "people_leadership", "leadership", 0.75, 0.70, "medium"),
        (EMPLOYEE_A, "integrity", "values", 0.9, 0.65, None),
    ]
    rows: list = [
        SourceRecord(
            id=str(uuid4()),
            tenant_id=tenant_id,
            employee_id=employee_id,
            source_type=source_type,
            value=value,
            is_current=True,
            recorded_at=now,
        )
        for employee_id, source_type, value in records
    ]
    rows += [
        SignalSnapshot(
            id=str(uuid4()),
            tenant_id=tenant_id,
            employee_id=employee_id,
            signal_code=code,
            signal_category=category,
            score=score,
            confidence=confidence,
            bias_risk_level=bias,
            is_current=True,
            captured_at=now,
        )
        for employee_id, code, category, score, confidence, bias in signals
    ]
    return rows


async def seed():
    now = datetime.now(timezone.utc)
    async with async_session_maker() as session:
        api_key_hash = hash_api_key(API_KEY)
        result = await session.execute(
            select(Tenant).where(Tenant.api_key_hash == api_key_hash)
        )
        tenant = result.scalar_one_or_none()
        if tenant:
            print("Tenant already exists, using existing.")
        else:
            tenant = Tenant(
                tenant_id=str(uuid4()),
                name="Demo Tenant",
                api_key_hash=api_key_hash,
                created_at=now,
            )
            session.add(tenant)
            await session.flush()
            session.add_all(_sample_data(str(tenant.tenant_id), now))

        registry = SourceMappingRegistry(session, str(tenant.tenant_id))
        await registry.initialize_default_sources()
        await registry.initialize_default_signal_mappings()
        await registry.initialize_default_labels()
        await session.commit()

        print(f"Tenant: {tenant.tenant_id}")
        print(f"API key: {API_KEY}")
        print(f"Employees: {EMPLOYEE_A}, {EMPLOYEE_B}")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed())
