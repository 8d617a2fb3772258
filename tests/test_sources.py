"""Tests for the signal store and raw source adapters."""

from types import SimpleNamespace

import pytest

from ninebox.storage.sources import (
    RawSourceProvider,
    SignalStore,
    load_mapped_signals,
    load_source_data,
)


def signal_mapping(signal_code, contributes_to, weight=1.0, minimum_confidence=0.6, is_active=True):
    return SimpleNamespace(
        signal_code=signal_code,
        contributes_to=contributes_to,
        weight=weight,
        minimum_confidence=minimum_confidence,
        is_active=is_active,
    )


def source(source_type, minimum_confidence=None):
    return SimpleNamespace(
        source_type=source_type,
        weight=0.4,
        priority=1,
        is_active=True,
        minimum_confidence=minimum_confidence,
    )


async def test_get_current_signal_latest_current_snapshot(db, tenant_id, employee_id, add_signal):
    store = SignalStore(db, tenant_id)
    assert await store.get_current_signal(employee_id, "strategic_thinking") is None

    await add_signal(employee_id, "leadership", 0.9, signal_code="strategic_thinking", is_current=False)
    latest = await add_signal(employee_id, "leadership", 0.7, signal_code="strategic_thinking")

    signal = await store.get_current_signal(employee_id, "strategic_thinking")
    assert signal.signal_id == str(latest.id)
    assert signal.score == 0.7
    assert signal.signal_category == "leadership"


async def test_get_current_signals_by_category(db, tenant_id, employee_id, add_signal):
    await add_signal(employee_id, "leadership", 0.8, signal_code="strategic_thinking")
    await add_signal(employee_id, "leadership", 0.6, signal_code="people_leadership")
    await add_signal(employee_id, "values", 0.9, signal_code="integrity")

    signals = await SignalStore(db, tenant_id).get_current_signals(employee_id, "leadership")
    assert sorted(s.signal_code for s in signals) == ["people_leadership", "strategic_thinking"]
    assert all(s.weight == 1.0 for s in signals)


async def test_averaged_raw_source(db, tenant_id, employee_id, add_record):
    await add_record(employee_id, "goal_achievement", 70.0)
    await add_record(employee_id, "goal_achievement", 90.0)
    await add_record(employee_id, "goal_achievement", 10.0, is_current=False)

    observation = await RawSourceProvider(db, tenant_id).get_latest(employee_id, "goal_achievement")
    assert observation.value == pytest.approx(80.0)
    assert observation.source_id is None


async def test_latest_raw_source(db, tenant_id, employee_id, add_record):
    await add_record(employee_id, "appraisal_overall_score", 3.0, age_days=30)
    latest = await add_record(employee_id, "appraisal_overall_score", 4.0)

    observation = await RawSourceProvider(db, tenant_id).get_latest(
        employee_id, "appraisal_overall_score"
    )
    assert observation.value == 4.0
    assert observation.source_id == str(latest.id)

    with pytest.raises(ValueError):
        await RawSourceProvider(db, tenant_id).get_latest(employee_id, "leadership_signals")


async def test_mapped_signals_carry_mapping_settings(db, tenant_id, employee_id, add_signal):
    """Only signals mapped to the axis are fetched, with the mapping's weight and threshold."""
    await add_signal(employee_id, "leadership", 0.8, signal_code="strategic_thinking")
    await add_signal(employee_id, "leadership", 0.6, signal_code="delivery_focus")
    mappings = [
        signal_mapping("strategic_thinking", "both", weight=0.5, minimum_confidence=0.7),
        signal_mapping("delivery_focus", "performance"),
        signal_mapping("not_observed", "potential"),
    ]
    store = SignalStore(db, tenant_id)

    potential = await load_mapped_signals(employee_id, "potential", mappings, store)
    assert [s.signal_code for s in potential] == ["strategic_thinking"]
    assert potential[0].weight == 0.5
    assert potential[0].minimum_confidence == 0.7

    performance = await load_mapped_signals(employee_id, "performance", mappings, store)
    assert sorted(s.signal_code for s in performance) == ["delivery_focus", "strategic_thinking"]

    assert await load_mapped_signals(employee_id, "potential", [], store) is None


async def test_load_source_data_restricts_to_mapped_signals(
    db, tenant_id, employee_id, add_signal
):
    """Once signals are mapped, unmapped and inactive signals stop feeding the category."""
    await add_signal(employee_id, "leadership", 0.8, signal_code="strategic_thinking")
    await add_signal(employee_id, "leadership", 0.6, signal_code="people_leadership")
    await add_signal(employee_id, "values", 0.9, signal_code="integrity")
    store = SignalStore(db, tenant_id)
    raw = RawSourceProvider(db, tenant_id)
    sources = [source("leadership_signals"), source("values_signals")]

    unmapped = await load_source_data(employee_id, "potential", sources, store, raw)
    assert len(unmapped["leadership_signals"]) == 2
    assert len(unmapped["values_signals"]) == 1

    mappings = [
        signal_mapping("strategic_thinking", "potential"),
        signal_mapping("integrity", "potential", is_active=False),
    ]
    mapped = await load_source_data(employee_id, "potential", sources, store, raw, mappings)
    assert [s.signal_code for s in mapped["leadership_signals"]] == ["strategic_thinking"]
    assert mapped["values_signals"] is None
