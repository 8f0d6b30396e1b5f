"""
Analytics service: best-effort daily counters
"""
import pytest
from unittest.mock import MagicMock

from models.analytics import UsageEvent
from services.analytics_service import AnalyticsService, counter_key


def supabase_with_count(count):
    """MagicMock shaped like the supabase client's table query builder"""
    supabase = MagicMock()
    table = supabase.table.return_value
    table.select.return_value.eq.return_value.execute.return_value = MagicMock(
        data=[{"count": count}] if count is not None else []
    )
    return supabase, table


@pytest.mark.unit
class TestParseEvent:

    def test_full_event(self):
        event = AnalyticsService.parse_event({"type": "generation", "day": "2026-10-18", "ts": 1760745600000})

        assert event == UsageEvent(type="generation", day="2026-10-18", ts=1760745600000)

    @pytest.mark.parametrize("payload", [None, [], "x", {}, {"type": 5, "day": None, "ts": "soon"}])
    def test_defaults(self, payload):
        event = AnalyticsService.parse_event(payload)

        assert event.type == "generation"
        assert len(event.day) == 10
        assert event.ts is None

    @pytest.mark.parametrize("ts", [float("inf"), float("-inf"), float("nan"), True])
    def test_non_finite_timestamp_is_dropped(self, ts):
        event = AnalyticsService.parse_event({"type": "generation", "ts": ts})

        assert event.ts is None

    def test_float_timestamp_is_truncated(self):
        assert AnalyticsService.parse_event({"ts": 1760745600000.7}).ts == 1760745600000


@pytest.mark.unit
@pytest.mark.asyncio
class TestRecord:

    async def test_disabled_without_storage(self, monkeypatch):
        monkeypatch.setattr("services.analytics_service.get_supabase", lambda: None)
        service = AnalyticsService(table="usage_counters")

        assert service.enabled is False
        assert await service.record(UsageEvent(day="2026-10-18")) is False

    async def test_storage_setup_failure_disables_counting(self, monkeypatch):
        def broken():
            raise ValueError("bad url")

        monkeypatch.setattr("services.analytics_service.get_supabase", broken)

        assert AnalyticsService(table="usage_counters").enabled is False

    async def test_increments_existing_counter(self):
        supabase, table = supabase_with_count(41)
        service = AnalyticsService(supabase=supabase, table="usage_counters")

        assert await service.record(UsageEvent(type="generation", day="2026-10-18")) is True

        table.select.return_value.eq.assert_called_with("key", "count:generation:2026-10-18")
        table.upsert.assert_called_once_with({"key": "count:generation:2026-10-18", "count": 42}, on_conflict="key")

    async def test_starts_new_counter(self):
        supabase, table = supabase_with_count(None)
        service = AnalyticsService(supabase=supabase, table="usage_counters")

        await service.record(UsageEvent(type="generation", day="2026-10-19"))

        table.upsert.assert_called_once_with({"key": "count:generation:2026-10-19", "count": 1}, on_conflict="key")

    async def test_storage_errors_are_swallowed(self):
        supabase = MagicMock()
        supabase.table.side_effect = RuntimeError("database down")
        service = AnalyticsService(supabase=supabase, table="usage_counters")

        assert await service.record(UsageEvent(day="2026-10-18")) is False


@pytest.mark.unit
class TestGetCounters:

    def test_missing_days_count_zero(self):
        supabase = MagicMock()
        supabase.table.return_value.select.return_value.in_.return_value.execute.return_value = MagicMock(
            data=[{"key": counter_key("generation", "2026-10-18"), "count": 7}]
        )
        service = AnalyticsService(supabase=supabase, table="usage_counters")

        counters, error = service.get_counters("generation", ["2026-10-18", "2026-10-17"])

        assert error is None
        assert [c.count for c in counters] == [7, 0]

    def test_not_configured(self, monkeypatch):
        monkeypatch.setattr("services.analytics_service.get_supabase", lambda: None)

        counters, error = AnalyticsService(table="usage_counters").get_counters("generation", ["2026-10-18"])

        assert counters == []
        assert "not configured" in error
