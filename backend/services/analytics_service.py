import asyncio
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from config.settings import get_settings
from core.supabase import get_supabase
from models.analytics import UsageCounter, UsageEvent, UsageEventType

def counter_key(event_type: str, day: str) -> str:
    return f"count:{event_type}:{day}"

def today() -> str:
    return datetime.now(timezone.utc).strftime('%Y-%m-%d')

class AnalyticsService:
    """
    Best-effort daily usage counters.

    Storage is a Supabase table with ``key`` and ``count`` columns. Without
    Supabase configured every call is a no-op. Nothing here ever raises to the
    caller: a lost increment is acceptable, a failed beacon is not.
    """

    def __init__(self, supabase=None, table: Optional[str] = None):
        if supabase is None:
            try:
                supabase = get_supabase()
            except Exception as error:
                print(f"[ANALYTICS] Storage unavailable, counting disabled: {error}")
                supabase = None
        self.supabase = supabase
        self.table = table or get_settings().ANALYTICS_TABLE

    @property
    def enabled(self) -> bool:
        return self.supabase is not None

    @staticmethod
    def parse_event(payload: Any) -> UsageEvent:
        """Build an event from a loosely shaped beacon body, filling in defaults"""
        if not isinstance(payload, dict):
            payload = {}

        event_type = payload.get("type")
        day = payload.get("day")
        ts = payload.get("ts")
        if isinstance(ts, bool) or not isinstance(ts, (int, float)) or not math.isfinite(ts):
            ts = None
        return UsageEvent(
            type=event_type if isinstance(event_type, str) and event_type else UsageEventType.GENERATION.value,
            day=day if isinstance(day, str) and day else today(),
            ts=int(ts) if ts is not None else None
        )

    async def record(self, event: UsageEvent) -> bool:
        """Increment the counter for the event's type and day. Returns False when nothing was stored."""
        if not self.enabled:
            return False

        key = counter_key(event.type, event.day or today())
        try:
            # Read-then-write, same as a KV store: concurrent beacons may lose an increment
            current = await asyncio.to_thread(
                lambda: self.supabase.table(self.table).select("count").eq("key", key).execute()
            )
            count = int(current.data[0].get("count") or 0) if current.data else 0

            await asyncio.to_thread(
                lambda: self.supabase.table(self.table)
                .upsert({"key": key, "count": count + 1}, on_conflict="key")
                .execute()
            )
            return True

        except Exception as error:
            print(f"[ANALYTICS] Ignoring failed increment for {key}: {error}")
            return False

    def get_counters(self, event_type: str, days: List[str]) -> Tuple[List[UsageCounter], Optional[str]]:
        """Read counters for the given days (used by the usage report script)"""
        if not self.enabled:
            return [], "Analytics storage not configured"

        try:
            keys = [counter_key(event_type, day) for day in days]
            result = self.supabase.table(self.table).select("key, count").in_("key", keys).execute()

            found: Dict[str, int] = {row["key"]: int(row.get("count") or 0) for row in (result.data or [])}
            return [UsageCounter(key=key, count=found.get(key, 0)) for key in keys], None

        except Exception as e:
            return [], str(e)

def get_analytics_service() -> AnalyticsService:
    return AnalyticsService()
