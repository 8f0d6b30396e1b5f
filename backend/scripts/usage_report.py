"""
Diagnostic Script: Daily generation counts

Prints the usage counters recorded by /api/analytics for the last N days.
"""

import argparse
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Load environment variables from .env
from dotenv import load_dotenv
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models.analytics import UsageEventType
from services.analytics_service import AnalyticsService


def last_days(count: int):
    now = datetime.now(timezone.utc)
    return [(now - timedelta(days=offset)).strftime('%Y-%m-%d') for offset in range(count)]


def usage_report(days: int, event_type: str) -> int:
    print("=" * 50)
    print(f"📊 Usage report: {event_type} (last {days} days)")
    print("=" * 50)

    analytics = AnalyticsService()
    counters, error = analytics.get_counters(event_type, last_days(days))
    if error:
        print(f"❌ {error}")
        return 1

    total = 0
    for counter in counters:
        day = counter.key.rsplit(':', 1)[-1]
        print(f"  {day} | {counter.count:6d}")
        total += counter.count

    print("-" * 50)
    print(f"  total      | {total:6d}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Show daily usage counters")
    parser.add_argument("--days", type=int, default=7)
    parser.add_argument("--type", default=UsageEventType.GENERATION.value)
    args = parser.parse_args()
    sys.exit(usage_report(args.days, args.type))
