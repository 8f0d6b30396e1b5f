from pydantic import BaseModel
from typing import Optional
from enum import Enum

class UsageEventType(str, Enum):
    GENERATION = "generation"

class UsageEvent(BaseModel):
    type: str = UsageEventType.GENERATION.value
    day: Optional[str] = None  # YYYY-MM-DD, defaults to today (UTC)
    ts: Optional[int] = None   # epoch milliseconds

class UsageCounter(BaseModel):
    key: str
    count: int = 0
