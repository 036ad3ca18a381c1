from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TimelineEvent:
    ordinal: int
    status: str  # "created", "confirmed", "started", "completed", "reviewed", "cancelled", "no_show", "disputed"
    title: str
    description: str
    timestamp: datetime
    completed: bool = True
    icon: str = ""
    color: str = ""
    inferred: bool = False  # timestamp estimated, not read from the record
