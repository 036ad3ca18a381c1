from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True)
class LifecyclePolicy:
    cancellation_window: timedelta = timedelta(hours=24)
    confirmation_estimate: timedelta = timedelta(hours=2)
    pending_expiry: timedelta = timedelta(hours=24)
    reminder_lead: timedelta = timedelta(hours=24)
    reminder_tolerance: timedelta = timedelta(hours=1)


DEFAULT_POLICY = LifecyclePolicy()
