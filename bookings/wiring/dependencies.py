from datetime import timedelta
from functools import lru_cache

from bookings.application.ports.clock import ClockPort
from bookings.core.config import settings
from bookings.domain.entities.policy import LifecyclePolicy
from bookings.infrastructure.clock.system_clock import SystemClock


@lru_cache
def get_policy() -> LifecyclePolicy:
    return LifecyclePolicy(
        cancellation_window=timedelta(hours=settings.CANCELLATION_WINDOW_HOURS),
        confirmation_estimate=timedelta(hours=settings.CONFIRMATION_ESTIMATE_HOURS),
        pending_expiry=timedelta(hours=settings.PENDING_EXPIRY_HOURS),
        reminder_lead=timedelta(hours=settings.REMINDER_LEAD_HOURS),
        reminder_tolerance=timedelta(hours=settings.REMINDER_TOLERANCE_HOURS),
    )


def get_clock() -> ClockPort:
    return SystemClock()
