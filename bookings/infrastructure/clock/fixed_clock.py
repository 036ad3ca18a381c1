from __future__ import annotations

from datetime import datetime

from bookings.application.ports.clock import ClockPort
from bookings.domain.entities.appointment import as_utc


class FixedClock(ClockPort):
    """Clock pinned to a given instant; used for tests and replays."""

    def __init__(self, instant: datetime) -> None:
        self._instant = as_utc(instant)

    def now(self) -> datetime:
        return self._instant
