from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from bookings.domain.entities.status import AppointmentStatus


@dataclass(frozen=True)
class Invoice:
    payment_status: str = "pending"  # "pending" | "paid"
    amount: float | None = None

    @property
    def is_unpaid(self) -> bool:
        return self.payment_status == "pending"


@dataclass(frozen=True)
class Appointment:
    id: str
    status: AppointmentStatus
    created_at: datetime
    scheduled_at: datetime | None = None  # appointment date + time
    confirmed_at: datetime | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None
    reviewed_at: datetime | None = None
    cancellation_reason: str | None = None
    invoice: Invoice | None = None
    provider_rating: float | None = None
    quote_id: str | None = None
    client_id: str | None = None
    provider_id: str | None = None

    def __post_init__(self) -> None:
        # Plain strings are accepted for status; None is left for validation to report.
        if isinstance(self.status, str) and not isinstance(self.status, AppointmentStatus):
            object.__setattr__(self, "status", AppointmentStatus.parse(self.status))


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
