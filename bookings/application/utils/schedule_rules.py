from __future__ import annotations

from datetime import datetime

from bookings.domain.entities.appointment import Appointment, as_utc
from bookings.domain.entities.policy import DEFAULT_POLICY, LifecyclePolicy
from bookings.domain.entities.status import AppointmentStatus


def hours_until(scheduled_at: datetime | None, now: datetime) -> float | None:
    if scheduled_at is None:
        return None
    return (as_utc(scheduled_at) - as_utc(now)).total_seconds() / 3600


def is_within_cancellation_window(
    appointment: Appointment,
    now: datetime,
    policy: LifecyclePolicy = DEFAULT_POLICY,
) -> bool:
    """True when the appointment is more than the cancellation window away."""
    remaining = hours_until(appointment.scheduled_at, now)
    if remaining is None:
        return False
    return remaining > policy.cancellation_window.total_seconds() / 3600


def is_pending_expired(
    appointment: Appointment,
    now: datetime,
    policy: LifecyclePolicy = DEFAULT_POLICY,
) -> bool:
    """Pending requests expire when the provider has not answered in time."""
    if appointment.status is not AppointmentStatus.PENDING:
        return False
    return as_utc(appointment.created_at) + policy.pending_expiry <= as_utc(now)


def needs_reminder(
    appointment: Appointment,
    now: datetime,
    policy: LifecyclePolicy = DEFAULT_POLICY,
) -> bool:
    if appointment.status is not AppointmentStatus.CONFIRMED or appointment.scheduled_at is None:
        return False
    now = as_utc(now)
    start = now + policy.reminder_lead - policy.reminder_tolerance
    end = now + policy.reminder_lead + policy.reminder_tolerance
    return start <= as_utc(appointment.scheduled_at) <= end
