"""
Tests for schedule rules and status presentation.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from bookings.application.utils.schedule_rules import (
    hours_until,
    is_pending_expired,
    needs_reminder,
)
from bookings.application.utils.status_presentation import describe_status, status_notices
from bookings.domain.entities.appointment import Appointment
from bookings.domain.entities.status import AppointmentStatus

S = AppointmentStatus

NOW = datetime(2024, 5, 10, 8, 0, tzinfo=timezone.utc)


def make_appointment(status: AppointmentStatus, **overrides) -> Appointment:
    fields = {"id": "appt-3", "status": status, "created_at": NOW - timedelta(hours=2)}
    fields.update(overrides)
    return Appointment(**fields)


def test_hours_until():
    assert hours_until(NOW + timedelta(hours=36), NOW) == 36
    assert hours_until(NOW - timedelta(hours=1), NOW) == -1
    assert hours_until(None, NOW) is None


def test_pending_expires_after_a_day_without_response():
    fresh = make_appointment(S.PENDING)
    assert not is_pending_expired(fresh, NOW)

    stale = make_appointment(S.PENDING, created_at=NOW - timedelta(hours=25))
    assert is_pending_expired(stale, NOW)

    confirmed = make_appointment(S.CONFIRMED, created_at=NOW - timedelta(hours=25))
    assert not is_pending_expired(confirmed, NOW)


def test_reminder_window():
    due = make_appointment(S.CONFIRMED, scheduled_at=NOW + timedelta(hours=24, minutes=30))
    assert needs_reminder(due, NOW)

    too_far = make_appointment(S.CONFIRMED, scheduled_at=NOW + timedelta(hours=30))
    assert not needs_reminder(too_far, NOW)

    unconfirmed = make_appointment(S.PENDING, scheduled_at=NOW + timedelta(hours=24))
    assert not needs_reminder(unconfirmed, NOW)


def test_describe_status():
    presentation = describe_status("cancelled_by_provider")
    assert presentation.label == "Cancelled by Provider"
    assert presentation.badge == "danger"
    assert presentation.is_terminal
    assert presentation.is_cancelled

    disputed = describe_status(S.DISPUTED)
    assert not disputed.is_terminal
    assert not disputed.is_cancelled


def test_every_status_has_a_presentation():
    for status in AppointmentStatus:
        presentation = describe_status(status)
        assert presentation.label
        assert presentation.icon.startswith("fas ")


def test_notices_include_cancellation_policy():
    open_notices = status_notices(S.CONFIRMED, can_cancel=True)
    assert open_notices[-1].text == "Free cancellation up to 24 hours before appointment"

    closed_notices = status_notices(S.PENDING, can_cancel=False, window_hours=48)
    assert closed_notices[-1].text == "Cancellation period has passed (48-hour policy)"

    assert status_notices(S.CLOSED, can_cancel=False) == ()
