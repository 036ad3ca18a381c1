"""
Tests for timeline reconstruction from appointment records.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from bookings.application.exceptions import MalformedAppointment
from bookings.application.use_cases.timeline import reconstruct
from bookings.domain.entities.appointment import Appointment
from bookings.domain.entities.policy import LifecyclePolicy
from bookings.domain.entities.status import AppointmentStatus

S = AppointmentStatus

CREATED = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
SCHEDULED = datetime(2024, 3, 4, 14, 0, tzinfo=timezone.utc)
NOW = datetime(2024, 3, 10, 18, 30, tzinfo=timezone.utc)


def make_appointment(status: AppointmentStatus, **overrides) -> Appointment:
    fields = {"id": "appt-7", "status": status, "created_at": CREATED, "scheduled_at": SCHEDULED}
    fields.update(overrides)
    return Appointment(**fields)


def statuses(events) -> list[str]:
    return [event.status for event in events]


def test_pending_has_only_creation_event():
    events = reconstruct(make_appointment(S.PENDING), NOW)
    assert statuses(events) == ["created"]
    assert events[0].timestamp == CREATED
    assert events[0].description == "Direct booking request submitted"
    assert events[0].inferred is False


def test_completed_without_optional_timestamps():
    events = reconstruct(make_appointment(S.COMPLETED), NOW)

    assert statuses(events) == ["created", "confirmed", "started", "completed"]
    assert [event.ordinal for event in events] == [1, 2, 3, 4]
    assert all(event.completed for event in events)
    timestamps = [event.timestamp for event in events]
    assert timestamps == sorted(timestamps)

    assert events[1].timestamp == CREATED + timedelta(hours=2)
    assert events[1].inferred is True
    assert events[2].timestamp == SCHEDULED
    assert events[3].timestamp == NOW


def test_recorded_timestamps_win_over_estimates():
    confirmed = CREATED + timedelta(minutes=30)
    started = SCHEDULED + timedelta(minutes=5)
    completed = SCHEDULED + timedelta(hours=2)
    events = reconstruct(
        make_appointment(S.COMPLETED, confirmed_at=confirmed, started_at=started, completed_at=completed),
        NOW,
    )
    assert [event.timestamp for event in events] == [CREATED, confirmed, started, completed]
    assert not any(event.inferred for event in events)


def test_confirmation_estimate_follows_policy():
    policy = LifecyclePolicy(confirmation_estimate=timedelta(hours=6))
    events = reconstruct(make_appointment(S.CONFIRMED), NOW, policy)
    assert events[1].timestamp == CREATED + timedelta(hours=6)


def test_estimate_never_lands_after_a_recorded_later_stage():
    started = CREATED + timedelta(hours=1)
    events = reconstruct(make_appointment(S.IN_PROGRESS, started_at=started), NOW)
    assert statuses(events) == ["created", "confirmed", "started"]
    assert events[1].timestamp == started
    timestamps = [event.timestamp for event in events]
    assert timestamps == sorted(timestamps)


def test_estimate_never_lands_before_a_recorded_earlier_stage():
    confirmed = SCHEDULED + timedelta(hours=1)
    events = reconstruct(make_appointment(S.IN_PROGRESS, confirmed_at=confirmed), NOW)
    assert statuses(events) == ["created", "confirmed", "started"]
    assert events[2].inferred is True
    assert events[2].timestamp == confirmed


def test_clamping_leaves_recorded_timestamps_untouched():
    started = CREATED + timedelta(hours=1)
    appointment = make_appointment(S.COMPLETED, started_at=started, completed_at=started + timedelta(hours=3))
    first = reconstruct(appointment, NOW)
    assert first == reconstruct(appointment, NOW)
    assert [event.inferred for event in first] == [False, True, False, False]
    assert first[2].timestamp == started
    assert first[1].timestamp == started


def test_statuses_past_completion_add_no_events():
    events = reconstruct(make_appointment(S.INVOICE_SENT), NOW)
    assert statuses(events) == ["created", "confirmed", "started", "completed"]


def test_review_event_requires_rating():
    unrated = reconstruct(make_appointment(S.REVIEWED), NOW)
    assert "reviewed" not in statuses(unrated)

    reviewed_at = NOW - timedelta(days=1)
    rated = reconstruct(make_appointment(S.PAID, provider_rating=4, reviewed_at=reviewed_at), NOW)
    assert statuses(rated)[-1] == "reviewed"
    assert rated[-1].description == "You rated this service 4 stars"
    assert rated[-1].timestamp == reviewed_at


def test_cancelled_by_client_jumps_from_creation():
    cancelled_at = CREATED + timedelta(days=1)
    events = reconstruct(
        make_appointment(
            S.CANCELLED_BY_CLIENT,
            confirmed_at=CREATED + timedelta(hours=1),
            cancelled_at=cancelled_at,
            cancellation_reason="Schedule conflict",
        ),
        NOW,
    )
    assert statuses(events) == ["created", "cancelled"]
    assert events[1].title == "Cancelled by Client"
    assert events[1].description == "Schedule conflict"
    assert events[1].timestamp == cancelled_at
    assert events[1].color == "danger"


def test_cancelled_by_provider_uses_generic_message():
    events = reconstruct(make_appointment(S.CANCELLED_BY_PROVIDER), NOW)
    assert events[1].title == "Cancelled by Provider"
    assert events[1].description == "Appointment was cancelled"
    assert events[1].timestamp == NOW
    assert events[1].inferred is True


def test_no_show_and_dispute_events():
    no_show = reconstruct(make_appointment(S.NO_SHOW), NOW)
    assert statuses(no_show) == ["created", "no_show"]

    disputed = reconstruct(make_appointment(S.DISPUTED, started_at=SCHEDULED), NOW)
    assert statuses(disputed) == ["created", "disputed"]
    assert disputed[1].timestamp == NOW


def test_quote_origin_in_creation_description():
    events = reconstruct(make_appointment(S.PENDING, quote_id="42"), NOW)
    assert events[0].description == "Created from Quote #42"


def test_reconstruct_is_idempotent():
    appointment = make_appointment(S.PAID, provider_rating=5)
    assert reconstruct(appointment, NOW) == reconstruct(appointment, NOW)


def test_start_without_any_time_source_is_malformed():
    with pytest.raises(MalformedAppointment) as exc_info:
        reconstruct(make_appointment(S.IN_PROGRESS, scheduled_at=None), NOW)
    assert exc_info.value.field == "started_at"


def test_stage_before_creation_is_malformed():
    with pytest.raises(MalformedAppointment):
        reconstruct(make_appointment(S.CONFIRMED, confirmed_at=CREATED - timedelta(hours=1)), NOW)


def test_naive_timestamps_are_treated_as_utc():
    naive = make_appointment(S.PENDING, created_at=datetime(2024, 3, 1, 9, 0))
    events = reconstruct(naive, NOW)
    assert events[0].timestamp == CREATED
