"""
Tests for building appointments from JSON-like payloads.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from bookings.application.exceptions import MalformedAppointment
from bookings.application.utils.appointment_payload import parse_appointment
from bookings.domain.entities.status import AppointmentStatus


def test_parses_camel_case_payload():
    appointment = parse_appointment(
        {
            "id": 17,
            "status": "invoice_sent",
            "createdAt": "2024-03-01T09:00:00Z",
            "scheduledAt": "2024-03-04T14:00:00+00:00",
            "invoice": {"paymentStatus": "pending", "amount": "80.50"},
            "quoteId": 9,
            "clientId": "client-1",
        }
    )
    assert appointment.id == "17"
    assert appointment.status is AppointmentStatus.INVOICE_SENT
    assert appointment.created_at == datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
    assert appointment.invoice.is_unpaid
    assert appointment.invoice.amount == 80.5
    assert appointment.quote_id == "9"
    assert appointment.client_id == "client-1"


def test_parses_snake_case_payload():
    appointment = parse_appointment(
        {
            "id": "a1",
            "status": "PAID",
            "created_at": datetime(2024, 3, 1, 9, 0),
            "provider_rating": "4.5",
            "cancellation_reason": "   ",
        }
    )
    assert appointment.status is AppointmentStatus.PAID
    assert appointment.created_at.tzinfo is not None
    assert appointment.provider_rating == 4.5
    assert appointment.cancellation_reason is None


@pytest.mark.parametrize(
    "payload,field",
    [
        ({"id": "a1", "createdAt": "2024-03-01T09:00:00Z"}, "status"),
        ({"id": "a1", "status": "archived", "createdAt": "2024-03-01T09:00:00Z"}, "status"),
        ({"id": "a1", "status": "pending"}, "created_at"),
        ({"status": "pending", "createdAt": "2024-03-01T09:00:00Z"}, "id"),
        ({"id": "a1", "status": "pending", "createdAt": "yesterday"}, "created_at"),
        (
            {"id": "a1", "status": "confirmed", "createdAt": "2024-03-01T09:00:00Z", "confirmedAt": "2024-02-28T09:00:00Z"},
            "confirmed_at",
        ),
        ({"id": "a1", "status": "paid", "createdAt": "2024-03-01T09:00:00Z", "providerRating": 9}, "provider_rating"),
        ({"id": "a1", "status": "paid", "createdAt": "2024-03-01T09:00:00Z", "providerRating": "great"}, "provider_rating"),
        (
            {"id": "a1", "status": "invoice_sent", "createdAt": "2024-03-01T09:00:00Z", "invoice": {"paymentStatus": "refunded"}},
            "invoice",
        ),
    ],
)
def test_malformed_payloads(payload, field):
    with pytest.raises(MalformedAppointment) as exc_info:
        parse_appointment(payload)
    assert exc_info.value.field == field
    assert exc_info.value.code == "malformed_appointment"


def test_non_mapping_payload_is_malformed():
    with pytest.raises(MalformedAppointment):
        parse_appointment(["pending"])
