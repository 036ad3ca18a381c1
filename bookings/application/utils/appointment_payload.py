from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from bookings.application.exceptions import MalformedAppointment
from bookings.domain.entities.appointment import Appointment, Invoice, as_utc
from bookings.domain.entities.status import AppointmentStatus

PAYMENT_STATUSES = ("pending", "paid")

# Stage timestamps that must not precede created_at.
STAGE_TIMESTAMP_FIELDS = (
    "confirmed_at",
    "started_at",
    "completed_at",
    "cancelled_at",
    "reviewed_at",
)


def parse_appointment(payload: Mapping[str, Any]) -> Appointment:
    """
    Build an appointment from a JSON-like mapping.
    Accepts snake_case or camelCase keys; raises MalformedAppointment
    when the record cannot be evaluated.
    """
    if not isinstance(payload, Mapping):
        raise MalformedAppointment("Appointment payload must be a mapping.")

    def pick(name: str) -> Any:
        if name in payload:
            return payload[name]
        return payload.get(_camel(name))

    raw_id = pick("id")
    if raw_id is None or str(raw_id).strip() == "":
        raise MalformedAppointment("Appointment id is required.", field="id")

    raw_status = pick("status")
    if raw_status is None or str(raw_status).strip() == "":
        raise MalformedAppointment("Appointment status is required.", field="status")
    try:
        status = AppointmentStatus.parse(raw_status)
    except ValueError:
        raise MalformedAppointment(f"Unknown appointment status: {raw_status!r}", field="status")

    created_at = parse_timestamp(pick("created_at"), "created_at")
    if created_at is None:
        raise MalformedAppointment("Appointment created_at is required.", field="created_at")

    stamps = {name: parse_timestamp(pick(name), name) for name in STAGE_TIMESTAMP_FIELDS}

    appointment = Appointment(
        id=str(raw_id),
        status=status,
        created_at=created_at,
        scheduled_at=parse_timestamp(pick("scheduled_at"), "scheduled_at"),
        cancellation_reason=_optional_text(pick("cancellation_reason")),
        invoice=_parse_invoice(pick("invoice")),
        provider_rating=_parse_rating(pick("provider_rating")),
        quote_id=_optional_text(pick("quote_id")),
        client_id=_optional_text(pick("client_id")),
        provider_id=_optional_text(pick("provider_id")),
        **stamps,
    )
    validate_appointment(appointment)
    return appointment


def validate_appointment(appointment: Appointment) -> None:
    if not isinstance(appointment.status, AppointmentStatus):
        raise MalformedAppointment("Appointment status is missing or unknown.", field="status")
    if not isinstance(appointment.created_at, datetime):
        raise MalformedAppointment("Appointment created_at is required.", field="created_at")
    created = as_utc(appointment.created_at)
    for name in STAGE_TIMESTAMP_FIELDS:
        value = getattr(appointment, name)
        if value is not None and as_utc(value) < created:
            raise MalformedAppointment(f"{name} precedes created_at.", field=name)
    invoice = appointment.invoice
    if invoice is not None and invoice.payment_status not in PAYMENT_STATUSES:
        raise MalformedAppointment(
            f"Unknown invoice payment status: {invoice.payment_status!r}",
            field="invoice",
        )


def parse_timestamp(value: Any, field: str) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return as_utc(datetime.fromisoformat(text))
        except ValueError:
            raise MalformedAppointment(f"Invalid timestamp for {field}: {value!r}", field=field)
    raise MalformedAppointment(f"Invalid timestamp for {field}: {value!r}", field=field)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_invoice(value: Any) -> Invoice | None:
    if value is None:
        return None
    if isinstance(value, Invoice):
        return value
    if not isinstance(value, Mapping):
        raise MalformedAppointment("Invoice must be a mapping.", field="invoice")
    payment_status = value.get("payment_status", value.get("paymentStatus"))
    payment_status = str(payment_status or "pending").strip().lower()
    if payment_status not in PAYMENT_STATUSES:
        raise MalformedAppointment(f"Unknown invoice payment status: {payment_status!r}", field="invoice")
    amount = value.get("amount")
    try:
        amount = float(amount) if amount is not None else None
    except (TypeError, ValueError):
        raise MalformedAppointment(f"Invalid invoice amount: {amount!r}", field="invoice")
    return Invoice(payment_status=payment_status, amount=amount)


def _parse_rating(value: Any) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise MalformedAppointment("Provider rating must be numeric.", field="provider_rating")
    try:
        rating = float(value)
    except (TypeError, ValueError):
        raise MalformedAppointment(f"Invalid provider rating: {value!r}", field="provider_rating")
    if not 1 <= rating <= 5:
        raise MalformedAppointment(f"Provider rating out of range: {rating:g}", field="provider_rating")
    return rating
