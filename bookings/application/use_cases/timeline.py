from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from bookings.application.exceptions import MalformedAppointment
from bookings.application.use_cases.state_machine import success_path
from bookings.application.utils.appointment_payload import validate_appointment
from bookings.domain.entities.appointment import Appointment, as_utc
from bookings.domain.entities.policy import DEFAULT_POLICY, LifecyclePolicy
from bookings.domain.entities.status import AppointmentStatus
from bookings.domain.entities.timeline_event import TimelineEvent

S = AppointmentStatus

# event status -> (title, icon, color)
EVENT_STYLES: dict[str, tuple[str, str, str]] = {
    "created": ("Appointment Requested", "fas fa-plus-circle", "primary"),
    "confirmed": ("Appointment Confirmed", "fas fa-check-circle", "success"),
    "started": ("Service Started", "fas fa-play-circle", "primary"),
    "completed": ("Service Completed", "fas fa-check-double", "info"),
    "reviewed": ("Review Submitted", "fas fa-star", "warning"),
    "cancelled": ("Appointment Cancelled", "fas fa-times-circle", "danger"),
    "no_show": ("Marked as No-Show", "fas fa-user-slash", "dark"),
    "disputed": ("Dispute Raised", "fas fa-exclamation-triangle", "warning"),
}

# Success-path status -> event it contributes. Later statuses add nothing.
_PATH_EVENTS = {
    S.PENDING: "created",
    S.CONFIRMED: "confirmed",
    S.IN_PROGRESS: "started",
    S.COMPLETED: "completed",
}

_CANCELLED_TITLES = {
    S.CANCELLED_BY_CLIENT: "Cancelled by Client",
    S.CANCELLED_BY_PROVIDER: "Cancelled by Provider",
}


@dataclass(frozen=True)
class _Entry:
    status: str
    description: str
    timestamp: datetime
    inferred: bool
    title: str | None = None


class _Builder:
    def __init__(self) -> None:
        self._entries: list[_Entry] = []

    def add(
        self,
        status: str,
        description: str,
        timestamp: datetime,
        inferred: bool,
        title: str | None = None,
    ) -> None:
        self._entries.append(_Entry(status, description, as_utc(timestamp), inferred, title))

    def _clamped(self) -> list[_Entry]:
        # Estimates sit between the recorded timestamps around them.
        entries: list[_Entry] = []
        ceiling: datetime | None = None
        for entry in reversed(self._entries):
            if not entry.inferred:
                ceiling = entry.timestamp if ceiling is None else min(ceiling, entry.timestamp)
            elif ceiling is not None and entry.timestamp > ceiling:
                entry = replace(entry, timestamp=ceiling)
            entries.append(entry)
        entries.reverse()

        floor: datetime | None = None
        for index, entry in enumerate(entries):
            if entry.inferred and floor is not None and entry.timestamp < floor:
                entries[index] = entry = replace(entry, timestamp=floor)
            floor = entry.timestamp if floor is None else max(floor, entry.timestamp)
        return entries

    def build(self) -> tuple[TimelineEvent, ...]:
        events: list[TimelineEvent] = []
        for ordinal, entry in enumerate(self._clamped(), start=1):
            default_title, icon, color = EVENT_STYLES[entry.status]
            events.append(
                TimelineEvent(
                    ordinal=ordinal,
                    status=entry.status,
                    title=entry.title or default_title,
                    description=entry.description,
                    timestamp=entry.timestamp,
                    completed=True,
                    icon=icon,
                    color=color,
                    inferred=entry.inferred,
                )
            )
        return tuple(events)


def _stamp(recorded: datetime | None, fallback: datetime | None) -> tuple[datetime | None, bool]:
    if recorded is not None:
        return recorded, False
    return fallback, True


def _created_description(appointment: Appointment) -> str:
    if appointment.quote_id:
        return f"Created from Quote #{appointment.quote_id}"
    return "Direct booking request submitted"


def _rating_text(rating: float) -> str:
    return f"{rating:g}"


def reconstruct(
    appointment: Appointment,
    now: datetime,
    policy: LifecyclePolicy = DEFAULT_POLICY,
) -> tuple[TimelineEvent, ...]:
    """
    Derive the ordered lifecycle history of an appointment.

    Walks the success path from pending to the current status, filling
    missing timestamps from the inference policy. Cancelled, no-show and
    disputed appointments get the creation event followed by the closing
    event. Pure: the same record and `now` always give the same events.
    """
    validate_appointment(appointment)
    builder = _Builder()
    created_at = as_utc(appointment.created_at)
    builder.add("created", _created_description(appointment), created_at, inferred=False)

    status = appointment.status
    if status in _CANCELLED_TITLES or status is S.NO_SHOW:
        timestamp, inferred = _stamp(appointment.cancelled_at, now)
        if status is S.NO_SHOW:
            description = appointment.cancellation_reason or "Client did not attend the appointment"
            builder.add("no_show", description, timestamp, inferred)
        else:
            description = appointment.cancellation_reason or "Appointment was cancelled"
            builder.add("cancelled", description, timestamp, inferred, title=_CANCELLED_TITLES[status])
        return builder.build()

    if status is S.DISPUTED:
        builder.add("disputed", "A dispute was raised on this appointment", now, inferred=True)
        return builder.build()

    for step in success_path(status)[1:]:
        event = _PATH_EVENTS.get(step)
        if event == "confirmed":
            timestamp, inferred = _stamp(appointment.confirmed_at, created_at + policy.confirmation_estimate)
            builder.add("confirmed", "Provider confirmed your appointment", timestamp, inferred)
        elif event == "started":
            timestamp, inferred = _stamp(appointment.started_at, appointment.scheduled_at)
            if timestamp is None:
                raise MalformedAppointment(
                    "Cannot place the service start: started_at and scheduled_at are both missing.",
                    field="started_at",
                )
            builder.add("started", "Provider started the service", timestamp, inferred)
        elif event == "completed":
            timestamp, inferred = _stamp(appointment.completed_at, now)
            builder.add("completed", "Service has been successfully completed", timestamp, inferred)

    if appointment.provider_rating is not None and S.COMPLETED in success_path(status):
        timestamp, inferred = _stamp(appointment.reviewed_at, now)
        builder.add(
            "reviewed",
            f"You rated this service {_rating_text(appointment.provider_rating)} stars",
            timestamp,
            inferred,
        )

    return builder.build()
