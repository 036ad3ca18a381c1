from __future__ import annotations

from bookings.domain.entities.side_effect import SideEffect
from bookings.domain.entities.status import AppointmentStatus

S = AppointmentStatus

_EFFECTS: dict[tuple[AppointmentStatus, AppointmentStatus], tuple[SideEffect, ...]] = {
    (S.PENDING, S.CONFIRMED): (SideEffect("appointment_confirmed", "client"),),
    (S.PENDING, S.CANCELLED_BY_PROVIDER): (SideEffect("appointment_declined", "client"),),
    (S.CONFIRMED, S.CANCELLED_BY_PROVIDER): (SideEffect("appointment_cancelled", "client"),),
    (S.PENDING, S.CANCELLED_BY_CLIENT): (SideEffect("appointment_cancelled", "provider"),),
    (S.CONFIRMED, S.CANCELLED_BY_CLIENT): (SideEffect("appointment_cancelled", "provider"),),
    (S.PENDING, S.NO_SHOW): (SideEffect("appointment_no_show", "provider"),),
    (S.CONFIRMED, S.IN_PROGRESS): (SideEffect("appointment_started", "client"),),
    (S.IN_PROGRESS, S.COMPLETED): (
        SideEffect("appointment_completed", "client"),
        SideEffect("appointment_completed", "provider"),
    ),
    # The invoice must exist before invoice_sent is committed.
    (S.COMPLETED, S.INVOICE_SENT): (
        SideEffect("create_invoice", "provider"),
        SideEffect("invoice_generated", "client"),
    ),
    (S.PAYMENT_PENDING, S.PAID): (SideEffect("payment_received", "provider"),),
    (S.PAID, S.REVIEWED): (SideEffect("review_received", "provider"),),
}


def required_side_effects(previous: AppointmentStatus, target: AppointmentStatus) -> tuple[SideEffect, ...]:
    """Effects the caller must carry out when committing previous -> target."""
    if target is S.DISPUTED:
        return (SideEffect("dispute_opened", "staff"),)
    return _EFFECTS.get((previous, target), ())
