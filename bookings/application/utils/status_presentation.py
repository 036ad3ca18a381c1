from __future__ import annotations

from dataclasses import dataclass

from bookings.domain.entities.status import AppointmentStatus

S = AppointmentStatus


@dataclass(frozen=True)
class StatusNotice:
    icon: str
    text: str


@dataclass(frozen=True)
class StatusPresentation:
    status: AppointmentStatus
    label: str
    badge: str
    icon: str
    is_terminal: bool
    is_cancelled: bool


_ICONS = {
    S.PENDING: "fas fa-hourglass-half",
    S.CONFIRMED: "fas fa-check-circle",
    S.IN_PROGRESS: "fas fa-play-circle",
    S.COMPLETED: "fas fa-check-double",
    S.INVOICE_SENT: "fas fa-file-invoice",
    S.PAYMENT_PENDING: "fas fa-credit-card",
    S.PAID: "fas fa-money-check",
    S.REVIEWED: "fas fa-star",
    S.CLOSED: "fas fa-archive",
    S.CANCELLED_BY_CLIENT: "fas fa-times-circle",
    S.CANCELLED_BY_PROVIDER: "fas fa-times-circle",
    S.NO_SHOW: "fas fa-user-slash",
    S.DISPUTED: "fas fa-exclamation-triangle",
}

_NOTICES: dict[AppointmentStatus, tuple[StatusNotice, ...]] = {
    S.PENDING: (
        StatusNotice("fas fa-hourglass-half text-warning", "Awaiting provider confirmation - you'll be notified within 24 hours"),
        StatusNotice("fas fa-edit text-info", "You can still modify or cancel this appointment"),
    ),
    S.CONFIRMED: (
        StatusNotice("fas fa-check-circle text-success", "Your appointment is confirmed and the provider has been notified"),
        StatusNotice("fas fa-phone text-info", "Provider will contact you 30 minutes before the scheduled time"),
    ),
    S.IN_PROGRESS: (
        StatusNotice("fas fa-play-circle text-primary", "Service is currently being provided"),
        StatusNotice("fas fa-clock text-warning", "Please be available for the duration of the service"),
    ),
    S.COMPLETED: (
        StatusNotice("fas fa-check-circle text-success", "Service has been completed successfully"),
        StatusNotice("fas fa-star text-warning", "Please rate your experience to help other clients"),
    ),
    S.INVOICE_SENT: (
        StatusNotice("fas fa-file-invoice text-info", "Invoice has been received - please review and make payment"),
        StatusNotice("fas fa-calendar-alt text-warning", "Payment is due within the specified timeframe"),
    ),
    S.PAYMENT_PENDING: (
        StatusNotice("fas fa-credit-card text-warning", "Payment is being processed - this may take a few minutes"),
        StatusNotice("fas fa-check-circle text-success", "You'll receive confirmation once payment is completed"),
    ),
    S.PAID: (
        StatusNotice("fas fa-check-circle text-success", "Payment has been completed successfully"),
        StatusNotice("fas fa-heart text-danger", "Thank you for using our service!"),
    ),
    S.DISPUTED: (
        StatusNotice("fas fa-exclamation-triangle text-warning", "A dispute is open - our support team will contact both parties"),
    ),
}


def describe_status(status: str | AppointmentStatus) -> StatusPresentation:
    status = AppointmentStatus.parse(status)
    return StatusPresentation(
        status=status,
        label=status.label,
        badge=status.badge,
        icon=_ICONS[status],
        is_terminal=status.is_terminal,
        is_cancelled=status.is_cancelled,
    )


def status_notices(
    status: str | AppointmentStatus,
    can_cancel: bool,
    window_hours: float = 24,
) -> tuple[StatusNotice, ...]:
    """Informational lines shown next to an appointment, policy line included."""
    status = AppointmentStatus.parse(status)
    notices = _NOTICES.get(status, ())
    if status in (S.PENDING, S.CONFIRMED):
        if can_cancel:
            policy = StatusNotice("fas fa-info-circle text-info", f"Free cancellation up to {window_hours:g} hours before appointment")
        else:
            policy = StatusNotice("fas fa-ban text-danger", f"Cancellation period has passed ({window_hours:g}-hour policy)")
        notices = notices + (policy,)
    return notices
