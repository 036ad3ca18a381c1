from __future__ import annotations

from enum import Enum


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    INVOICE_SENT = "invoice_sent"
    PAYMENT_PENDING = "payment_pending"
    PAID = "paid"
    REVIEWED = "reviewed"
    CLOSED = "closed"
    CANCELLED_BY_CLIENT = "cancelled_by_client"
    CANCELLED_BY_PROVIDER = "cancelled_by_provider"
    NO_SHOW = "no_show"
    DISPUTED = "disputed"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def badge(self) -> str:
        return _BADGES[self]

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    @property
    def is_cancelled(self) -> bool:
        return self in CANCELLED_STATUSES

    @classmethod
    def parse(cls, value: "str | AppointmentStatus") -> "AppointmentStatus":
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


class Trigger(str, Enum):
    PROVIDER_CONFIRMS = "provider confirms"
    CLIENT_CANCELS = "client cancels"
    PROVIDER_CANCELS = "provider cancels"
    CLIENT_FAILS_TO_APPEAR = "client fails to appear"
    PROVIDER_STARTS_SERVICE = "provider starts service"
    PROVIDER_MARKS_SERVICE_DONE = "provider marks service done"
    INVOICE_DISPATCHED = "invoice created and dispatched"
    CLIENT_INITIATES_PAYMENT = "client initiates payment"
    PAYMENT_GATEWAY_CONFIRMS = "payment gateway confirms"
    CLIENT_SUBMITS_RATING = "client submits a rating"
    LIFECYCLE_FINALIZED = "lifecycle finalized"
    CLIENT_RAISES_DISPUTE = "client raises a dispute"
    PROVIDER_RAISES_DISPUTE = "provider raises a dispute"


class Role(str, Enum):
    CLIENT = "client"
    PROVIDER = "provider"
    STAFF = "staff"


INITIAL_STATUS = AppointmentStatus.PENDING

TERMINAL_STATUSES = frozenset(
    {
        AppointmentStatus.CLOSED,
        AppointmentStatus.CANCELLED_BY_CLIENT,
        AppointmentStatus.CANCELLED_BY_PROVIDER,
        AppointmentStatus.NO_SHOW,
    }
)

CANCELLED_STATUSES = frozenset(
    {
        AppointmentStatus.CANCELLED_BY_CLIENT,
        AppointmentStatus.CANCELLED_BY_PROVIDER,
    }
)

# Happy path in lifecycle order; cancellation, no-show and dispute sit off it.
SUCCESS_PATH: tuple[AppointmentStatus, ...] = (
    AppointmentStatus.PENDING,
    AppointmentStatus.CONFIRMED,
    AppointmentStatus.IN_PROGRESS,
    AppointmentStatus.COMPLETED,
    AppointmentStatus.INVOICE_SENT,
    AppointmentStatus.PAYMENT_PENDING,
    AppointmentStatus.PAID,
    AppointmentStatus.REVIEWED,
    AppointmentStatus.CLOSED,
)

_LABELS = {
    AppointmentStatus.PENDING: "Pending Confirmation",
    AppointmentStatus.CONFIRMED: "Confirmed",
    AppointmentStatus.IN_PROGRESS: "In Progress",
    AppointmentStatus.COMPLETED: "Completed",
    AppointmentStatus.INVOICE_SENT: "Invoice Sent",
    AppointmentStatus.PAYMENT_PENDING: "Payment Pending",
    AppointmentStatus.PAID: "Paid",
    AppointmentStatus.REVIEWED: "Reviewed",
    AppointmentStatus.CLOSED: "Closed",
    AppointmentStatus.CANCELLED_BY_CLIENT: "Cancelled by Client",
    AppointmentStatus.CANCELLED_BY_PROVIDER: "Cancelled by Provider",
    AppointmentStatus.NO_SHOW: "No Show",
    AppointmentStatus.DISPUTED: "Disputed",
}

_BADGES = {
    AppointmentStatus.PENDING: "warning",
    AppointmentStatus.CONFIRMED: "success",
    AppointmentStatus.IN_PROGRESS: "primary",
    AppointmentStatus.COMPLETED: "info",
    AppointmentStatus.INVOICE_SENT: "info",
    AppointmentStatus.PAYMENT_PENDING: "warning",
    AppointmentStatus.PAID: "success",
    AppointmentStatus.REVIEWED: "success",
    AppointmentStatus.CLOSED: "secondary",
    AppointmentStatus.CANCELLED_BY_CLIENT: "danger",
    AppointmentStatus.CANCELLED_BY_PROVIDER: "danger",
    AppointmentStatus.NO_SHOW: "dark",
    AppointmentStatus.DISPUTED: "warning",
}
