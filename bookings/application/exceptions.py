from __future__ import annotations

from bookings.domain.entities.action import Action


class LifecycleError(RuntimeError):
    """Base class for appointment lifecycle errors. Never retried."""

    code = "lifecycle_error"


class InvalidTransition(LifecycleError):
    """Raised when a trigger does not lead anywhere from the current status."""

    code = "invalid_transition"

    def __init__(self, current, attempted, trigger=None) -> None:
        self.current = current
        self.attempted = attempted
        self.trigger = trigger
        current_value = getattr(current, "value", current)
        attempted_value = getattr(attempted, "value", attempted)
        if attempted is None:
            message = f"Unknown trigger {trigger!r} for status {current_value!r}."
        else:
            message = f"Invalid transition: {current_value} -> {attempted_value}"
        super().__init__(message)


class ActionNotPermitted(LifecycleError):
    """Raised when an action is requested outside its eligibility window."""

    code = "action_not_permitted"

    def __init__(self, action, status, reason: str) -> None:
        self.action = action
        self.status = status
        self.reason = reason
        super().__init__(
            f"Action {getattr(action, 'value', action)!r} not permitted "
            f"in status {getattr(status, 'value', status)!r}: {reason}"
        )


class CancellationWindowClosed(ActionNotPermitted):
    """Raised when cancellation is attempted too close to the scheduled time."""

    code = "cancellation_window_closed"

    def __init__(self, status, hours_remaining: float | None, window_hours: float) -> None:
        self.hours_remaining = hours_remaining
        self.window_hours = window_hours
        if hours_remaining is None:
            reason = "appointment has no scheduled time"
        else:
            reason = (
                f"{hours_remaining:.1f}h before the appointment, "
                f"cancellation closes {window_hours:g}h before"
            )
        super().__init__(Action.CANCEL, status, reason)


class MalformedAppointment(LifecycleError):
    """Raised when an appointment record cannot be evaluated even with inference."""

    code = "malformed_appointment"

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)
