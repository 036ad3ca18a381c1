from __future__ import annotations

import logging
from datetime import datetime

from bookings.application.exceptions import ActionNotPermitted, CancellationWindowClosed
from bookings.application.utils.appointment_payload import validate_appointment
from bookings.application.utils.schedule_rules import hours_until, is_within_cancellation_window
from bookings.domain.entities.action import Action, ActionDecision, Viewer
from bookings.domain.entities.appointment import Appointment
from bookings.domain.entities.policy import DEFAULT_POLICY, LifecyclePolicy
from bookings.domain.entities.status import AppointmentStatus, Role

logger = logging.getLogger(__name__)

S = AppointmentStatus

PAYABLE_STATUSES = frozenset({S.INVOICE_SENT, S.PAYMENT_PENDING})
REVIEWABLE_STATUSES = frozenset({S.COMPLETED, S.PAID})
CANCELLABLE_STATUSES = frozenset({S.PENDING, S.CONFIRMED})

CLIENT_ONLY = "client_only"
PROVIDER_ONLY = "provider_only"
STATUS_NOT_ELIGIBLE = "status_not_eligible"
NO_UNPAID_INVOICE = "no_unpaid_invoice"
ALREADY_RATED = "already_rated"
NOT_OWNER = "not_owner"
CANCELLATION_WINDOW_CLOSED = "cancellation_window_closed"


def _refusal(action: Action, appointment: Appointment, viewer: Viewer, now: datetime, policy: LifecyclePolicy) -> str | None:
    """Return None when permitted, otherwise the refusal code."""
    status = appointment.status

    if action is Action.PRINT:
        return None

    if action is Action.COMPLETE_SERVICE:
        if viewer.role is not Role.PROVIDER:
            return PROVIDER_ONLY
        return None if status is S.IN_PROGRESS else STATUS_NOT_ELIGIBLE

    if viewer.role is not Role.CLIENT:
        return CLIENT_ONLY

    if action is Action.PAY:
        if status not in PAYABLE_STATUSES:
            return STATUS_NOT_ELIGIBLE
        if appointment.invoice is None or not appointment.invoice.is_unpaid:
            return NO_UNPAID_INVOICE
        return None

    if action is Action.REVIEW:
        if status not in REVIEWABLE_STATUSES:
            return STATUS_NOT_ELIGIBLE
        return ALREADY_RATED if appointment.provider_rating is not None else None

    if action is Action.EDIT_DETAILS:
        if status is not S.PENDING:
            return STATUS_NOT_ELIGIBLE
        if appointment.client_id and viewer.user_id and appointment.client_id != viewer.user_id:
            return NOT_OWNER
        return None

    if action is Action.REQUEST_RESCHEDULE:
        return None if status is S.CONFIRMED else STATUS_NOT_ELIGIBLE

    if action is Action.CANCEL:
        if status not in CANCELLABLE_STATUSES:
            return STATUS_NOT_ELIGIBLE
        if not is_within_cancellation_window(appointment, now, policy):
            return CANCELLATION_WINDOW_CLOSED
        return None

    return STATUS_NOT_ELIGIBLE


def evaluate_actions(
    appointment: Appointment,
    viewer: Viewer,
    now: datetime,
    policy: LifecyclePolicy = DEFAULT_POLICY,
) -> ActionDecision:
    validate_appointment(appointment)
    permitted: set[Action] = set()
    refusals: dict[Action, str] = {}
    for action in Action:
        reason = _refusal(action, appointment, viewer, now, policy)
        if reason is None:
            permitted.add(action)
        else:
            refusals[action] = reason
    return ActionDecision(permitted=frozenset(permitted), refusals=refusals)


def available_actions(
    appointment: Appointment,
    viewer: Viewer,
    now: datetime,
    policy: LifecyclePolicy = DEFAULT_POLICY,
) -> frozenset[Action]:
    """
    Actions the viewer may take on the appointment right now.
    `print` is always included; the rest depend on status, role, invoice,
    rating and the time left before the scheduled start.
    """
    return evaluate_actions(appointment, viewer, now, policy).permitted


def ensure_action_permitted(
    appointment: Appointment,
    viewer: Viewer,
    action: Action,
    now: datetime,
    policy: LifecyclePolicy = DEFAULT_POLICY,
) -> None:
    validate_appointment(appointment)
    reason = _refusal(action, appointment, viewer, now, policy)
    if reason is None:
        return

    logger.info(
        "Action refused",
        extra={"appointment_id": appointment.id, "action": action.value, "reason": reason},
    )
    if reason == CANCELLATION_WINDOW_CLOSED:
        raise CancellationWindowClosed(
            appointment.status,
            hours_until(appointment.scheduled_at, now),
            policy.cancellation_window.total_seconds() / 3600,
        )
    raise ActionNotPermitted(action, appointment.status, reason)
