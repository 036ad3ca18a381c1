import logging

from fastapi import APIRouter, Depends, HTTPException

from bookings.api.v1.schemas import (
    ActionCheckRequestSchema,
    ActionCheckResponseSchema,
    ActionsRequestSchema,
    ActionsResponseSchema,
    ErrorSchema,
    NoticeSchema,
    SideEffectSchema,
    StatusSchema,
    TimelineEventSchema,
    TimelineRequestSchema,
    TimelineResponseSchema,
    TransitionRequestSchema,
    TransitionResponseSchema,
)
from bookings.application.exceptions import ActionNotPermitted, InvalidTransition, MalformedAppointment
from bookings.application.ports.clock import ClockPort
from bookings.application.use_cases.action_gate import ensure_action_permitted, evaluate_actions
from bookings.application.use_cases.state_machine import available_triggers, transition
from bookings.application.use_cases.timeline import reconstruct
from bookings.application.utils.appointment_payload import parse_appointment
from bookings.application.utils.schedule_rules import is_pending_expired, needs_reminder
from bookings.application.utils.status_presentation import describe_status, status_notices
from bookings.domain.entities.action import Action, Viewer
from bookings.domain.entities.policy import LifecyclePolicy
from bookings.domain.entities.status import AppointmentStatus
from bookings.wiring.dependencies import get_clock, get_policy

router = APIRouter()
logger = logging.getLogger(__name__)


def _error(status_code: int, exc: Exception, code: str | None = None, **meta) -> HTTPException:
    body = ErrorSchema(
        code=code or getattr(exc, "code", "bad_request"),
        message=str(exc),
        meta={key: (None if value is None else str(getattr(value, "value", value))) for key, value in meta.items()},
    )
    return HTTPException(status_code=status_code, detail=body.model_dump())


def _status_schema(status: AppointmentStatus) -> StatusSchema:
    presentation = describe_status(status)
    return StatusSchema(
        status=status.value,
        label=presentation.label,
        badge=presentation.badge,
        icon=presentation.icon,
        is_terminal=presentation.is_terminal,
        is_cancelled=presentation.is_cancelled,
        triggers=[trigger.value for trigger in available_triggers(status)],
    )


@router.get("/statuses", response_model=list[StatusSchema])
def list_statuses():
    return [_status_schema(status) for status in AppointmentStatus]


@router.post("/transitions", response_model=TransitionResponseSchema)
def request_transition(req: TransitionRequestSchema):
    try:
        outcome = transition(req.current, req.trigger, req.actor)
    except InvalidTransition as e:
        raise _error(409, e, current=e.current, attempted=e.attempted, trigger=e.trigger)
    except ValueError as e:
        raise _error(400, e, code="unknown_status")

    return TransitionResponseSchema(
        previous=outcome.previous.value,
        status=outcome.status.value,
        trigger=outcome.trigger.value,
        side_effects=[SideEffectSchema(kind=e.kind, recipient=e.recipient) for e in outcome.side_effects],
    )


@router.post("/actions", response_model=ActionsResponseSchema)
def list_actions(
    req: ActionsRequestSchema,
    clock: ClockPort = Depends(get_clock),
    policy: LifecyclePolicy = Depends(get_policy),
):
    try:
        appointment = parse_appointment(req.appointment.model_dump())
    except MalformedAppointment as e:
        logger.warning("Malformed appointment payload", extra={"reason": str(e)})
        raise _error(400, e, field=e.field)

    now = clock.now()
    viewer = Viewer(role=req.viewer.role, user_id=req.viewer.user_id)
    decision = evaluate_actions(appointment, viewer, now, policy)
    window_hours = policy.cancellation_window.total_seconds() / 3600
    notices = status_notices(appointment.status, decision.allows(Action.CANCEL), window_hours)

    logger.info(
        "Actions evaluated",
        extra={
            "appointment_id": appointment.id,
            "status": appointment.status.value,
            "role": viewer.role.value,
        },
    )
    return ActionsResponseSchema(
        appointment_id=appointment.id,
        status=_status_schema(appointment.status),
        actions=[action.value for action in Action if decision.allows(action)],
        refusals={action.value: reason for action, reason in decision.refusals.items()},
        notices=[NoticeSchema(icon=n.icon, text=n.text) for n in notices],
        reminder_due=needs_reminder(appointment, now, policy),
        pending_expired=is_pending_expired(appointment, now, policy),
    )


@router.post("/timeline", response_model=TimelineResponseSchema)
def build_timeline(
    req: TimelineRequestSchema,
    clock: ClockPort = Depends(get_clock),
    policy: LifecyclePolicy = Depends(get_policy),
):
    try:
        appointment = parse_appointment(req.appointment.model_dump())
        events = reconstruct(appointment, clock.now(), policy)
    except MalformedAppointment as e:
        logger.warning("Malformed appointment payload", extra={"reason": str(e)})
        raise _error(400, e, field=e.field)

    return TimelineResponseSchema(
        appointment_id=appointment.id,
        events=[
            TimelineEventSchema(
                ordinal=ev.ordinal,
                status=ev.status,
                title=ev.title,
                description=ev.description,
                timestamp=ev.timestamp,
                completed=ev.completed,
                icon=ev.icon,
                color=ev.color,
                inferred=ev.inferred,
            )
            for ev in events
        ],
    )


@router.post("/actions/check", response_model=ActionCheckResponseSchema)
def check_action(
    req: ActionCheckRequestSchema,
    clock: ClockPort = Depends(get_clock),
    policy: LifecyclePolicy = Depends(get_policy),
):
    try:
        appointment = parse_appointment(req.appointment.model_dump())
    except MalformedAppointment as e:
        logger.warning("Malformed appointment payload", extra={"reason": str(e)})
        raise _error(400, e, field=e.field)

    viewer = Viewer(role=req.viewer.role, user_id=req.viewer.user_id)
    try:
        ensure_action_permitted(appointment, viewer, req.action, clock.now(), policy)
    except ActionNotPermitted as e:
        raise _error(403, e, action=e.action, status=e.status, reason=e.reason)

    return ActionCheckResponseSchema(appointment_id=appointment.id, action=req.action.value, permitted=True)
