from __future__ import annotations

import logging
from dataclasses import dataclass

from bookings.application.exceptions import InvalidTransition
from bookings.application.use_cases.side_effects import required_side_effects
from bookings.domain.entities.side_effect import SideEffect
from bookings.domain.entities.status import (
    SUCCESS_PATH,
    AppointmentStatus,
    Role,
    Trigger,
)

logger = logging.getLogger(__name__)

S = AppointmentStatus

TRIGGER_TARGETS: dict[Trigger, AppointmentStatus] = {
    Trigger.PROVIDER_CONFIRMS: S.CONFIRMED,
    Trigger.CLIENT_CANCELS: S.CANCELLED_BY_CLIENT,
    Trigger.PROVIDER_CANCELS: S.CANCELLED_BY_PROVIDER,
    Trigger.CLIENT_FAILS_TO_APPEAR: S.NO_SHOW,
    Trigger.PROVIDER_STARTS_SERVICE: S.IN_PROGRESS,
    Trigger.PROVIDER_MARKS_SERVICE_DONE: S.COMPLETED,
    Trigger.INVOICE_DISPATCHED: S.INVOICE_SENT,
    Trigger.CLIENT_INITIATES_PAYMENT: S.PAYMENT_PENDING,
    Trigger.PAYMENT_GATEWAY_CONFIRMS: S.PAID,
    Trigger.CLIENT_SUBMITS_RATING: S.REVIEWED,
    Trigger.LIFECYCLE_FINALIZED: S.CLOSED,
    Trigger.CLIENT_RAISES_DISPUTE: S.DISPUTED,
    Trigger.PROVIDER_RAISES_DISPUTE: S.DISPUTED,
}

_EXPLICIT_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    S.PENDING: frozenset({S.CONFIRMED, S.CANCELLED_BY_CLIENT, S.CANCELLED_BY_PROVIDER, S.NO_SHOW}),
    S.CONFIRMED: frozenset({S.IN_PROGRESS, S.CANCELLED_BY_CLIENT, S.CANCELLED_BY_PROVIDER}),
    S.IN_PROGRESS: frozenset({S.COMPLETED}),
    S.COMPLETED: frozenset({S.INVOICE_SENT}),
    S.INVOICE_SENT: frozenset({S.PAYMENT_PENDING}),
    S.PAYMENT_PENDING: frozenset({S.PAID}),
    S.PAID: frozenset({S.REVIEWED}),
    S.REVIEWED: frozenset({S.CLOSED}),
}


def _build_transitions() -> dict[AppointmentStatus, frozenset[AppointmentStatus]]:
    table: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {}
    for status in AppointmentStatus:
        targets = set(_EXPLICIT_TRANSITIONS.get(status, frozenset()))
        # Any open appointment can be disputed, once.
        if not status.is_terminal and status is not S.DISPUTED:
            targets.add(S.DISPUTED)
        table[status] = frozenset(targets)
    return table


TRANSITIONS = _build_transitions()


@dataclass(frozen=True)
class TransitionOutcome:
    previous: AppointmentStatus
    status: AppointmentStatus
    trigger: Trigger
    side_effects: tuple[SideEffect, ...] = ()

    @property
    def requires_invoice(self) -> bool:
        return any(effect.kind == "create_invoice" for effect in self.side_effects)


# Longer wordings accepted for the same trigger.
TRIGGER_ALIASES: dict[str, Trigger] = {
    "client fails to appear at scheduled time": Trigger.CLIENT_FAILS_TO_APPEAR,
    "client no show": Trigger.CLIENT_FAILS_TO_APPEAR,
}

# Wordings that name no party; the acting role picks the concrete trigger.
PARTY_TRIGGERS: dict[str, dict[Role, Trigger]] = {
    "either party cancels": {
        Role.CLIENT: Trigger.CLIENT_CANCELS,
        Role.PROVIDER: Trigger.PROVIDER_CANCELS,
    },
    "either party raises a dispute": {
        Role.CLIENT: Trigger.CLIENT_RAISES_DISPUTE,
        Role.PROVIDER: Trigger.PROVIDER_RAISES_DISPUTE,
    },
}


def _normalize(value: object) -> str:
    return " ".join(str(value or "").lower().replace("_", " ").replace("-", " ").split())


def parse_trigger(trigger: str | Trigger, actor: str | Role | None = None) -> Trigger | None:
    """
    Resolve a trigger wording to a Trigger.
    Party-neutral wordings ("either party cancels") need `actor`; without
    one, or with a role that has no such trigger, None is returned.
    """
    if isinstance(trigger, Trigger):
        return trigger
    normalized = _normalize(trigger)
    if normalized in TRIGGER_ALIASES:
        return TRIGGER_ALIASES[normalized]
    if normalized in PARTY_TRIGGERS:
        if actor is None:
            return None
        role = actor if isinstance(actor, Role) else Role(_normalize(actor))
        return PARTY_TRIGGERS[normalized].get(role)
    try:
        return Trigger(normalized)
    except ValueError:
        return None


def trigger_target(trigger: str | Trigger) -> AppointmentStatus | None:
    parsed = parse_trigger(trigger)
    if parsed is None:
        return None
    return TRIGGER_TARGETS[parsed]


def allowed_targets(current: str | AppointmentStatus) -> frozenset[AppointmentStatus]:
    return TRANSITIONS[AppointmentStatus.parse(current)]


def can_transition(current: str | AppointmentStatus, target: str | AppointmentStatus) -> bool:
    return AppointmentStatus.parse(target) in allowed_targets(current)


def available_triggers(current: str | AppointmentStatus) -> tuple[Trigger, ...]:
    targets = allowed_targets(current)
    return tuple(trigger for trigger in Trigger if TRIGGER_TARGETS[trigger] in targets)


def transition(
    current: str | AppointmentStatus,
    trigger: str | Trigger,
    actor: str | Role | None = None,
) -> TransitionOutcome:
    """
    Decide the status an appointment moves to when `trigger` fires.
    Performs no side effects: the caller commits the new status and runs
    the returned side effects (invoice creation, notifications).
    `actor` is only consulted for party-neutral trigger wordings.
    """
    source = AppointmentStatus.parse(current)
    parsed = parse_trigger(trigger, actor)
    if parsed is None:
        reason = "actor_required" if _normalize(trigger) in PARTY_TRIGGERS else "unknown_trigger"
        logger.info(
            "Rejected transition",
            extra={"status": source.value, "trigger": str(trigger), "reason": reason},
        )
        raise InvalidTransition(source, None, trigger)

    target = TRIGGER_TARGETS[parsed]
    if target not in TRANSITIONS[source]:
        logger.info(
            "Rejected transition",
            extra={"status": source.value, "trigger": parsed.value, "reason": f"not_from_{source.value}"},
        )
        raise InvalidTransition(source, target, parsed)

    effects = required_side_effects(source, target)
    logger.debug(
        "Transition accepted",
        extra={"status": target.value, "trigger": parsed.value},
    )
    return TransitionOutcome(previous=source, status=target, trigger=parsed, side_effects=effects)


def cancellation_trigger(role: str | Role) -> Trigger:
    """Map the cancelling party to its trigger."""
    role = Role(role)
    if role not in PARTY_TRIGGERS["either party cancels"]:
        raise ValueError(f"No cancellation trigger for role: {role.value}")
    return PARTY_TRIGGERS["either party cancels"][role]


def dispute_trigger(role: str | Role) -> Trigger:
    role = Role(role)
    if role not in PARTY_TRIGGERS["either party raises a dispute"]:
        raise ValueError(f"No dispute trigger for role: {role.value}")
    return PARTY_TRIGGERS["either party raises a dispute"][role]


def success_path(status: str | AppointmentStatus) -> tuple[AppointmentStatus, ...]:
    """Statuses from pending up to `status` inclusive; empty when off the success path."""
    status = AppointmentStatus.parse(status)
    if status not in SUCCESS_PATH:
        return ()
    return SUCCESS_PATH[: SUCCESS_PATH.index(status) + 1]
