from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from bookings.domain.entities.status import Role


class Action(str, Enum):
    PAY = "pay"
    REVIEW = "review"
    EDIT_DETAILS = "edit_details"
    REQUEST_RESCHEDULE = "request_reschedule"
    CANCEL = "cancel"
    COMPLETE_SERVICE = "complete_service"
    PRINT = "print"


@dataclass(frozen=True)
class Viewer:
    role: Role
    user_id: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.role, Role):
            object.__setattr__(self, "role", Role(str(self.role).strip().lower()))


@dataclass(frozen=True)
class ActionDecision:
    permitted: frozenset[Action]
    refusals: dict[Action, str] = field(default_factory=dict)  # action -> error code

    def allows(self, action: Action) -> bool:
        return action in self.permitted
