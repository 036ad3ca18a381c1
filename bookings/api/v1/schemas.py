from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from bookings.domain.entities.action import Action
from bookings.domain.entities.status import Role


class InvoiceSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    payment_status: str = "pending"
    amount: float | None = None


class AppointmentSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str | None = None
    status: str | None = None
    created_at: datetime | None = None
    scheduled_at: datetime | None = None
    confirmed_at: datetime | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None
    reviewed_at: datetime | None = None
    cancellation_reason: str | None = None
    invoice: InvoiceSchema | None = None
    provider_rating: float | None = None
    quote_id: str | None = None
    client_id: str | None = None
    provider_id: str | None = None


class ViewerSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    role: Role = Role.CLIENT
    user_id: str | None = None


class ActionsRequestSchema(BaseModel):
    appointment: AppointmentSchema
    viewer: ViewerSchema = Field(default_factory=ViewerSchema)


class ActionCheckRequestSchema(ActionsRequestSchema):
    action: Action


class ActionCheckResponseSchema(BaseModel):
    appointment_id: str
    action: str
    permitted: bool


class NoticeSchema(BaseModel):
    icon: str
    text: str


class StatusSchema(BaseModel):
    status: str
    label: str
    badge: str
    icon: str
    is_terminal: bool
    is_cancelled: bool
    triggers: list[str] = Field(default_factory=list)


class ActionsResponseSchema(BaseModel):
    appointment_id: str
    status: StatusSchema
    actions: list[str]
    refusals: dict[str, str] = Field(default_factory=dict)
    notices: list[NoticeSchema] = Field(default_factory=list)
    reminder_due: bool = False
    pending_expired: bool = False


class TimelineRequestSchema(BaseModel):
    appointment: AppointmentSchema


class TimelineEventSchema(BaseModel):
    ordinal: int
    status: str
    title: str
    description: str
    timestamp: datetime
    completed: bool
    icon: str
    color: str
    inferred: bool


class TimelineResponseSchema(BaseModel):
    appointment_id: str
    events: list[TimelineEventSchema]


class TransitionRequestSchema(BaseModel):
    current: str
    trigger: str
    actor: Role | None = None


class SideEffectSchema(BaseModel):
    kind: str
    recipient: str


class TransitionResponseSchema(BaseModel):
    previous: str
    status: str
    trigger: str
    side_effects: list[SideEffectSchema] = Field(default_factory=list)


class ErrorSchema(BaseModel):
    code: str
    message: str
    meta: dict[str, str | None] = Field(default_factory=dict)
