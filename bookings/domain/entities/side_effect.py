from dataclasses import dataclass


@dataclass(frozen=True)
class SideEffect:
    kind: str  # e.g. "create_invoice", "appointment_confirmed"
    recipient: str  # "client", "provider", "staff"
