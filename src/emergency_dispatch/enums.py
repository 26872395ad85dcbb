from enum import StrEnum


class ChannelKind(StrEnum):
    SMS = "SMS"
    EMAIL = "Email"
    AUTHORITY = "Authority"
    PUSH = "Push"


class AlertStatus(StrEnum):
    PENDING = "pending"
    SENT = "sent"
    DISPATCHED = "dispatched"
    DELIVERED = "delivered"
    FAILED = "failed"


class AuthorityKind(StrEnum):
    POLICE = "police"
    FIRE = "fire"
    MEDICAL = "medical"


TERMINAL_STATUS: dict[str, AlertStatus] = {
    ChannelKind.SMS: AlertStatus.SENT,
    ChannelKind.EMAIL: AlertStatus.SENT,
    ChannelKind.AUTHORITY: AlertStatus.DISPATCHED,
    ChannelKind.PUSH: AlertStatus.DELIVERED,
}
