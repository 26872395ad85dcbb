"""Alert: one channel-targeted notification derived from an incident."""

import uuid
from datetime import datetime, timezone
from typing import Any, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)

from emergency_dispatch.enums import TERMINAL_STATUS, AlertStatus, AuthorityKind, ChannelKind
from emergency_dispatch.errors import InvalidPayload, InvalidStatusTransition
from emergency_dispatch.models.location import Location
from emergency_dispatch.models.payloads import (
    DEFAULT_EMAIL_SUBJECT,
    DEFAULT_PUSH_TITLE,
    MAX_SEVERITY,
    PAYLOAD_TYPES,
    AnyPayload,
    AuthorityPayload,
    EmailPayload,
    PushPayload,
    SMSPayload,
)

# channel -> (label, recipient noun) for the describe() wording
_RECIPIENT_WORDING: dict[str, tuple[str, str]] = {
    ChannelKind.SMS: ("SMS Alert", "contacts"),
    ChannelKind.EMAIL: ("Email Alert", "recipients"),
    ChannelKind.PUSH: ("Push Notification", "devices"),
}


def make_alert_id(created_at: datetime, user_id: str) -> str:
    """Build an alert id from creation time and user id.

    A short random suffix keeps ids distinct when one user raises several
    alerts within the same second.
    """
    return f"{int(created_at.timestamp())}_{user_id}_{uuid.uuid4().hex[:8]}"


class Alert(BaseModel):
    """A single notification bound to exactly one channel.

    Use :meth:`create` (or the ``*_alert`` helpers below) to build one;
    they turn validation problems into :class:`InvalidPayload`.

    ``status`` starts as ``pending`` and only moves forward through
    :meth:`mark`. :meth:`describe` reflects the current status, so call it
    after dispatch for the delivered wording; before dispatch it describes
    the intended action.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(frozen=True, min_length=1)
    user_id: str = Field(frozen=True, min_length=1)
    channel_kind: ChannelKind = Field(frozen=True)
    message: str
    created_at: datetime = Field(frozen=True)
    location: Location = Field(default_factory=Location)
    payload: AnyPayload

    _status: AlertStatus = PrivateAttr(default=AlertStatus.PENDING)

    @model_validator(mode="before")
    @classmethod
    def _prepare(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if isinstance(data.get("user_id"), str):
            data["user_id"] = data["user_id"].strip()

        created_at = data.get("created_at")
        if not isinstance(created_at, datetime):
            created_at = datetime.now(timezone.utc)
            data.setdefault("created_at", created_at)
        if not data.get("id"):
            data["id"] = make_alert_id(created_at, str(data.get("user_id", "")))

        payload = data.get("payload")
        payload_cls = PAYLOAD_TYPES.get(data.get("channel_kind", ""))
        if isinstance(payload, dict) and payload_cls is not None:
            data["payload"] = payload_cls.model_validate(payload)
        return data

    @field_validator("id", "user_id")
    @classmethod
    def _require_printable(cls, value: str) -> str:
        # Both end up on a single line of the audit log.
        if not value.strip():
            raise ValueError("must not be blank")
        if not value.isprintable():
            raise ValueError("must not contain control or line-break characters")
        return value

    @field_validator("message")
    @classmethod
    def _require_message(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("message must not be blank")
        return value

    @model_validator(mode="after")
    def _check_payload_matches_channel(self) -> Self:
        expected = PAYLOAD_TYPES[self.channel_kind]
        if not isinstance(self.payload, expected):
            raise ValueError(
                f"{self.channel_kind} alert requires {expected.__name__}, "
                f"got {type(self.payload).__name__}"
            )
        return self

    @classmethod
    def create(
        cls,
        user_id: str,
        channel_kind: ChannelKind | str,
        message: str,
        location: Location,
        payload: AnyPayload | dict[str, Any],
    ) -> Self:
        """Build an alert, raising InvalidPayload if anything is malformed."""
        try:
            return cls(
                user_id=user_id,
                channel_kind=channel_kind,
                message=message,
                location=location,
                payload=payload,
            )
        except ValidationError as exc:
            raise InvalidPayload(str(exc)) from exc

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> AlertStatus:
        return self._status

    @property
    def terminal_status(self) -> AlertStatus:
        """Status this alert reaches when its channel delivers successfully."""
        return TERMINAL_STATUS[self.channel_kind]

    @property
    def recipients(self) -> list[str]:
        match self.payload:
            case SMSPayload(phone_numbers=numbers):
                return list(numbers)
            case EmailPayload(addresses=addresses):
                return list(addresses)
            case PushPayload(device_tokens=tokens):
                return list(tokens)
            case AuthorityPayload():
                return [self.payload.emergency_number]
        return []

    def mark(self, status: AlertStatus | str) -> None:
        """Advance the status.

        Only the channel's terminal status or ``failed`` are accepted;
        going back to ``pending`` raises InvalidStatusTransition.
        """
        status = AlertStatus(status)
        if status is AlertStatus.PENDING:
            if self._status is AlertStatus.PENDING:
                return
            raise InvalidStatusTransition(
                f"Alert {self.id} cannot move from {self._status} back to pending"
            )
        if status not in (self.terminal_status, AlertStatus.FAILED):
            raise InvalidStatusTransition(
                f"{self.channel_kind} alert cannot become {status}"
            )
        self._status = status

    def set_severity(self, severity: int) -> None:
        """Set the authority severity; values outside 1-5 become 5."""
        if not isinstance(self.payload, AuthorityPayload):
            raise InvalidPayload(f"{self.channel_kind} alerts have no severity")
        try:
            self.payload.severity = severity
        except ValidationError as exc:
            raise InvalidPayload(str(exc)) from exc

    def describe(self) -> str:
        if isinstance(self.payload, AuthorityPayload):
            action = {
                AlertStatus.PENDING: "pending dispatch",
                AlertStatus.FAILED: "dispatch failed",
            }.get(self._status, "dispatched")
            return (
                f"Authority Alert - {self.payload.authority_kind} services {action} "
                f"(Severity: {self.payload.severity}/{MAX_SEVERITY})"
            )

        label, noun = _RECIPIENT_WORDING[self.channel_kind]
        verb = {
            AlertStatus.PENDING: "pending for",
            AlertStatus.FAILED: "failed for",
        }.get(self._status, "sent to")
        return f"{label} {verb} {len(self.recipients)} {noun}"

    def summary(self) -> str:
        return "\n".join(
            [
                "=== Alert Summary ===",
                f"ID: {self.id}",
                f"Type: {self.channel_kind}",
                f"Message: {self.message}",
                f"Status: {self._status}",
                f"Time: {self.created_at.isoformat()}",
                str(self.location),
            ]
        )

    def template_context(self) -> dict[str, object]:
        """Variables available to the sender body templates."""
        context: dict[str, object] = {
            "alert_id": self.id,
            "user_id": self.user_id,
            "channel": self.channel_kind,
            "message": self.message,
            **self.location.template_context(),
        }
        if isinstance(self.payload, AuthorityPayload):
            context["authority_kind"] = self.payload.authority_kind
            context["severity"] = self.payload.severity
        return context


def sms_alert(
    user_id: str, message: str, location: Location, phone_numbers: list[str]
) -> Alert:
    return Alert.create(
        user_id, ChannelKind.SMS, message, location,
        {"phone_numbers": phone_numbers},
    )


def email_alert(
    user_id: str,
    message: str,
    location: Location,
    addresses: list[str],
    subject: str = DEFAULT_EMAIL_SUBJECT,
) -> Alert:
    return Alert.create(
        user_id, ChannelKind.EMAIL, message, location,
        {"addresses": addresses, "subject": subject},
    )


def authority_alert(
    user_id: str,
    message: str,
    location: Location,
    authority_kind: AuthorityKind | str,
    severity: int = MAX_SEVERITY,
) -> Alert:
    return Alert.create(
        user_id, ChannelKind.AUTHORITY, message, location,
        {"authority_kind": authority_kind, "severity": severity},
    )


def push_alert(
    user_id: str,
    message: str,
    location: Location,
    device_tokens: list[str],
    title: str = DEFAULT_PUSH_TITLE,
) -> Alert:
    return Alert.create(
        user_id, ChannelKind.PUSH, message, location,
        {"device_tokens": device_tokens, "title": title},
    )
