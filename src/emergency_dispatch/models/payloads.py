"""Channel-specific alert payloads."""

from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, computed_field, field_validator

from emergency_dispatch.enums import AuthorityKind, ChannelKind

DEFAULT_EMAIL_SUBJECT = "EMERGENCY ALERT"
DEFAULT_PUSH_TITLE = "\N{POLICE CARS REVOLVING LIGHT} EMERGENCY"
MIN_SEVERITY = 1
MAX_SEVERITY = 5

# Every authority kind is reached through the same public emergency line.
EMERGENCY_NUMBERS: dict[str, str] = {
    AuthorityKind.POLICE: "911",
    AuthorityKind.FIRE: "911",
    AuthorityKind.MEDICAL: "911",
}


def _ordered_unique(values: list[Any]) -> list[Any]:
    return list(dict.fromkeys(values))


class _Payload(BaseModel):
    model_config = ConfigDict(validate_assignment=True, extra="forbid")


class SMSPayload(_Payload):
    phone_numbers: list[str] = []

    @field_validator("phone_numbers", mode="after")
    @classmethod
    def _dedupe(cls, value: list[str]) -> list[str]:
        return _ordered_unique(value)

    def add_phone_number(self, phone: str) -> None:
        self.phone_numbers = [*self.phone_numbers, phone]


class EmailPayload(_Payload):
    addresses: list[EmailStr] = []
    subject: str = DEFAULT_EMAIL_SUBJECT

    @field_validator("addresses", mode="after")
    @classmethod
    def _dedupe(cls, value: list[str]) -> list[str]:
        return _ordered_unique(value)


class AuthorityPayload(_Payload):
    authority_kind: AuthorityKind
    severity: int = MAX_SEVERITY

    @field_validator("severity", mode="after")
    @classmethod
    def _clamp_severity(cls, value: int) -> int:
        # Out-of-range severities are treated as the most severe, not rejected.
        if MIN_SEVERITY <= value <= MAX_SEVERITY:
            return value
        return MAX_SEVERITY

    @computed_field  # type: ignore[prop-decorator]
    @property
    def emergency_number(self) -> str:
        return EMERGENCY_NUMBERS[self.authority_kind]


class PushPayload(_Payload):
    device_tokens: list[str] = []
    title: str = DEFAULT_PUSH_TITLE

    @field_validator("device_tokens", mode="after")
    @classmethod
    def _dedupe(cls, value: list[str]) -> list[str]:
        return _ordered_unique(value)


AnyPayload = SMSPayload | EmailPayload | AuthorityPayload | PushPayload

PAYLOAD_TYPES: dict[str, type[_Payload]] = {
    ChannelKind.SMS: SMSPayload,
    ChannelKind.EMAIL: EmailPayload,
    ChannelKind.AUTHORITY: AuthorityPayload,
    ChannelKind.PUSH: PushPayload,
}
