"""Alert variant model: location, channel payloads and the Alert record."""

from emergency_dispatch.models.alert import (
    Alert,
    authority_alert,
    email_alert,
    make_alert_id,
    push_alert,
    sms_alert,
)
from emergency_dispatch.models.contact import Contact
from emergency_dispatch.models.location import Location
from emergency_dispatch.models.payloads import (
    PAYLOAD_TYPES,
    AnyPayload,
    AuthorityPayload,
    EmailPayload,
    PushPayload,
    SMSPayload,
)

__all__ = [
    "Alert",
    "AnyPayload",
    "AuthorityPayload",
    "Contact",
    "EmailPayload",
    "Location",
    "PAYLOAD_TYPES",
    "PushPayload",
    "SMSPayload",
    "authority_alert",
    "email_alert",
    "make_alert_id",
    "push_alert",
    "sms_alert",
]
