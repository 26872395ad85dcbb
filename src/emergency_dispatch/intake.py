"""Turns an incident and a contact list into one alert per target channel."""

from collections.abc import Sequence

from emergency_dispatch.enums import AuthorityKind
from emergency_dispatch.models import (
    Alert,
    Contact,
    Location,
    authority_alert,
    email_alert,
    push_alert,
    sms_alert,
)
from emergency_dispatch.models.payloads import MAX_SEVERITY


def build_incident_alerts(
    user_id: str,
    message: str,
    location: Location,
    contacts: Sequence[Contact],
    authority_kind: AuthorityKind | str,
    device_tokens: Sequence[str] = (),
    severity: int = MAX_SEVERITY,
) -> list[Alert]:
    """Build the alert set for one incident.

    SMS goes out when any contact has a phone number and email when any
    has an address. Authorities are always alerted. Push is added only
    when device tokens are supplied. Raises InvalidPayload on bad input.
    """
    phones = [c.phone for c in contacts if c.phone]
    emails = [str(c.email) for c in contacts if c.email]

    alerts: list[Alert] = []
    if phones:
        alerts.append(sms_alert(user_id, message, location, phones))
    if emails:
        alerts.append(email_alert(user_id, message, location, emails))
    alerts.append(authority_alert(user_id, message, location, authority_kind, severity))
    if device_tokens:
        alerts.append(push_alert(user_id, message, location, list(device_tokens)))
    return alerts
