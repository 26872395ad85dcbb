"""Email sender."""

from typing import ClassVar

from emergency_dispatch.enums import ChannelKind
from emergency_dispatch.models import Alert, EmailPayload
from emergency_dispatch.senders.base import RecipientSender


class EmailSender(RecipientSender):
    channel: ClassVar[ChannelKind] = ChannelKind.EMAIL
    label: ClassVar[str] = "Email"
    recipient_noun: ClassVar[str] = "recipients"

    def title(self, alert: Alert) -> str | None:
        if isinstance(alert.payload, EmailPayload):
            return alert.payload.subject
        return None
