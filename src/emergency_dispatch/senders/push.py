"""Push notification sender."""

from typing import ClassVar

from emergency_dispatch.enums import ChannelKind
from emergency_dispatch.models import Alert, PushPayload
from emergency_dispatch.senders.base import RecipientSender


class PushSender(RecipientSender):
    channel: ClassVar[ChannelKind] = ChannelKind.PUSH
    label: ClassVar[str] = "Push"
    recipient_noun: ClassVar[str] = "devices"

    def title(self, alert: Alert) -> str | None:
        if isinstance(alert.payload, PushPayload):
            return alert.payload.title
        return None
