"""SMS sender."""

from typing import ClassVar

from emergency_dispatch.enums import ChannelKind
from emergency_dispatch.senders.base import RecipientSender


class SMSSender(RecipientSender):
    channel: ClassVar[ChannelKind] = ChannelKind.SMS
    label: ClassVar[str] = "SMS"
    recipient_noun: ClassVar[str] = "contacts"
