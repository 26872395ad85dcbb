"""Sender registry for channel-kind based delivery dispatch."""

from emergency_dispatch.config import SenderConfig
from emergency_dispatch.enums import ChannelKind
from emergency_dispatch.errors import UnknownChannel
from emergency_dispatch.senders.authority import AuthoritySender
from emergency_dispatch.senders.base import DeliveryOutcome, RecipientSender, Sender
from emergency_dispatch.senders.email import EmailSender
from emergency_dispatch.senders.gateway import Gateway, LoggingGateway
from emergency_dispatch.senders.push import PushSender
from emergency_dispatch.senders.sms import SMSSender


class SenderRegistry:
    """Maps channel kinds to sender instances."""

    def __init__(self) -> None:
        self._senders: dict[str, Sender] = {}

    def register(self, channel: str, sender: Sender) -> None:
        self._senders[channel] = sender

    def get(self, channel: str) -> Sender:
        """Return the sender for a channel.

        Raises UnknownChannel if nothing is registered for it.
        """
        try:
            return self._senders[channel]
        except KeyError:
            raise UnknownChannel(channel) from None

    def channels(self) -> list[str]:
        return list(self._senders)


def create_default_registry(
    config: SenderConfig | None = None,
    gateway: Gateway | None = None,
) -> SenderRegistry:
    """Create a registry with a sender for every channel kind."""
    config = config or SenderConfig()
    gateway = gateway or LoggingGateway()

    registry = SenderRegistry()
    registry.register(ChannelKind.SMS, SMSSender(config.sms_template, gateway))
    registry.register(ChannelKind.EMAIL, EmailSender(config.email_template, gateway))
    registry.register(
        ChannelKind.AUTHORITY,
        AuthoritySender(config.authority_template, config.emergency_number, gateway),
    )
    registry.register(ChannelKind.PUSH, PushSender(config.push_template, gateway))
    return registry


__all__ = [
    "AuthoritySender",
    "DeliveryOutcome",
    "EmailSender",
    "Gateway",
    "LoggingGateway",
    "PushSender",
    "RecipientSender",
    "Sender",
    "SenderRegistry",
    "SMSSender",
    "create_default_registry",
]
