"""Transport capability the senders hand each recipient to."""

import logging
from abc import ABC, abstractmethod

from emergency_dispatch.enums import ChannelKind

logger = logging.getLogger(__name__)


class Gateway(ABC):
    """A real transport (SMS gateway, SMTP relay, push service, dispatch API).

    ``send`` raises GatewayError when the message could not be handed over.
    """

    @abstractmethod
    def send(
        self,
        channel: ChannelKind,
        recipient: str,
        body: str,
        title: str | None = None,
    ) -> None: ...


class LoggingGateway(Gateway):
    """Stub transport that logs instead of sending.

    Replace with a gateway that calls Twilio/SES/FCM or the dispatch API.
    """

    def send(
        self,
        channel: ChannelKind,
        recipient: str,
        body: str,
        title: str | None = None,
    ) -> None:
        if channel == ChannelKind.PUSH:
            recipient = f"{recipient[:10]}..."
        logger.info(
            "%s sent (stub)",
            channel,
            extra={
                "channel": str(channel),
                "recipient": recipient,
                "title": title,
                "body_preview": body[:50] if body else "(empty)",
            },
        )
