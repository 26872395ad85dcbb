"""Sender interface and the shared recipient-list delivery loop."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import ClassVar

from jinja2 import TemplateError

from emergency_dispatch.enums import AlertStatus, ChannelKind
from emergency_dispatch.errors import GatewayError
from emergency_dispatch.models import Alert
from emergency_dispatch.renderer import render_template
from emergency_dispatch.senders.gateway import Gateway, LoggingGateway

logger = logging.getLogger(__name__)

RecipientPredicate = Callable[[str], bool]


def _never_fail(recipient: str) -> bool:
    return False


@dataclass(frozen=True, slots=True)
class DeliveryOutcome:
    """Result of one delivery attempt.

    ``status`` is the alert status the attempt calls for: the channel's
    terminal status on success, ``failed`` otherwise.
    """

    success: bool
    delivered_count: int
    detail: str
    status: AlertStatus

    @classmethod
    def failure(cls, detail: str, delivered_count: int = 0) -> "DeliveryOutcome":
        return cls(
            success=False,
            delivered_count=delivered_count,
            detail=detail,
            status=AlertStatus.FAILED,
        )


class Sender(ABC):
    """Delivers alerts of one channel kind."""

    channel: ClassVar[ChannelKind]

    def deliver(self, alert: Alert) -> DeliveryOutcome:
        """Attempt delivery and advance the alert to the resulting status."""
        outcome = self.attempt(alert)
        alert.mark(outcome.status)
        return outcome

    @abstractmethod
    def attempt(self, alert: Alert) -> DeliveryOutcome:
        """Perform one delivery attempt without touching the alert.

        Implementations must not raise; return a failed outcome instead.
        """


class RecipientSender(Sender):
    """Sends one rendered body to every recipient in the alert payload.

    An alert with no recipients succeeds with ``delivered_count=0``.
    A recipient counts as failed when *fail_recipient* returns True for it
    or the gateway raises GatewayError; any failed recipient fails the
    whole attempt.
    """

    label: ClassVar[str]
    recipient_noun: ClassVar[str]

    def __init__(
        self,
        template: str,
        gateway: Gateway | None = None,
        fail_recipient: RecipientPredicate | None = None,
    ) -> None:
        self._template = template
        self._gateway = gateway or LoggingGateway()
        self._fail_recipient = fail_recipient or _never_fail

    def title(self, alert: Alert) -> str | None:
        return None

    def attempt(self, alert: Alert) -> DeliveryOutcome:
        if alert.channel_kind != self.channel:
            return DeliveryOutcome.failure(
                f"{self.label} sender cannot deliver {alert.channel_kind} alert"
            )

        recipients = alert.recipients
        if not recipients:
            return DeliveryOutcome(
                success=True,
                delivered_count=0,
                detail=f"No {self.recipient_noun} to notify",
                status=alert.terminal_status,
            )

        try:
            body = render_template(self._template, alert.template_context())
        except TemplateError as exc:
            logger.error(
                "Body template failed to render",
                extra={"alert_id": alert.id, "channel": self.channel},
            )
            return DeliveryOutcome.failure(f"Template error: {exc}")

        title = self.title(alert)
        failed: list[str] = []
        for recipient in recipients:
            if self._fail_recipient(recipient):
                failed.append(recipient)
                continue
            try:
                self._gateway.send(self.channel, recipient, body, title=title)
            except GatewayError as exc:
                logger.warning(
                    "Gateway rejected recipient",
                    extra={
                        "alert_id": alert.id,
                        "channel": self.channel,
                        "reason": str(exc),
                    },
                )
                failed.append(recipient)

        delivered = len(recipients) - len(failed)
        if failed:
            return DeliveryOutcome.failure(
                f"{self.label} failed for {len(failed)} of {len(recipients)} "
                f"{self.recipient_noun}",
                delivered_count=delivered,
            )
        return DeliveryOutcome(
            success=True,
            delivered_count=delivered,
            detail=f"{self.label} delivered to {delivered} {self.recipient_noun}",
            status=alert.terminal_status,
        )
