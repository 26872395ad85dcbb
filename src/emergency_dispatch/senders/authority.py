"""Authority dispatch sender.

Unlike the recipient channels this one does not confirm delivery: handing
the request to the dispatch line is the whole job, so an invoked dispatch
always reports success. Gateway errors are logged, not surfaced.
"""

import logging
from typing import ClassVar

from jinja2 import TemplateError

from emergency_dispatch.enums import AlertStatus, ChannelKind
from emergency_dispatch.errors import GatewayError
from emergency_dispatch.models import Alert, AuthorityPayload
from emergency_dispatch.models.payloads import MAX_SEVERITY
from emergency_dispatch.renderer import render_template
from emergency_dispatch.senders.base import DeliveryOutcome, Sender
from emergency_dispatch.senders.gateway import Gateway, LoggingGateway

logger = logging.getLogger(__name__)


class AuthoritySender(Sender):
    channel: ClassVar[ChannelKind] = ChannelKind.AUTHORITY

    def __init__(
        self,
        template: str,
        emergency_number: str | None = None,
        gateway: Gateway | None = None,
    ) -> None:
        self._template = template
        self._emergency_number = emergency_number
        self._gateway = gateway or LoggingGateway()

    def attempt(self, alert: Alert) -> DeliveryOutcome:
        payload = alert.payload
        if not isinstance(payload, AuthorityPayload):
            return DeliveryOutcome.failure(
                f"Authority sender cannot deliver {alert.channel_kind} alert"
            )

        number = self._emergency_number or payload.emergency_number
        log_ctx = {
            "alert_id": alert.id,
            "authority_kind": str(payload.authority_kind),
            "severity": payload.severity,
        }

        try:
            body = render_template(self._template, alert.template_context())
        except TemplateError:
            logger.exception("Authority template failed, sending raw message", extra=log_ctx)
            body = alert.message

        try:
            self._gateway.send(self.channel, number, body)
        except GatewayError:
            logger.exception("Dispatch request not acknowledged by gateway", extra=log_ctx)

        return DeliveryOutcome(
            success=True,
            delivered_count=1,
            detail=(
                f"{payload.authority_kind} services dispatched via {number} "
                f"(severity {payload.severity}/{MAX_SEVERITY})"
            ),
            status=AlertStatus.DISPATCHED,
        )
