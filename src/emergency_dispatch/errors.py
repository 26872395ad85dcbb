"""Exception hierarchy for alert construction, dispatch and audit logging."""


class DispatchError(Exception):
    """Base class for all emergency dispatch errors."""


class InvalidPayload(DispatchError, ValueError):
    """Alert construction rejected: payload missing, malformed or mismatched."""


class InvalidStatusTransition(DispatchError, ValueError):
    """An alert status change would move backwards or off the channel's path."""


class UnknownChannel(DispatchError, LookupError):
    """No sender is registered for a channel kind."""

    def __init__(self, channel: str) -> None:
        super().__init__(f"No sender registered for channel: {str(channel)!r}")
        self.channel = channel


class GatewayError(DispatchError):
    """A transport gateway could not hand a message to a recipient."""


class AuditLogError(DispatchError, OSError):
    """The audit store could not be read or written."""
