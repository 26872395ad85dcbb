"""Dispatch core: delivers an incident's alerts concurrently and reports back."""

import logging
import threading
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass

from emergency_dispatch.audit_log import AuditLog, AuditRecord
from emergency_dispatch.config import DispatchConfig
from emergency_dispatch.errors import AuditLogError, UnknownChannel
from emergency_dispatch.models import Alert
from emergency_dispatch.senders import SenderRegistry
from emergency_dispatch.senders.base import DeliveryOutcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """Outcome of one alert in a batch.

    ``audit_error`` is set when the delivery happened but could not be
    recorded; the outcome itself is unaffected.
    """

    alert: Alert
    outcome: DeliveryOutcome
    audit_error: AuditLogError | None = None

    def as_pair(self) -> tuple[Alert, DeliveryOutcome]:
        return self.alert, self.outcome


@dataclass(frozen=True, slots=True)
class _Delivery:
    outcome: DeliveryOutcome
    attempts: tuple[AuditRecord, ...]


class Dispatcher:
    """Delivers alerts through the sender registered for their channel kind.

    Each alert runs as its own task in a thread pool. Alerts are
    independent: an unknown channel, a sender failure or an exception
    affects only that alert. Workers never modify an alert or write the
    audit log; they hand back their attempts, and the calling thread applies
    statuses and appends records once the batch has settled. A task
    abandoned after a timeout is told to stop retrying, and whatever it does
    afterwards is discarded.

    ``delivery_timeout_seconds`` counts from the start of the batch; alerts
    still running (or queued) when it expires are reported as failed.
    """

    def __init__(
        self,
        registry: SenderRegistry,
        audit_log: AuditLog | None = None,
        config: DispatchConfig | None = None,
    ) -> None:
        self._registry = registry
        self._audit_log = audit_log
        self._config = config or DispatchConfig()

    def dispatch_all(self, alerts: Sequence[Alert]) -> list[DispatchResult]:
        """Deliver every alert and return one result per alert, in input order."""
        alerts = list(alerts)
        if not alerts:
            return []

        timeout = self._config.delivery_timeout_seconds
        abandoned = [threading.Event() for _ in alerts]
        executor = ThreadPoolExecutor(
            max_workers=min(self._config.max_workers, len(alerts)),
            thread_name_prefix="dispatch",
        )
        try:
            futures = [
                executor.submit(self._deliver, alert, stop)
                for alert, stop in zip(alerts, abandoned)
            ]
            wait(futures, timeout=timeout)
            deliveries = [
                self._settle(alert, future, stop, timeout)
                for alert, future, stop in zip(alerts, futures, abandoned)
            ]
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        results: list[DispatchResult] = []
        for alert, delivery in zip(alerts, deliveries):
            audit_error = self._record(alert, delivery)
            alert.mark(delivery.outcome.status)
            results.append(DispatchResult(alert, delivery.outcome, audit_error))

        counts = summarize(results)
        logger.info("Batch dispatched", extra=counts)
        return results

    def dispatch_one(self, alert: Alert) -> DispatchResult:
        return self.dispatch_all([alert])[0]

    def _settle(
        self,
        alert: Alert,
        future: "Future[_Delivery]",
        abandoned: threading.Event,
        timeout: float | None,
    ) -> _Delivery:
        if future.done() and not future.cancelled():
            try:
                return future.result()
            except Exception as exc:
                logger.exception("Dispatch task crashed", extra={"alert_id": alert.id})
                return _failed(alert, f"Dispatch error: {exc}")

        abandoned.set()
        future.cancel()
        logger.error(
            "Delivery timed out",
            extra={"alert_id": alert.id, "channel": str(alert.channel_kind), "timeout": timeout},
        )
        return _failed(alert, f"Delivery timed out after {timeout}s")

    def _deliver(self, alert: Alert, abandoned: threading.Event) -> _Delivery:
        log_ctx: dict[str, object] = {
            "alert_id": alert.id,
            "channel": str(alert.channel_kind),
        }

        try:
            sender = self._registry.get(alert.channel_kind)
        except UnknownChannel as exc:
            logger.error("No sender for channel", extra=log_ctx)
            return _failed(alert, f"UnknownChannel: {exc}")

        max_attempts = self._config.max_attempts
        attempts: list[AuditRecord] = []
        attempt = 0
        while True:
            attempt += 1
            log_ctx["attempt"] = attempt
            try:
                outcome = sender.attempt(alert)
            except Exception as exc:
                logger.exception("Sender error", extra=log_ctx)
                outcome = DeliveryOutcome.failure(f"Sender error: {exc}")

            attempts.append(AuditRecord.for_alert(alert, status=outcome.status))

            if outcome.success:
                logger.info(
                    "Delivery succeeded",
                    extra={**log_ctx, "delivered": outcome.delivered_count, "result": outcome.detail},
                )
                break
            if attempt >= max_attempts:
                logger.error(
                    "Delivery permanently failed",
                    extra={**log_ctx, "reason": outcome.detail},
                )
                break

            backoff = get_backoff(attempt, self._config.retry_backoff_seconds)
            logger.warning(
                "Delivery failed, retrying",
                extra={**log_ctx, "backoff_seconds": backoff, "reason": outcome.detail},
            )
            # Set once the batch has given up on this alert.
            if abandoned.wait(backoff):
                logger.info("Retries stopped for abandoned delivery", extra=log_ctx)
                break

        return _Delivery(outcome, tuple(attempts))

    def _record(self, alert: Alert, delivery: _Delivery) -> AuditLogError | None:
        """Append the delivery's attempts to the audit log.

        Returns the last error instead of raising; later attempts are still
        tried after a failed append.
        """
        if self._audit_log is None:
            return None
        audit_error: AuditLogError | None = None
        for record in delivery.attempts:
            try:
                self._audit_log.append(record)
            except AuditLogError as exc:
                logger.warning(
                    "Delivery outcome not recorded in audit log",
                    extra={
                        "alert_id": alert.id,
                        "channel": str(alert.channel_kind),
                        "status": record.status,
                        "reason": str(exc),
                    },
                )
                audit_error = exc
        return audit_error


def _failed(alert: Alert, detail: str) -> _Delivery:
    outcome = DeliveryOutcome.failure(detail)
    return _Delivery(outcome, (AuditRecord.for_alert(alert, status=outcome.status),))


def get_backoff(attempt: int, schedule: Sequence[float]) -> float:
    """Return backoff seconds after the given attempt number (1-based).

    Falls back to the last value in *schedule* when attempt exceeds its
    length, and to zero for an empty schedule.
    """
    if not schedule:
        return 0.0
    idx = min(attempt - 1, len(schedule) - 1)
    return schedule[idx]


def summarize(results: Sequence[DispatchResult]) -> dict[str, int]:
    succeeded = sum(1 for r in results if r.outcome.success)
    return {
        "total": len(results),
        "succeeded": succeeded,
        "failed": len(results) - succeeded,
        "audit_failures": sum(1 for r in results if r.audit_error is not None),
    }
