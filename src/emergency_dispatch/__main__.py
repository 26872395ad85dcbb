"""Dev entry point: python -m emergency_dispatch.

Dispatches a sample incident through the stub gateways and prints the
resulting descriptions and audit log.
"""

import argparse
import logging
import sys

from emergency_dispatch.audit_log import AuditLog
from emergency_dispatch.config import AuditLogConfig, DispatchConfig, SenderConfig
from emergency_dispatch.dispatcher import Dispatcher, summarize
from emergency_dispatch.enums import AuthorityKind
from emergency_dispatch.errors import AuditLogError
from emergency_dispatch.intake import build_incident_alerts
from emergency_dispatch.log import setup_logging
from emergency_dispatch.models import Contact, Location
from emergency_dispatch.senders import create_default_registry

logger = logging.getLogger(__name__)

SAMPLE_CONTACTS = [
    Contact(name="Jane Doe", phone="+1234567891", email="jane@example.com", relationship="Sister"),
    Contact(name="Dr. Smith", phone="+1234567892", email="dr.smith@example.com", relationship="Doctor"),
    Contact(name="Mom", phone="+1234567893", email="mom@example.com", relationship="Mother"),
]


def main() -> None:
    parser = argparse.ArgumentParser(description="Dispatch a sample emergency incident")
    parser.add_argument("--user-id", default="demo_user", help="User raising the incident")
    parser.add_argument(
        "--message",
        default="EMERGENCY! I need help at Times Square!",
        help="Incident message",
    )
    parser.add_argument(
        "--authority",
        choices=[k.value for k in AuthorityKind],
        default=AuthorityKind.MEDICAL.value,
        help="Authority to alert (default: medical)",
    )
    parser.add_argument("--log-path", help="Audit log file (default: $AUDIT_LOG_PATH)")
    parser.add_argument("--clear", action="store_true", help="Clear the audit log first")
    args = parser.parse_args()

    dispatch_config = DispatchConfig()
    setup_logging(dispatch_config.log_level)

    audit_log = AuditLog(args.log_path or AuditLogConfig().path)
    dispatcher = Dispatcher(create_default_registry(SenderConfig()), audit_log, dispatch_config)

    try:
        if args.clear:
            audit_log.clear()

        location = Location(latitude=40.7128, longitude=-74.0060, address="Times Square, New York")
        alerts = build_incident_alerts(
            args.user_id,
            args.message,
            location,
            SAMPLE_CONTACTS,
            args.authority,
            device_tokens=["token_abc123", "token_def456"],
        )

        results = dispatcher.dispatch_all(alerts)
        for result in results:
            print(result.alert.describe())
            if result.audit_error is not None:
                print(f"  warning: not recorded ({result.audit_error})")

        print()
        for block in audit_log.read_all():
            print(block)
    except AuditLogError:
        logger.exception("Audit log unavailable")
        sys.exit(1)

    counts = summarize(results)
    if counts["failed"]:
        sys.exit(2)


if __name__ == "__main__":
    main()
