"""Shared fixtures for dispatcher, sender and audit log tests."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from emergency_dispatch.audit_log import AuditLog
from emergency_dispatch.config import DispatchConfig, SenderConfig
from emergency_dispatch.models import Location
from emergency_dispatch.senders import SenderRegistry, create_default_registry
from emergency_dispatch.senders.gateway import Gateway


@pytest.fixture()
def location() -> Location:
    return Location(latitude=40.7128, longitude=-74.006, address="Times Square, New York")


@pytest.fixture()
def sender_config() -> SenderConfig:
    return SenderConfig()


@pytest.fixture()
def mock_gateway() -> MagicMock:
    """Gateway that accepts every message."""
    return MagicMock(spec=Gateway)


@pytest.fixture()
def registry(sender_config: SenderConfig, mock_gateway: MagicMock) -> SenderRegistry:
    return create_default_registry(sender_config, mock_gateway)


@pytest.fixture()
def dispatch_config() -> DispatchConfig:
    """No backoff sleeps, generous timeout."""
    return DispatchConfig(
        max_workers=4,
        max_attempts=3,
        retry_backoff_seconds=[0.0],
        delivery_timeout_seconds=5.0,
    )


@pytest.fixture()
def log_path(tmp_path: Path) -> Path:
    return tmp_path / "emergency_logs.txt"


@pytest.fixture()
def audit_log(log_path: Path) -> AuditLog:
    return AuditLog(log_path)
