from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DispatchConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DISPATCH_")

    log_level: str = "INFO"
    max_workers: int = Field(default=4, ge=1)
    max_attempts: int = Field(default=3, ge=1)
    retry_backoff_seconds: list[float] = [0.5, 1.0, 2.0]
    delivery_timeout_seconds: float | None = 30.0


class AuditLogConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="AUDIT_LOG_")

    path: str = "emergency_logs.txt"


class SenderConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SENDER_")

    emergency_number: str = "911"
    sms_template: str = (
        "EMERGENCY: {{ message }} Location: {{ address }} "
        "({{ latitude }}, {{ longitude }})"
    )
    email_template: str = (
        "{{ message }}\n\n"
        "Location: {{ address }} ({{ latitude }}, {{ longitude }})\n"
        "Alert ID: {{ alert_id }}"
    )
    push_template: str = "{{ message }}"
    authority_template: str = (
        "{{ authority_kind }} emergency, severity {{ severity }}/5: "
        "{{ message }} at {{ address }} ({{ latitude }}, {{ longitude }})"
    )
