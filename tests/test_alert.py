"""Tests for the Alert variant model."""

import pytest
from pydantic import ValidationError

from emergency_dispatch.enums import AlertStatus, AuthorityKind, ChannelKind
from emergency_dispatch.errors import InvalidPayload, InvalidStatusTransition
from emergency_dispatch.models import (
    Alert,
    EmailPayload,
    Location,
    SMSPayload,
    authority_alert,
    email_alert,
    push_alert,
    sms_alert,
)


class TestAlertConstruction:
    def test_starts_pending(self, location: Location) -> None:
        alert = sms_alert("user-1", "help", location, ["+1"])

        assert alert.status == AlertStatus.PENDING
        assert alert.channel_kind == ChannelKind.SMS

    def test_id_derived_from_creation_time_and_user(self, location: Location) -> None:
        alert = sms_alert("user-1", "help", location, ["+1"])

        assert alert.id.startswith(f"{int(alert.created_at.timestamp())}_user-1_")

    def test_ids_are_unique_within_the_same_second(self, location: Location) -> None:
        alerts = [sms_alert("user-1", "help", location, ["+1"]) for _ in range(20)]

        assert len({a.id for a in alerts}) == 20

    def test_id_cannot_be_reassigned(self, location: Location) -> None:
        alert = sms_alert("user-1", "help", location, ["+1"])

        with pytest.raises(ValidationError):
            alert.id = "other"

    def test_message_is_stripped(self, location: Location) -> None:
        alert = sms_alert("user-1", "  help  ", location, ["+1"])

        assert alert.message == "help"

    def test_blank_message_rejected(self, location: Location) -> None:
        with pytest.raises(InvalidPayload):
            sms_alert("user-1", "   ", location, ["+1"])

    def test_blank_user_rejected(self, location: Location) -> None:
        with pytest.raises(InvalidPayload):
            sms_alert("", "help", location, ["+1"])

    def test_whitespace_user_rejected(self, location: Location) -> None:
        with pytest.raises(InvalidPayload):
            sms_alert("   ", "help", location, ["+1"])

    @pytest.mark.parametrize("user_id", ["user\n1", "user\r1", "user\u20281", "user\t1"])
    def test_user_with_line_break_rejected(self, location: Location, user_id: str) -> None:
        with pytest.raises(InvalidPayload):
            sms_alert(user_id, "help", location, ["+1"])

    def test_user_is_stripped_before_id_is_derived(self, location: Location) -> None:
        alert = sms_alert("  user-1 ", "help", location, ["+1"])

        assert alert.user_id == "user-1"
        assert alert.id.startswith(f"{int(alert.created_at.timestamp())}_user-1_")

    def test_payload_must_match_channel(self, location: Location) -> None:
        payload = EmailPayload(addresses=["jane@example.com"])

        with pytest.raises(InvalidPayload, match="requires SMSPayload"):
            Alert.create("user-1", ChannelKind.SMS, "help", location, payload)

    def test_dict_payload_parsed_for_channel(self, location: Location) -> None:
        alert = Alert.create(
            "user-1", ChannelKind.PUSH, "help", location, {"device_tokens": ["tok-1"]}
        )

        assert alert.recipients == ["tok-1"]

    def test_dict_payload_with_wrong_fields_rejected(self, location: Location) -> None:
        with pytest.raises(InvalidPayload):
            Alert.create("user-1", ChannelKind.SMS, "help", location, {"addresses": ["a@example.com"]})

    def test_invalid_email_rejected(self, location: Location) -> None:
        with pytest.raises(InvalidPayload):
            email_alert("user-1", "help", location, ["not-an-email"])

    def test_unknown_authority_kind_rejected(self, location: Location) -> None:
        with pytest.raises(InvalidPayload):
            authority_alert("user-1", "help", location, "coast_guard")

    def test_invalid_payload_is_a_value_error(self, location: Location) -> None:
        with pytest.raises(ValueError):
            sms_alert("user-1", "", location, [])


class TestPayloads:
    def test_recipient_lists_drop_duplicates_in_order(self, location: Location) -> None:
        alert = sms_alert("user-1", "help", location, ["+2", "+1", "+2"])

        assert alert.recipients == ["+2", "+1"]

    def test_add_phone_number(self) -> None:
        payload = SMSPayload(phone_numbers=["+1"])
        payload.add_phone_number("+2")
        payload.add_phone_number("+1")

        assert payload.phone_numbers == ["+1", "+2"]

    def test_email_default_subject(self, location: Location) -> None:
        alert = email_alert("user-1", "help", location, ["jane@example.com"])

        assert alert.payload.subject == "EMERGENCY ALERT"

    def test_push_default_title(self, location: Location) -> None:
        alert = push_alert("user-1", "help", location, ["tok-1"])

        assert alert.payload.title.endswith("EMERGENCY")

    def test_empty_recipient_lists_allowed(self, location: Location) -> None:
        assert sms_alert("user-1", "help", location, []).recipients == []
        assert email_alert("user-1", "help", location, []).recipients == []
        assert push_alert("user-1", "help", location, []).recipients == []

    @pytest.mark.parametrize("kind", list(AuthorityKind))
    def test_authority_recipient_is_emergency_number(
        self, location: Location, kind: AuthorityKind
    ) -> None:
        alert = authority_alert("user-1", "help", location, kind)

        assert alert.recipients == ["911"]
        assert alert.payload.emergency_number == "911"


class TestSeverity:
    def test_default_is_five(self, location: Location) -> None:
        assert authority_alert("user-1", "help", location, "fire").payload.severity == 5

    @pytest.mark.parametrize("severity", [1, 2, 3, 4, 5])
    def test_in_range_kept(self, location: Location, severity: int) -> None:
        alert = authority_alert("user-1", "help", location, "fire", severity)

        assert alert.payload.severity == severity

    @pytest.mark.parametrize("severity", [0, -1, 6, 9, 100])
    def test_out_of_range_clamps_to_five(self, location: Location, severity: int) -> None:
        alert = authority_alert("user-1", "help", location, "fire", severity)

        assert alert.payload.severity == 5

    @pytest.mark.parametrize("severity", [0, 9])
    def test_set_severity_clamps(self, location: Location, severity: int) -> None:
        alert = authority_alert("user-1", "help", location, "police", 2)
        alert.set_severity(severity)

        assert alert.payload.severity == 5

    def test_set_severity_in_range(self, location: Location) -> None:
        alert = authority_alert("user-1", "help", location, "police")
        alert.set_severity(3)

        assert alert.payload.severity == 3

    def test_set_severity_rejected_for_other_channels(self, location: Location) -> None:
        alert = sms_alert("user-1", "help", location, ["+1"])

        with pytest.raises(InvalidPayload):
            alert.set_severity(3)

    def test_non_numeric_severity_rejected(self, location: Location) -> None:
        with pytest.raises(InvalidPayload):
            authority_alert("user-1", "help", location, "police", "high")  # type: ignore[arg-type]


class TestStatusTransitions:
    def test_advances_to_terminal_status(self, location: Location) -> None:
        alert = push_alert("user-1", "help", location, ["tok"])
        alert.mark(AlertStatus.DELIVERED)

        assert alert.status == AlertStatus.DELIVERED

    def test_advances_to_failed(self, location: Location) -> None:
        alert = sms_alert("user-1", "help", location, ["+1"])
        alert.mark(AlertStatus.FAILED)

        assert alert.status == AlertStatus.FAILED

    def test_cannot_go_back_to_pending(self, location: Location) -> None:
        alert = sms_alert("user-1", "help", location, ["+1"])
        alert.mark(AlertStatus.SENT)

        with pytest.raises(InvalidStatusTransition):
            alert.mark(AlertStatus.PENDING)
        assert alert.status == AlertStatus.SENT

    def test_rejects_other_channels_terminal_status(self, location: Location) -> None:
        alert = sms_alert("user-1", "help", location, ["+1"])

        with pytest.raises(InvalidStatusTransition):
            alert.mark(AlertStatus.DISPATCHED)

    def test_terminal_to_terminal_allowed_for_redispatch(self, location: Location) -> None:
        alert = sms_alert("user-1", "help", location, ["+1"])
        alert.mark(AlertStatus.FAILED)
        alert.mark(AlertStatus.SENT)

        assert alert.status == AlertStatus.SENT

    def test_status_in_model_dump(self, location: Location) -> None:
        alert = sms_alert("user-1", "help", location, ["+1"])
        alert.mark("sent")

        assert alert.model_dump()["status"] == AlertStatus.SENT


class TestDescribe:
    def test_sms_wording_follows_status(self, location: Location) -> None:
        alert = sms_alert("user-1", "help", location, ["+1", "+2"])

        assert alert.describe() == "SMS Alert pending for 2 contacts"
        alert.mark(AlertStatus.SENT)
        assert alert.describe() == "SMS Alert sent to 2 contacts"

    def test_email_failed_wording(self, location: Location) -> None:
        alert = email_alert("user-1", "help", location, ["jane@example.com"])
        alert.mark(AlertStatus.FAILED)

        assert alert.describe() == "Email Alert failed for 1 recipients"

    def test_push_wording(self, location: Location) -> None:
        alert = push_alert("user-1", "help", location, ["a", "b", "c"])
        alert.mark(AlertStatus.DELIVERED)

        assert alert.describe() == "Push Notification sent to 3 devices"

    def test_authority_wording(self, location: Location) -> None:
        alert = authority_alert("user-1", "help", location, "medical", 4)

        assert alert.describe() == "Authority Alert - medical services pending dispatch (Severity: 4/5)"
        alert.mark(AlertStatus.DISPATCHED)
        assert alert.describe() == "Authority Alert - medical services dispatched (Severity: 4/5)"

    def test_summary_includes_identity_and_location(self, location: Location) -> None:
        alert = sms_alert("user-1", "help", location, ["+1"])
        summary = alert.summary()

        assert f"ID: {alert.id}" in summary
        assert "Type: SMS" in summary
        assert "Status: pending" in summary
        assert "Location: Times Square, New York" in summary
