"""Unit tests for messaging domain models."""

import re

import pytest
from pydantic import ValidationError

from modules.messaging.domain.errors import (
    DuplicateResultError,
    EntityDeletedError,
    InvalidRequestError,
)
from modules.messaging.domain.models import (
    Channel,
    CommonSettings,
    Message,
    MessageResult,
    Recipient,
    Template,
    dedupe_channel_ids,
    derive_status,
    new_message_id,
)
from modules.messaging.domain.types import ErrorCode, MessageStatus, ResultStatus


def _channel(**overrides):
    fields = {"name": "ops", "channel_type": "email"}
    fields.update(overrides)
    return Channel(**fields)


@pytest.mark.unit
class TestChannel:
    @pytest.mark.parametrize("name", ["A", "a1_b-c", "x" * 100])
    def test_valid_names(self, name):
        assert _channel(name=name).name == name

    @pytest.mark.parametrize("name", ["", "   ", "a b", "*", "x" * 101])
    def test_invalid_names(self, name):
        with pytest.raises(ValidationError):
            _channel(name=name)

    def test_description_limit(self):
        with pytest.raises(ValidationError):
            _channel(description="d" * 501)

    def test_channel_type_normalised(self):
        assert _channel(channel_type=" Email ").channel_type == "email"

    def test_common_settings_defaults(self):
        settings = _channel().common_settings
        assert settings.timeout == 30000
        assert settings.retry_attempts == 3
        assert settings.retry_delay == 1000

    @pytest.mark.parametrize(
        "values", [{"timeout": 0}, {"retry_attempts": -1}, {"retry_delay": -1}]
    )
    def test_common_settings_bounds(self, values):
        with pytest.raises(ValidationError):
            CommonSettings(**values)

    def test_can_send(self):
        recipient = Recipient(name="u", type="to", target="u@example.com")
        channel = _channel(recipients=[recipient])
        assert channel.can_send()
        assert not channel.disable().can_send()
        assert not channel.update_recipients([]).can_send()
        assert not channel.delete().can_send()

    def test_mutators_return_copies(self):
        channel = _channel()
        disabled = channel.disable()
        assert channel.enabled is True
        assert disabled.enabled is False
        assert disabled.id == channel.id

    def test_deleted_channel_cannot_be_modified(self):
        deleted = _channel().delete(at=1000)
        assert deleted.deleted_at == 1000
        with pytest.raises(EntityDeletedError):
            deleted.enable()
        with pytest.raises(EntityDeletedError):
            deleted.delete()

    def test_mark_as_used_allowed_on_deleted(self):
        used = _channel().delete(at=1000).mark_as_used(at=2000)
        assert used.last_used == 2000
        assert used.is_deleted

    def test_with_recipients_keeps_timestamps(self):
        channel = _channel()
        recipient = Recipient(name="b", type="to", target="b@example.com")
        copy = channel.with_recipients([recipient])
        assert copy.recipients == [recipient]
        assert copy.updated_at == channel.updated_at

    def test_records_are_immutable(self):
        with pytest.raises(ValidationError):
            _channel().enabled = False

    def test_recipient_fields_required(self):
        with pytest.raises(ValidationError):
            Recipient(name="u", type="to", target=" ")


@pytest.mark.unit
class TestTemplate:
    @pytest.mark.parametrize("length", [1, 10000])
    def test_body_length_accepted(self, length):
        assert len(Template(name="t", channel_type="email", body="b" * length).body) == length

    def test_whitespace_body_of_length_one_accepted(self):
        assert Template(name="t", channel_type="email", body=" ").body == " "

    @pytest.mark.parametrize("body", ["", "b" * 10001])
    def test_body_length_rejected(self, body):
        with pytest.raises(ValidationError):
            Template(name="t", channel_type="email", body=body)

    def test_subject_limit(self):
        with pytest.raises(ValidationError):
            Template(name="t", channel_type="email", body="b", subject="s" * 201)

    def test_update_content_bumps_version(self):
        template = Template(name="t", channel_type="email", body="b")
        updated = template.update_content("New", "Body {x}")
        assert updated.version == 2
        assert updated.subject == "New"
        assert template.version == 1

    def test_deleted_template_cannot_be_updated(self):
        deleted = Template(name="t", channel_type="email", body="b").delete()
        assert deleted.is_deleted
        with pytest.raises(EntityDeletedError):
            deleted.update_description("x")


@pytest.mark.unit
class TestMessageResult:
    def test_success_requires_sent_at(self):
        with pytest.raises(ValidationError):
            MessageResult(channel_id="c1", status=ResultStatus.SUCCESS, message="ok")

    def test_failure_requires_error(self):
        with pytest.raises(ValidationError):
            MessageResult(channel_id="c1", status=ResultStatus.FAILED, message="no")

    def test_factories(self):
        ok = MessageResult.success("c1", sent_at=5)
        failed = MessageResult.failure("c2", ErrorCode.SEND_ERROR, "failed", "webhook 403")
        assert ok.is_success and ok.sent_at == 5
        assert failed.is_failure
        assert failed.error.code == ErrorCode.SEND_ERROR
        assert failed.error.details == "webhook 403"


@pytest.mark.unit
class TestDeriveStatus:
    ok = MessageResult.success("c1", sent_at=1)
    bad = MessageResult.failure("c2", ErrorCode.SEND_ERROR, "failed")

    def test_empty_is_pending(self):
        assert derive_status([], 1) == MessageStatus.PENDING

    def test_incomplete_is_pending(self):
        assert derive_status([self.ok], 2) == MessageStatus.PENDING

    def test_all_success(self):
        assert derive_status([self.ok], 1) == MessageStatus.SUCCESS

    def test_all_failed(self):
        assert derive_status([self.bad], 1) == MessageStatus.FAILED

    def test_mixed(self):
        assert derive_status([self.ok, self.bad], 2) == MessageStatus.PARTIAL_SUCCESS


@pytest.mark.unit
class TestMessage:
    def test_new_message_id_format(self):
        assert re.fullmatch(r"msg_\d+_[0-9a-f]{8}", new_message_id())

    def test_dedupe_keeps_first_occurrence(self):
        assert dedupe_channel_ids(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]

    def test_create_rejects_empty(self):
        with pytest.raises(InvalidRequestError):
            Message.create([])

    def test_create_dedupes(self):
        message = Message.create(["c1", "c1"])
        assert message.channel_ids == ["c1"]
        assert message.status == MessageStatus.PENDING
        assert message.variables == {}

    def test_add_result_updates_status(self):
        message = Message.create(["c1", "c2"])
        message.add_result(MessageResult.success("c1"))
        assert message.status == MessageStatus.PENDING
        message.add_result(MessageResult.failure("c2", ErrorCode.TIMEOUT, "timed out"))
        assert message.status == MessageStatus.PARTIAL_SUCCESS
        assert message.is_completed()
        assert message.successful_channels() == ["c1"]
        assert message.failed_channels() == ["c2"]

    def test_add_result_rejects_duplicates(self):
        message = Message.create(["c1"])
        message.add_result(MessageResult.success("c1"))
        with pytest.raises(DuplicateResultError):
            message.add_result(MessageResult.success("c1"))

    def test_add_result_rejects_unknown_channel(self):
        message = Message.create(["c1"])
        with pytest.raises(ValueError):
            message.add_result(MessageResult.success("c9"))

    def test_update_result_replaces_in_place(self):
        message = Message.create(["c1"])
        message.add_result(MessageResult.failure("c1", ErrorCode.SEND_ERROR, "failed"))
        message.update_result(MessageResult.success("c1"))
        assert message.status == MessageStatus.SUCCESS
        assert len(message.results) == 1
