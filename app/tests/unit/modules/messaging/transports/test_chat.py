"""Unit tests for the Slack webhook transport."""

from unittest.mock import MagicMock, patch

import pytest

from infrastructure.operations import OperationContext, OperationStatus
from modules.messaging.rendering import RenderedContent
from modules.messaging.transports import SlackConfig
from modules.messaging.transports.chat import SlackWebhookTransport, resolve_target
from tests.factories.messaging import make_channel, make_recipient, make_slack_config


def _response(status_code=200, body="ok", headers=None):
    response = MagicMock()
    response.status_code = status_code
    response.body = body
    response.headers = headers or {}
    return response


def _channel(recipients=None, **config_overrides):
    return make_channel(
        channel_type="slack",
        config=make_slack_config(**config_overrides),
        recipients=recipients or [make_recipient("ops", "channel")],
    )


@pytest.fixture
def webhook_client():
    with patch("modules.messaging.transports.chat.WebhookClient") as client_class:
        client_class.return_value.send_dict.return_value = _response()
        yield client_class


@pytest.mark.unit
class TestResolveTarget:
    @pytest.mark.parametrize(
        "recipient_type,target,expected",
        [
            ("channel", "ops", "#ops"),
            ("user", "alice", "@alice"),
            ("channel", "@alice", "@alice"),
            ("webhook", "default", None),
        ],
    )
    def test_resolve(self, recipient_type, target, expected):
        assert resolve_target(make_recipient(target, recipient_type)) == expected


@pytest.mark.unit
class TestBuildPayload:
    def test_payload_fields(self):
        config = SlackConfig(**make_slack_config(icon_emoji=":rotating_light:"))
        payload = SlackWebhookTransport.build_payload(
            config, make_recipient("ops", "channel"), RenderedContent("Title", "Body")
        )
        assert payload == {
            "text": "Body",
            "attachments": [{"title": "Title", "fallback": "Title"}],
            "channel": "#ops",
            "username": "alert-bot",
            "icon_emoji": ":rotating_light:",
        }

    def test_webhook_recipient_uses_config_channel(self):
        config = SlackConfig(**make_slack_config(channel="#fallback"))
        payload = SlackWebhookTransport.build_payload(
            config, make_recipient("hook", "webhook"), RenderedContent("", "Body")
        )
        assert payload["channel"] == "#fallback"
        assert "attachments" not in payload


@pytest.mark.unit
class TestSlackWebhookTransport:
    def test_posts_once_per_recipient(self, webhook_client, ctx, content):
        channel = _channel(
            [make_recipient("ops", "channel"), make_recipient("alice", "user")]
        )

        result = SlackWebhookTransport(10.0).send(ctx, channel, content)

        assert result.is_success
        assert result.data == {"recipients": 2}
        assert webhook_client.call_args.args[0].startswith("https://hooks.slack.com/")
        sent = [c.args[0]["channel"] for c in webhook_client.return_value.send_dict.call_args_list]
        assert sent == ["#ops", "@alice"]

    def test_forbidden_is_permanent_with_provider_details(self, webhook_client, ctx, content):
        webhook_client.return_value.send_dict.return_value = _response(403, "invalid_token")

        result = SlackWebhookTransport(10.0).send(ctx, _channel(), content)

        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.message == "webhook 403: invalid_token"

    def test_server_error_is_transient(self, webhook_client, ctx, content):
        webhook_client.return_value.send_dict.return_value = _response(503, "")
        assert SlackWebhookTransport(10.0).send(ctx, _channel(), content).is_transient

    def test_network_error_is_transient(self, webhook_client, ctx, content):
        webhook_client.return_value.send_dict.side_effect = TimeoutError("timed out")
        result = SlackWebhookTransport(10.0).send(ctx, _channel(), content)
        assert result.error_code == "IO_TIMEOUT"

    def test_stops_at_first_failure(self, webhook_client, ctx, content):
        webhook_client.return_value.send_dict.side_effect = [_response(404, "no_service")]
        channel = _channel([make_recipient("a", "channel"), make_recipient("b", "channel")])

        result = SlackWebhookTransport(10.0).send(ctx, channel, content)

        assert result.status == OperationStatus.NOT_FOUND
        assert webhook_client.return_value.send_dict.call_count == 1

    def test_second_send_skips_delivered_recipients(self, webhook_client, ctx, content):
        send_dict = webhook_client.return_value.send_dict
        send_dict.side_effect = [_response(), _response(503, ""), _response()]
        transport = SlackWebhookTransport(10.0)
        channel = _channel([make_recipient("a", "channel"), make_recipient("b", "channel")])

        first = transport.send(ctx, channel, content)
        second = transport.send(ctx, channel, content)

        assert first.is_transient
        assert second.data == {"recipients": 1}
        targets = [call.args[0]["channel"] for call in send_dict.call_args_list]
        assert targets == ["#a", "#b", "#b"]

    def test_invalid_webhook_url(self, webhook_client, ctx, content):
        result = SlackWebhookTransport(10.0).send(ctx, _channel(webhook_url="not-a-url"), content)
        assert result.error_code == "INVALID_CONFIG"
        webhook_client.assert_not_called()

    def test_expired_context(self, webhook_client, content):
        result = SlackWebhookTransport(10.0).send(
            OperationContext.with_timeout(0), _channel(), content
        )
        assert result.status == OperationStatus.TIMEOUT
        webhook_client.return_value.send_dict.assert_not_called()
