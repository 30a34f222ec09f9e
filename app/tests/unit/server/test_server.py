import json

import pytest
from fastapi.testclient import TestClient

from modules.messaging.channel_types import get_channel_type_registry
from modules.messaging.providers import get_message_service
from server import server


@pytest.mark.unit
def test_server_handler_initialization():
    assert server.handler is not None
    paths = {route.path for route in server.handler.routes}
    assert "/api/v1/messages" in paths
    assert "/api/v1/messages/{message_id}" in paths
    assert "/api/v1/channel-types" in paths


@pytest.mark.unit
def test_main_exports_server_app():
    import main

    assert main.server_app is server.handler


@pytest.mark.unit
def test_lifespan_builds_service_and_freezes_registry():
    with TestClient(server.handler) as client:
        service = client.app.state.message_service
        assert service is get_message_service()
        assert get_channel_type_registry().is_frozen

        response = client.get("/api/v1/channel-types")

        assert response.status_code == 200
        assert [t["name"] for t in response.json()] == ["email", "slack", "sms"]


@pytest.mark.unit
def test_lifespan_loads_seed_file(tmp_path, monkeypatch):
    seed = {
        "channels": [
            {
                "id": "channel_ops",
                "name": "ops-slack",
                "channel_type": "slack",
                "config": {"webhook_url": "https://hooks.slack.com/services/T/B/X"},
                "recipients": [{"name": "ops", "type": "channel", "target": "#ops"}],
            }
        ]
    }
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(seed), encoding="utf-8")
    monkeypatch.setenv("MESSAGING_SEED_FILE", str(path))

    with TestClient(server.handler) as client:
        service = client.app.state.message_service
        assert service.channels.find_by_id("channel_ops").name == "ops-slack"


@pytest.mark.unit
def test_lifespan_fails_on_missing_seed_file(tmp_path, monkeypatch):
    monkeypatch.setenv("MESSAGING_SEED_FILE", str(tmp_path / "missing.json"))

    with pytest.raises(FileNotFoundError):
        with TestClient(server.handler):
            pass
