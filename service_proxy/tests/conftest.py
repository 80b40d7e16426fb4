"""
Shared fixtures for Proxy service tests.
"""

import pytest
from unittest.mock import MagicMock

from service_proxy.app.adapters.evaluation_client import EvaluationClient, ToggleStatus, Variant
from shared.config import get_config

CLIENT_KEY = "client-secret"
SERVER_TOKEN = "server-secret"


def build_client(ready: bool = True) -> MagicMock:
    """Mock evaluation client; call ``emit_ready()`` to fire the ready notification."""
    client = MagicMock(spec=EvaluationClient)
    state = {"ready": ready}
    callbacks = []

    client.is_ready.side_effect = lambda: state["ready"]
    client.on_ready.side_effect = callbacks.append

    def emit_ready():
        state["ready"] = True
        for callback in list(callbacks):
            callback()

    client.emit_ready = emit_ready
    client.get_enabled_toggles.return_value = [
        ToggleStatus(name="new-checkout", enabled=True, variant=Variant(name="blue", enabled=True)),
    ]
    client.get_defined_toggles.return_value = [
        ToggleStatus(name="new-checkout", enabled=True),
        ToggleStatus(name="dark-mode", enabled=False),
    ]
    client.get_feature_toggle_definitions.return_value = [
        {"name": "new-checkout", "enabled": True, "strategies": [{"name": "default"}]},
    ]
    client.register_metrics.return_value = None
    return client


@pytest.fixture
def ready_client():
    return build_client(ready=True)


@pytest.fixture
def not_ready_client():
    return build_client(ready=False)


@pytest.fixture
def proxy_config():
    return get_config(
        "proxy",
        3000,
        client_keys=f"{CLIENT_KEY}, rotated-secret",
        server_side_tokens=SERVER_TOKEN,
    )


@pytest.fixture
def metrics_payload():
    return {
        "appName": "web",
        "instanceId": "browser-1",
        "environment": "production",
        "bucket": {
            "start": "2024-01-01T00:00:00Z",
            "stop": "2024-01-01T00:01:00Z",
            "toggles": {
                "new-checkout": {"yes": 10, "no": 2, "variants": {"blue": 4}},
            },
        },
    }
