"""Pytest shared fixtures."""
import json
import os
import pathlib
import sys
from typing import Callable, Union

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Configure test environment BEFORE any app imports
os.environ.setdefault("DEMO_MODE", "true")

import pytest
import requests

from idp_api.config.settings import AppConfig
from idp_api.core.idp.client import IdpClient, IdpEndpoints
from idp_api.flask_app import create_app


CLIENTS_DATA = [
    {
        "id": "8833abea-f37b-4c28-b353-63cafa3d5a26",
        "clientId": "security-admin-console",
        "publicClient": True,
        "directAccessGrantsEnabled": False,
        "serviceAccountsEnabled": False,
        "standardFlowEnabled": True,
        "implicitFlowEnabled": False,
        "redirectUris": ["/auth/admin/demo/console/*"],
    },
    {
        "id": "40b5444c-5990-496d-bb67-64c535df8dc4",
        "clientId": "test",
        "publicClient": False,
        "directAccessGrantsEnabled": False,
        "serviceAccountsEnabled": False,
        "standardFlowEnabled": True,
        "implicitFlowEnabled": False,
        "redirectUris": [],
    },
]
TEST_CLIENT_UID = "40b5444c-5990-496d-bb67-64c535df8dc4"
TEST_CLIENT_SECRET = "test_secret"

USERS_DATA = [
    {
        "id": "06b4f835-a8c7-40f4-887b-cd76c7623267",
        "username": "test",
        "enabled": True,
    }
]
TEST_USER_UID = "06b4f835-a8c7-40f4-887b-cd76c7623267"


def make_config(**overrides) -> AppConfig:
    base = dict(
        demo_mode=False,
        idp_url="https://fake.com",
        idp_realm="demo",
        idp_admin_realm="master",
        idp_context_path="/auth",
        client_id="fake",
        client_secret="fake-secret",
        api_client_id="admin-cli",
        api_client_secret="api-secret",
        idp_admin_user="admin",
        idp_admin_password="admin-pass",
        request_timeout=5.0,
        log_level="DEBUG",
    )
    base.update(overrides)
    return AppConfig(**base)


# ─────────────────────────────────────────────────────────────────────────────
# Fake IdP
# ─────────────────────────────────────────────────────────────────────────────
class StubResponse:
    def __init__(self, status_code: int = 200, payload=None, text: str = None):
        self.status_code = status_code
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text

    def json(self):
        return json.loads(self.text)


Handler = Union[StubResponse, Callable[[dict], StubResponse]]


class FakeIdp:
    """Records every outbound call and answers from registered routes.

    A route answers with a fixed StubResponse or a callable receiving the
    recorded call. Unregistered routes fail the test loudly.
    """

    def __init__(self, config: AppConfig):
        self.config = config
        self.urls = IdpEndpoints(config.idp_url, config.idp_context_path)
        self.routes: dict = {}
        self.calls: list = []

    # Routes
    def on(self, method: str, url: str, handler: Handler) -> "FakeIdp":
        self.routes[(method.upper(), url)] = handler
        return self

    def reply(self, method: str, url: str, status: int = 200, payload=None, text: str = None) -> "FakeIdp":
        return self.on(method, url, self.response(status, payload, text))

    @staticmethod
    def response(status: int = 200, payload=None, text: str = None) -> StubResponse:
        return StubResponse(status, payload, text)

    def __call__(self, method, url, **kwargs):
        call = {
            "method": method.upper(),
            "url": url,
            "headers": kwargs.get("headers") or {},
            "json": kwargs.get("json"),
            "data": kwargs.get("data"),
            "params": kwargs.get("params"),
            "timeout": kwargs.get("timeout"),
        }
        self.calls.append(call)
        handler = self.routes.get((call["method"], url))
        if handler is None:
            raise RuntimeError(f"Unexpected HTTP {call['method']} in unit test: {url}")
        if callable(handler):
            return handler(call)
        return handler

    # Inspection
    def calls_to(self, method: str, url: str) -> list:
        return [c for c in self.calls if c["method"] == method.upper() and c["url"] == url]

    def token_calls(self) -> list:
        return [c for c in self.calls if c["url"].endswith("/protocol/openid-connect/token")]

    @property
    def token_url(self) -> str:
        return self.urls.token(self.config.idp_realm)

    @property
    def admin_token_url(self) -> str:
        return self.urls.token(self.config.idp_admin_realm)

    @property
    def clients_url(self) -> str:
        return self.urls.clients(self.config.idp_realm)

    def client_url(self, uid: str = TEST_CLIENT_UID) -> str:
        return self.urls.client(self.config.idp_realm, uid)

    def client_secret_url(self, uid: str = TEST_CLIENT_UID) -> str:
        return self.urls.client_secret(self.config.idp_realm, uid)

    @property
    def users_url(self) -> str:
        return self.urls.users(self.config.idp_realm)

    # Token endpoint behaviour
    def grant_tokens(self, accept_password: bool = True, accept_client_credentials: bool = True) -> "FakeIdp":
        """Answer the caller token endpoint per grant type."""

        def _token(call):
            grant = call["data"]["grant_type"]
            if grant == "password" and accept_password:
                return StubResponse(200, {"access_token": "caller-token", "token_type": "bearer"})
            if grant == "client_credentials" and accept_client_credentials:
                return StubResponse(200, {"access_token": "client-token", "token_type": "bearer"})
            return StubResponse(401, text='{"error":"invalid_grant","error_description":"Invalid user credentials"}')

        return self.on("POST", self.token_url, _token)

    def admin_token(self, token: str = "admin-token") -> "FakeIdp":
        return self.reply("POST", self.admin_token_url, 200, {"access_token": token, "expires_in": 60})


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _network_guard(monkeypatch, request):
    """
    Prevent unit tests from hitting a live IdP.

    Integration tests are explicitly marked with @pytest.mark.integration and
    are allowed to perform real HTTP calls by skipping this fixture.
    """
    if request.node.get_closest_marker("integration"):
        return

    def _unexpected(method, url, *args, **kwargs):
        raise RuntimeError(f"Unexpected HTTP {method} in unit test: {url}")

    monkeypatch.setattr(requests, "request", _unexpected)


@pytest.fixture(name="make_config")
def make_config_fixture():
    return make_config


@pytest.fixture()
def config() -> AppConfig:
    return make_config()


@pytest.fixture()
def clients_data() -> list:
    return [dict(record) for record in CLIENTS_DATA]


@pytest.fixture()
def users_data() -> list:
    return [dict(record) for record in USERS_DATA]


@pytest.fixture()
def fake_idp(monkeypatch, config, _network_guard) -> FakeIdp:
    """Fake IdP with no routes; tests register what they need."""
    fake = FakeIdp(config)
    monkeypatch.setattr(requests, "request", fake)
    return fake


@pytest.fixture()
def healthy_idp(fake_idp) -> FakeIdp:
    """Fake IdP answering the whole happy path of every client operation."""
    fake_idp.grant_tokens()
    fake_idp.admin_token()
    fake_idp.reply("GET", fake_idp.urls.health(), 200, text="")
    fake_idp.reply("GET", fake_idp.clients_url, 200, CLIENTS_DATA)
    fake_idp.reply("POST", fake_idp.clients_url, 201, text="")
    fake_idp.reply("GET", fake_idp.client_secret_url(), 200, {"type": "secret", "value": TEST_CLIENT_SECRET})
    fake_idp.reply("PUT", fake_idp.client_url(), 204, text="")
    fake_idp.reply("DELETE", fake_idp.client_url(), 204, text="")
    return fake_idp


@pytest.fixture()
def idp_client(config) -> IdpClient:
    return IdpClient.from_config(config)


# ─────────────────────────────────────────────────────────────────────────────
# Flask Test Client
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture()
def flask_app(config):
    flask_app = create_app(config)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture()
def client(flask_app):
    """Flask test client; outbound calls go to whichever fake IdP is active."""
    with flask_app.test_client() as client:
        yield client


# ─────────────────────────────────────────────────────────────────────────────
# Pytest Configuration
# ─────────────────────────────────────────────────────────────────────────────
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (requires a running IdP)"
    )
