from unittest.mock import MagicMock

import pytest
from flask import Flask

from idp_api.api.decorators import basic_auth_credential, get_caller_identity, require_basic_auth
from idp_api.core.errors import ApiError
from idp_api.core.negotiator import NegotiationResult


@pytest.fixture()
def app():
    app = Flask(__name__)
    service = MagicMock()
    service.authenticate_caller.return_value = NegotiationResult("tok", "alice", "password")
    app.config["CLIENT_PROVISIONING"] = service
    return app


def test_credential_from_basic_header(app):
    with app.test_request_context(headers={"Authorization": "Basic YWxpY2U6cHc="}):
        credential = basic_auth_credential()
    assert (credential.username, credential.password) == ("alice", "pw")


def test_credential_missing_header(app):
    with app.test_request_context():
        with pytest.raises(ApiError) as exc_info:
            basic_auth_credential()
    assert exc_info.value.code == "1008"


def test_require_basic_auth_sets_identity(app):
    @require_basic_auth
    def view():
        return get_caller_identity()

    with app.test_request_context(headers={"Authorization": "Basic YWxpY2U6cHc="}):
        assert view() == "alice"

    (credential,), _ = app.config["CLIENT_PROVISIONING"].authenticate_caller.call_args
    assert credential.username == "alice"


def test_require_basic_auth_skips_negotiation_without_header(app):
    @require_basic_auth
    def view():
        return "unreachable"

    with app.test_request_context():
        with pytest.raises(ApiError):
            view()
    app.config["CLIENT_PROVISIONING"].authenticate_caller.assert_not_called()


def test_identity_outside_request_view(app):
    with app.test_request_context():
        assert get_caller_identity() is None
