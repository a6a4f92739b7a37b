"""Client registration endpoints (/api/v1/client).

All three operations authenticate the caller with HTTP Basic credentials.
Update and delete additionally require the client's current secret in the
``clientSecret`` body field.
"""
from __future__ import annotations
import logging

from flask import Blueprint, current_app, jsonify, request

from idp_api.api.decorators import get_caller_identity, require_basic_auth
from idp_api.core.client_provisioning import ClientProvisioningService
from idp_api.core.validators import parse_client_request

bp = Blueprint("clients", __name__)

logger = logging.getLogger(__name__)

EMPTY_JSON_RESPONSE = ("", 201, {"Content-Type": "application/json"})


def _service() -> ClientProvisioningService:
    return current_app.config["CLIENT_PROVISIONING"]


@bp.route("/client", methods=["POST"])
@require_basic_auth
def create_client():
    """Register a client and return its secret."""
    definition, _ = parse_client_request(request.get_data())
    secret = _service().create_client(get_caller_identity(), definition)
    return jsonify({"value": secret}), 201


@bp.route("/client", methods=["PUT"])
@require_basic_auth
def update_client():
    """Replace a client's definition (secret proof required)."""
    definition, secret = parse_client_request(request.get_data(), require_secret=True)
    _service().update_client(definition, secret)
    return EMPTY_JSON_RESPONSE


@bp.route("/client", methods=["DELETE"])
@require_basic_auth
def delete_client():
    """Delete a client (secret proof required)."""
    definition, secret = parse_client_request(request.get_data(), require_secret=True)
    _service().delete_client(definition, secret)
    logger.info("Client '%s' deleted on behalf of %s", definition.client_id, get_caller_identity())
    return EMPTY_JSON_RESPONSE
