"""
Flask decorators for caller authentication.

Callers authenticate with HTTP Basic credentials that are negotiated against
the IdP token endpoint (resource-owner grant first, client-credentials grant
second). The established identity is attached to ``g`` for the view.
"""

import logging
from functools import wraps
from typing import Optional

from flask import current_app, g, request

from idp_api.core import errors
from idp_api.core.negotiator import Credential

logger = logging.getLogger(__name__)


def basic_auth_credential() -> Credential:
    """Extract the Basic-Auth credential of the current request.

    Raises:
        ApiError: 1008 when the header is missing or not valid Basic auth
    """
    auth = request.authorization
    if auth is None or auth.type != "basic" or auth.username is None:
        logger.warning("Request to %s without valid basic auth headers", request.path)
        raise errors.invalid_basic_auth_headers()
    return Credential(auth.username, auth.password or "")


def require_basic_auth(fn):
    """
    Decorator negotiating the caller's identity before the view runs.

    No outbound call is made when the Basic-Auth header is missing. Rejected
    negotiations propagate as IdP errors and are rendered by the app error
    handlers (401, code 10000).

    Example:
        @bp.route("/client", methods=["POST"])
        @require_basic_auth
        def create_client():
            identity = get_caller_identity()
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        credential = basic_auth_credential()
        service = current_app.config["CLIENT_PROVISIONING"]
        result = service.authenticate_caller(credential)
        g.caller_identity = result.identity
        return fn(*args, **kwargs)

    return wrapper


def get_caller_identity() -> Optional[str]:
    """
    Identity established by @require_basic_auth for the current request.

    Returns:
        str: Username or client id, or None outside an authenticated view
    """
    return getattr(g, "caller_identity", None)
