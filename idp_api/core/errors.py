"""Stable error vocabulary returned to API callers.

Every failure that reaches an inbound caller is an ``ApiError``: a versioned
``code``, a human readable ``message`` and the HTTP status it is served with.
The codes are part of the public contract and must never be renumbered.
"""
from __future__ import annotations

from idp_api.core.idp.exceptions import (
    AuthenticationFailedError,
    IdpAPIError,
    IdpError,
    IdpTransportError,
    MalformedResponseError,
    ResourceNotFoundError,
)

NOT_FOUND = "1000"
NOT_IMPLEMENTED = "1001"
INVALID_ID = "1002"
INVALID_REQUEST_PAYLOAD = "1003"
QUERY_PARAM_MISSING = "1004"
PARAM_START_BAD_VALUE = "1005"
PARAM_COUNT_BAD_VALUE = "1006"
MISSING_REQUIRED_FIELDS = "1007"
INVALID_BASIC_AUTH_HEADERS = "1008"
BAD_CLIENT_SECRET = "1009"
INTERNAL_SERVER_ERROR = "1010"
UPSTREAM_FAILURE = "10000"


class ApiError(Exception):
    """Normalized API error with code, message and HTTP status."""

    def __init__(self, status: int, code: str, message: str):
        self.status = status
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

    def to_dict(self) -> dict:
        """Convert to the ``{"code", "message"}`` response body."""
        return {"code": self.code, "message": self.message}


# ─────────────────────────────────────────────────────────────────────────────
# Factories
# ─────────────────────────────────────────────────────────────────────────────
def not_found() -> ApiError:
    return ApiError(404, NOT_FOUND, "Endpoint Not Found")


def not_implemented() -> ApiError:
    return ApiError(405, NOT_IMPLEMENTED, "Api endpoint exists but is not yet implemented")


def invalid_id(detail: str | None = None) -> ApiError:
    message = "Invalid object ID"
    if detail:
        message = f"{message}: {detail}"
    return ApiError(404, INVALID_ID, message)


def invalid_request_payload() -> ApiError:
    return ApiError(400, INVALID_REQUEST_PAYLOAD, "Invalid Request payload")


def query_param_missing() -> ApiError:
    return ApiError(400, QUERY_PARAM_MISSING, "Query param specified but value missing")


def param_start_bad_value() -> ApiError:
    return ApiError(400, PARAM_START_BAD_VALUE, "Query param start must be positive integer")


def param_count_bad_value() -> ApiError:
    return ApiError(400, PARAM_COUNT_BAD_VALUE, "Query param count must be positive integer")


def missing_required_fields() -> ApiError:
    return ApiError(400, MISSING_REQUIRED_FIELDS, "Missing required fields")


def invalid_basic_auth_headers() -> ApiError:
    return ApiError(401, INVALID_BASIC_AUTH_HEADERS, "Invalid basic auth headers")


def bad_client_secret() -> ApiError:
    return ApiError(401, BAD_CLIENT_SECRET, "Bad client secret")


def internal_server_error() -> ApiError:
    return ApiError(500, INTERNAL_SERVER_ERROR, "InternalServerError")


def upstream_failure(message: str, status: int = 500) -> ApiError:
    """Wrap opaque upstream diagnostic text under the generic upstream code."""
    return ApiError(status, UPSTREAM_FAILURE, message)


def from_idp_error(error: IdpError) -> ApiError:
    """Translate a gateway failure into the caller-facing vocabulary.

    Rejected negotiations are 401, a clientId with no registration is 404,
    and every other upstream or transport failure is 500. The upstream text
    is forwarded as-is.
    """
    if isinstance(error, AuthenticationFailedError):
        return upstream_failure(error.message, status=401)
    if isinstance(error, ResourceNotFoundError):
        return invalid_id(str(error))
    if isinstance(error, (IdpAPIError, IdpTransportError, MalformedResponseError)):
        return upstream_failure(error.message)
    return upstream_failure(str(error))
