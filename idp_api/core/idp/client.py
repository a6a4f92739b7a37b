"""Low-level HTTP client for the IdP admin API.

Handles endpoint templating, bearer headers, token exchange and the
normalization of every non-success response into ``IdpAPIError``.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from .exceptions import (
    IdpAPIError,
    IdpTransportError,
    MalformedResponseError,
    MalformedTokenResponseError,
    ResourceNotFoundError,
)

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 15
SUCCESS_STATUSES = (200, 201, 204)
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class IdpEndpoints:
    """URL templates of the IdP admin API."""
    base_url: str
    context_path: str = "/auth"

    @property
    def root(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.context_path}"

    def health(self) -> str:
        return f"{self.root}/admin"

    def token(self, realm: str) -> str:
        return f"{self.root}/realms/{realm}/protocol/openid-connect/token"

    def clients(self, realm: str) -> str:
        return f"{self.root}/admin/realms/{realm}/clients"

    def client(self, realm: str, client_uid: str) -> str:
        return f"{self.clients(realm)}/{client_uid}"

    def client_secret(self, realm: str, client_uid: str) -> str:
        return f"{self.client(realm, client_uid)}/client-secret"

    def users(self, realm: str) -> str:
        return f"{self.root}/admin/realms/{realm}/users"

    def user(self, realm: str, user_uid: str) -> str:
        return f"{self.users(realm)}/{user_uid}"

    def user_password(self, realm: str, user_uid: str) -> str:
        return f"{self.user(realm, user_uid)}/reset-password"


class IdpClient:
    """HTTP client for the IdP admin API.

    Tokens are passed per call and never stored on the client, so one
    instance can be shared by all requests of the process.

    Usage:
        client = IdpClient("http://keycloak:8080")
        token = client.exchange_token(form, client.endpoints.token("master"))
        resp = client.request("GET", client.endpoints.clients("demo"), token=token)
    """

    def __init__(self, base_url: str, context_path: str = "/auth", timeout: float = REQUEST_TIMEOUT):
        """Initialize IdP client.

        Args:
            base_url: IdP base URL (scheme, host and port)
            context_path: Path prefix of the IdP application (``/auth`` on legacy Keycloak)
            timeout: Transport-level deadline for each call, in seconds
        """
        self.endpoints = IdpEndpoints(base_url.rstrip("/"), context_path.rstrip("/"))
        self.timeout = timeout

    @classmethod
    def from_config(cls, cfg) -> "IdpClient":
        return cls(cfg.idp_url, cfg.idp_context_path, cfg.request_timeout)

    def request(
        self,
        method: str,
        url: str,
        token: Optional[str] = None,
        json: Any = None,
        data: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """Execute a single outbound call.

        Args:
            method: HTTP method
            url: Absolute endpoint URL
            token: Bearer token (omitted for the token exchange itself)
            json: JSON payload
            data: Form payload; switches the content type to form encoding
            params: Query parameters

        Returns:
            Response object with a success status

        Raises:
            IdpAPIError: On any status other than 200/201/204
            IdpTransportError: On connection or body read failure
        """
        headers = {"Content-Type": FORM_CONTENT_TYPE if data is not None else JSON_CONTENT_TYPE}
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"

        logger.debug("%s %s", method, url)
        try:
            resp = requests.request(
                method,
                url,
                headers=headers,
                json=json,
                data=data,
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("Transport failure on %s %s: %s", method, url, exc)
            raise IdpTransportError(str(exc), url)

        self._handle_error(resp, url)
        return resp

    def exchange_token(self, form: Dict[str, str], token_url: str) -> str:
        """Post a grant body to the token endpoint and return the bearer token.

        Raises:
            IdpAPIError: Grant rejected
            IdpTransportError: Token endpoint unreachable
            MalformedTokenResponseError: No ``access_token`` in a success body
        """
        resp = self.request("POST", token_url, data=form)
        try:
            body = resp.json()
        except ValueError:
            raise MalformedTokenResponseError("Token response is not valid JSON", token_url)
        token = body.get("access_token") if isinstance(body, dict) else None
        if not token or not isinstance(token, str):
            raise MalformedTokenResponseError("Token response has no access_token", token_url)
        return token

    def check_health(self) -> None:
        """Probe the IdP admin root; raises on any failure."""
        self.request("GET", self.endpoints.health())

    def _handle_error(self, resp: requests.Response, url: str) -> None:
        """Centralized error handling for HTTP responses.

        Raises:
            IdpAPIError: If response status is not a success status
        """
        if resp.status_code not in SUCCESS_STATUSES:
            logger.warning("Response code from URL: %s is %d", url, resp.status_code)
            logger.warning("%s", resp.text)
            raise IdpAPIError(resp.status_code, resp.text, url)


# ─────────────────────────────────────────────────────────────────────────────
# Payload helpers
# ─────────────────────────────────────────────────────────────────────────────
def parse_json(resp: requests.Response, url: str) -> Any:
    """Decode a success body, raising MalformedResponseError when it is not JSON."""
    try:
        return resp.json()
    except ValueError:
        raise MalformedResponseError("Response body is not valid JSON", url)


def first_match(records: Any, field: str, value: str, kind: str, url: str = "") -> dict:
    """Return the first record whose ``field`` equals ``value`` exactly.

    The IdP does not guarantee uniqueness of the field, so several matches are
    logged and the first one wins.

    Raises:
        MalformedResponseError: If the payload is not a list
        ResourceNotFoundError: If nothing matches
    """
    if not isinstance(records, list):
        raise MalformedResponseError(f"Expected a list of {kind} records", url)

    matches: List[dict] = [r for r in records if isinstance(r, dict) and r.get(field) == value]
    if not matches:
        raise ResourceNotFoundError(kind, value)
    if len(matches) > 1:
        logger.warning("Found %d %s records with %s=%s, using the first", len(matches), kind, field, value)
    return matches[0]
