"""Decoding and validation of inbound client definitions."""
from __future__ import annotations
import json
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Tuple

from idp_api.core import errors

BOOL_FIELDS = {
    "publicClient": "public_client",
    "directAccessGrantsEnabled": "direct_access_grants_enabled",
    "serviceAccountsEnabled": "service_accounts_enabled",
    "standardFlowEnabled": "standard_flow_enabled",
    "implicitFlowEnabled": "implicit_flow_enabled",
}
STRING_FIELDS = {
    "clientId": "client_id",
    "rootUrl": "root_url",
    "adminUrl": "admin_url",
    "description": "description",
}
LIST_FIELDS = {
    "redirectUris": "redirect_uris",
    "webOrigins": "web_origins",
}
SECRET_FIELD = "clientSecret"


@dataclass(frozen=True)
class ClientDefinition:
    """Client registration as submitted by the caller.

    ``id`` and ``clientSecret`` are deliberately not part of it: neither may be
    forwarded to the IdP.
    """
    client_id: str
    public_client: bool = False
    direct_access_grants_enabled: bool = False
    service_accounts_enabled: bool = False
    standard_flow_enabled: bool = False
    implicit_flow_enabled: bool = False
    redirect_uris: Optional[List[str]] = None
    web_origins: Optional[List[str]] = None
    root_url: str = ""
    admin_url: str = ""
    description: str = ""

    def normalized(self, description: Optional[str] = None) -> "ClientDefinition":
        """Apply the rules every definition goes through before reaching the IdP.

        Only confidential clients are managed, and a standard-flow client's
        root/admin URL and web origins follow its first redirect URI.
        """
        updates: dict[str, Any] = {"public_client": False}
        if self.standard_flow_enabled and self.redirect_uris:
            updates["root_url"] = self.redirect_uris[0]
            updates["admin_url"] = self.redirect_uris[0]
            updates["web_origins"] = list(self.redirect_uris)
        if description is not None:
            updates["description"] = description
        return replace(self, **updates)

    def to_representation(self) -> dict:
        """Return the IdP JSON representation (camelCase keys)."""
        rep: dict[str, Any] = {}
        for camel, attr in STRING_FIELDS.items():
            value = getattr(self, attr)
            if value:
                rep[camel] = value
        for camel, attr in BOOL_FIELDS.items():
            rep[camel] = getattr(self, attr)
        for camel, attr in LIST_FIELDS.items():
            value = getattr(self, attr)
            if value is not None:
                rep[camel] = list(value)
        return rep


def decode_json_object(raw: bytes | str) -> dict:
    """Decode a request body that must be a JSON object.

    Raises:
        ApiError: 1003 when the body is not a JSON object
    """
    try:
        payload = json.loads(raw)
    except (ValueError, TypeError):
        raise errors.invalid_request_payload()
    if not isinstance(payload, dict):
        raise errors.invalid_request_payload()
    return payload


def _typed(payload: dict, key: str, expected: type) -> Any:
    value = payload.get(key)
    if value is None:
        return None
    if expected is bool and not isinstance(value, bool):
        raise errors.invalid_request_payload()
    if expected is str and not isinstance(value, str):
        raise errors.invalid_request_payload()
    if expected is list:
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise errors.invalid_request_payload()
    return value


def parse_client_definition(payload: dict) -> ClientDefinition:
    """Build a ClientDefinition from a decoded payload.

    Unknown keys are ignored.

    Raises:
        ApiError: 1003 on wrongly typed fields, 1007 when clientId is missing
    """
    kwargs: dict[str, Any] = {}
    for camel, attr in BOOL_FIELDS.items():
        value = _typed(payload, camel, bool)
        if value is not None:
            kwargs[attr] = value
    for camel, attr in STRING_FIELDS.items():
        value = _typed(payload, camel, str)
        if value is not None:
            kwargs[attr] = value
    for camel, attr in LIST_FIELDS.items():
        value = _typed(payload, camel, list)
        if value is not None:
            kwargs[attr] = list(value)

    if not kwargs.get("client_id"):
        raise errors.missing_required_fields()
    return ClientDefinition(**kwargs)


def parse_secret_proof(payload: dict) -> str:
    """Return the caller-submitted ``clientSecret``.

    Raises:
        ApiError: 1003 when it is not a string, 1007 when missing or empty
    """
    secret = _typed(payload, SECRET_FIELD, str)
    if not secret:
        raise errors.missing_required_fields()
    return secret


def parse_client_request(raw: bytes | str, require_secret: bool = False) -> Tuple[ClientDefinition, Optional[str]]:
    """Decode a request body into a definition and, when required, its secret proof."""
    payload = decode_json_object(raw)
    definition = parse_client_definition(payload)
    secret = parse_secret_proof(payload) if require_secret else None
    return definition, secret
