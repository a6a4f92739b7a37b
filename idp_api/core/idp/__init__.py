"""IdP admin API client library.

Architecture:
- client.py: HTTP client, endpoint templates, token exchange, error normalization
- clients.py: OAuth client registration operations
- users.py: User account operations
- exceptions.py: Typed exceptions for error handling

Usage:
    from idp_api.core.idp import IdpClient, ClientService

    client = IdpClient("http://keycloak:8080")
    clients = ClientService(client, "demo")
    record = clients.fetch_client(token, "my-app")
"""
from .client import (
    IdpClient,
    IdpEndpoints,
    REQUEST_TIMEOUT,
    SUCCESS_STATUSES,
    first_match,
    parse_json,
)
from .clients import ClientService
from .users import UserService, UserDefinition, UserCredential
from .exceptions import (
    IdpError,
    IdpAPIError,
    IdpTransportError,
    MalformedResponseError,
    MalformedTokenResponseError,
    ResourceNotFoundError,
    AuthenticationFailedError,
)

__all__ = [
    # Client
    "IdpClient",
    "IdpEndpoints",
    "REQUEST_TIMEOUT",
    "SUCCESS_STATUSES",
    "first_match",
    "parse_json",

    # Services
    "ClientService",
    "UserService",
    "UserDefinition",
    "UserCredential",

    # Exceptions
    "IdpError",
    "IdpAPIError",
    "IdpTransportError",
    "MalformedResponseError",
    "MalformedTokenResponseError",
    "ResourceNotFoundError",
    "AuthenticationFailedError",
]
