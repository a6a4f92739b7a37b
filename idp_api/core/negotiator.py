"""Token-endpoint negotiation of caller and administrative identities.

A negotiation is an ordered list of ``GrantAttempt`` objects tried one after
another against the IdP token endpoint. The first accepted attempt wins and
the remaining ones are never issued.

Caller negotiation (Basic-Auth credentials):
    1. resource-owner password grant through the configured public client,
       establishing the username;
    2. client-credentials grant treating username/password as a client
       id/secret, establishing the client id.

Administrative negotiation:
    one password grant with the configured admin identity against the admin
    realm, yielding the token every mutation is performed with.

Secrets never reach the log: attempts are only ever logged through their
redacted form.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Sequence
from urllib.parse import urlencode

from idp_api.core.idp.client import IdpClient
from idp_api.core.idp.exceptions import AuthenticationFailedError, IdpAPIError, IdpError, IdpTransportError

logger = logging.getLogger(__name__)

REDACTED = "xxx"
SECRET_FIELDS = ("password", "client_secret")


@dataclass(frozen=True)
class Credential:
    """Username/password pair taken from a Basic-Auth header."""
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class GrantAttempt:
    """One candidate token request.

    Attributes:
        token_url: Token endpoint the form is posted to
        label: Identity established when the IdP accepts the form
        form: Form-encoded grant body (read-only)
    """
    token_url: str
    label: str
    form: Mapping[str, str]

    def __post_init__(self):
        object.__setattr__(self, "form", MappingProxyType(dict(self.form)))

    @property
    def grant_type(self) -> str:
        return self.form.get("grant_type", "")

    def redacted(self) -> "GrantAttempt":
        """Copy with every secret field replaced by the placeholder."""
        masked = {key: (REDACTED if key in SECRET_FIELDS else value) for key, value in self.form.items()}
        return GrantAttempt(self.token_url, self.label, masked)

    def __str__(self) -> str:
        return urlencode(dict(self.redacted().form))

    def __repr__(self) -> str:
        return f"GrantAttempt(token_url={self.token_url!r}, label={self.label!r}, form={self})"


@dataclass(frozen=True)
class NegotiationResult:
    token: str = field(repr=False)
    identity: str
    grant_type: str


def caller_attempts(credential: Credential, cfg, client: IdpClient) -> List[GrantAttempt]:
    """Build the caller's attempts in priority order."""
    token_url = client.endpoints.token(cfg.idp_realm)
    resource_owner = GrantAttempt(
        token_url,
        credential.username,
        {
            "username": credential.username,
            "password": credential.password,
            "grant_type": "password",
            "client_id": cfg.client_id,
            "client_secret": cfg.client_secret,
        },
    )
    client_credentials = GrantAttempt(
        token_url,
        credential.username,
        {
            "grant_type": "client_credentials",
            "client_id": credential.username,
            "client_secret": credential.password,
        },
    )
    return [resource_owner, client_credentials]


def admin_attempts(cfg, client: IdpClient) -> List[GrantAttempt]:
    """Build the single administrative password grant."""
    return [
        GrantAttempt(
            client.endpoints.token(cfg.idp_admin_realm),
            cfg.idp_admin_user,
            {
                "username": cfg.idp_admin_user,
                "password": cfg.idp_admin_password,
                "grant_type": "password",
                "client_id": cfg.api_client_id,
                "client_secret": cfg.api_client_secret,
            },
        )
    ]


class Negotiator:
    """Runs grant attempts against the IdP token endpoint."""

    def __init__(self, client: IdpClient, cfg):
        self.client = client
        self.cfg = cfg

    def negotiate(self, attempts: Sequence[GrantAttempt]) -> NegotiationResult:
        """Issue attempts in order and return the first success.

        An upstream rejection or a transport failure moves on to the next
        attempt. A malformed token body ends the negotiation immediately.

        Raises:
            AuthenticationFailedError: Every attempt failed and at least one was rejected
            IdpTransportError: Every attempt failed on transport
            MalformedTokenResponseError: Accepted grant without a usable token
        """
        last_error: IdpAPIError | None = None
        last_transport_error: IdpTransportError | None = None

        for attempt in attempts:
            try:
                token = self.client.exchange_token(dict(attempt.form), attempt.token_url)
            except IdpAPIError as exc:
                logger.warning("Failed auth attempt %s", attempt.redacted())
                last_error = exc
                continue
            except IdpTransportError as exc:
                logger.warning("Failed auth attempt %s: %s", attempt.redacted(), exc.message)
                last_transport_error = exc
                continue
            except IdpError:
                logger.error("Aborted auth attempt %s", attempt.redacted())
                raise
            logger.info("Successful auth %s", attempt.redacted())
            return NegotiationResult(token=token, identity=attempt.label, grant_type=attempt.grant_type)

        if last_error is None and last_transport_error is not None:
            logger.error("Failed all auth attempts, token endpoint unreachable")
            raise last_transport_error

        message = last_error.message if last_error is not None else "No auth attempts available"
        logger.warning("Failed all auth attempts %s", message)
        raise AuthenticationFailedError(message, len(attempts))

    def authenticate_caller(self, credential: Credential) -> NegotiationResult:
        return self.negotiate(caller_attempts(credential, self.cfg, self.client))

    def authenticate_admin(self) -> NegotiationResult:
        return self.negotiate(admin_attempts(self.cfg, self.client))
