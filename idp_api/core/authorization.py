"""Secret-gated authorization for mutating client operations.

The IdP has no notion of one caller owning a client registration, so the right
to update or delete a client is proven by knowing its current secret. The
secret is always fetched live with the administrative token and compared with
the caller's proof before any mutating call is allowed.
"""
from __future__ import annotations
import hmac
import logging
from dataclasses import dataclass

from idp_api.core import errors
from idp_api.core.idp.clients import ClientService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceDescriptor:
    """Location of one client registration inside the IdP."""
    idp_url: str
    realm: str
    client_uid: str


def secrets_match(current: str, proof: str) -> bool:
    """Exact equality, compared in constant time.

    JSON bodies may carry lone surrogate escapes, so both sides are encoded
    with ``surrogatepass``.
    """
    return hmac.compare_digest(
        current.encode("utf-8", "surrogatepass"),
        proof.encode("utf-8", "surrogatepass"),
    )


def authorize_with_secret(clients: ClientService, admin_token: str, client_id: str, proof: str) -> ResourceDescriptor:
    """Resolve the client and check the caller's secret proof against the IdP.

    Args:
        clients: Client service bound to the managed realm
        admin_token: Administrative bearer token
        client_id: Public clientId addressed by the caller
        proof: Secret submitted by the caller

    Returns:
        Descriptor of the client the caller may now mutate

    Raises:
        ApiError: 1009 when the proof does not match
        IdpError: Lookup or secret fetch failed
    """
    record = clients.fetch_client(admin_token, client_id)
    current = clients.fetch_client_secret(admin_token, record["id"])

    if not secrets_match(current, proof):
        logger.warning("Bad client secret submitted for client '%s'", client_id)
        raise errors.bad_client_secret()

    return ResourceDescriptor(clients.client.endpoints.base_url, clients.realm, record["id"])
