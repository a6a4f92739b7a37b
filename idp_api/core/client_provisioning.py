"""
Client Provisioning Service

Orchestrates every inbound client operation against the IdP in a fixed order:

    caller negotiation ──> payload decoding ──> admin negotiation
        ──> [secret-gated authorization: update/delete]
        ──> mutation ──> response

Caller negotiation and payload decoding happen at the HTTP layer (they need
the request); everything from the administrative token onwards lives here.
Nothing is cached between requests: tokens and internal identifiers are
obtained fresh for every call. Multi-step operations are not rolled back when
a later step fails.
"""
from __future__ import annotations
import logging
from typing import Optional

from idp_api.core.authorization import authorize_with_secret
from idp_api.core.idp.client import IdpClient
from idp_api.core.idp.clients import ClientService
from idp_api.core.negotiator import Credential, NegotiationResult, Negotiator
from idp_api.core.validators import ClientDefinition

logger = logging.getLogger(__name__)


class ClientProvisioningService:
    """Create, update and delete client registrations on behalf of callers."""

    def __init__(self, cfg, client: Optional[IdpClient] = None):
        """Initialize the service.

        Args:
            cfg: AppConfig
            client: IdP HTTP client (built from cfg when omitted)
        """
        self.cfg = cfg
        self.client = client or IdpClient.from_config(cfg)
        self.negotiator = Negotiator(self.client, cfg)
        self.clients = ClientService(self.client, cfg.idp_realm)

    def authenticate_caller(self, credential: Credential) -> NegotiationResult:
        logger.info("Authenticating external user")
        return self.negotiator.authenticate_caller(credential)

    def _admin_token(self) -> str:
        logger.info("Authenticating app admin user")
        return self.negotiator.authenticate_admin().token

    def create_client(self, caller_identity: str, definition: ClientDefinition) -> str:
        """Register a new client and return its freshly generated secret."""
        token = self._admin_token()
        definition = definition.normalized(description=f"Client created by {caller_identity}")

        self.clients.create_client(token, definition.to_representation())
        record = self.clients.fetch_client(token, definition.client_id)
        return self.clients.fetch_client_secret(token, record["id"])

    def update_client(self, definition: ClientDefinition, secret_proof: str) -> None:
        """Replace a client's definition once the caller proved its secret."""
        token = self._admin_token()
        descriptor = authorize_with_secret(self.clients, token, definition.client_id, secret_proof)
        self.clients.update_client(token, descriptor.client_uid, definition.normalized().to_representation())

    def delete_client(self, definition: ClientDefinition, secret_proof: str) -> None:
        """Delete a client once the caller proved its secret."""
        token = self._admin_token()
        descriptor = authorize_with_secret(self.clients, token, definition.client_id, secret_proof)
        self.clients.delete_client(token, descriptor.client_uid)

    def check_health(self) -> None:
        self.client.check_health()
