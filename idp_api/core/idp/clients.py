"""OAuth client registration operations."""
from __future__ import annotations
import logging

from .client import IdpClient, first_match, parse_json
from .exceptions import MalformedResponseError

logger = logging.getLogger(__name__)


class ClientService:
    """Service for managing client registrations inside one realm."""

    def __init__(self, client: IdpClient, realm: str):
        """Initialize client service.

        Args:
            client: IdP HTTP client
            realm: Realm holding the client registrations
        """
        self.client = client
        self.realm = realm

    def create_client(self, token: str, representation: dict) -> None:
        """Register a new client. The IdP assigns its internal identifier."""
        self.client.request("POST", self.client.endpoints.clients(self.realm), token=token, json=representation)
        logger.info("Client '%s' created", representation.get("clientId"))

    def fetch_client(self, token: str, client_id: str) -> dict:
        """Return the full client record whose public ``clientId`` matches.

        The collection endpoint is read and filtered locally; the single-client
        endpoint needs the internal identifier we are trying to learn.

        Raises:
            ResourceNotFoundError: No client with that clientId
        """
        url = self.client.endpoints.clients(self.realm)
        resp = self.client.request("GET", url, token=token, params={"clientId": client_id})
        record = first_match(parse_json(resp, url), "clientId", client_id, "Client", url)
        if not isinstance(record.get("id"), str) or not record["id"]:
            raise MalformedResponseError(f"Client '{client_id}' record has no id", url)
        logger.info("Client %s id is %s", client_id, record["id"])
        return record

    def lookup_client_id(self, token: str, client_id: str) -> str:
        """Resolve a public clientId to the IdP internal identifier."""
        return self.fetch_client(token, client_id)["id"]

    def fetch_client_secret(self, token: str, client_uid: str) -> str:
        """Return the secret the IdP currently holds for the client.

        Raises:
            MalformedResponseError: Body has no secret value
        """
        url = self.client.endpoints.client_secret(self.realm, client_uid)
        body = parse_json(self.client.request("GET", url, token=token), url)
        value = body.get("value") if isinstance(body, dict) else None
        if not isinstance(value, str) or not value:
            raise MalformedResponseError("Client secret response has no value", url)
        return value

    def update_client(self, token: str, client_uid: str, representation: dict) -> None:
        url = self.client.endpoints.client(self.realm, client_uid)
        self.client.request("PUT", url, token=token, json=representation)
        logger.info("Client '%s' updated (id=%s)", representation.get("clientId"), client_uid)

    def delete_client(self, token: str, client_uid: str) -> None:
        url = self.client.endpoints.client(self.realm, client_uid)
        self.client.request("DELETE", url, token=token)
        logger.info("Client with id=%s deleted", client_uid)
