"""IdP user account operations."""
from __future__ import annotations
import logging
from dataclasses import asdict, dataclass

from .client import IdpClient, first_match, parse_json
from .exceptions import MalformedResponseError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserDefinition:
    username: str
    enabled: bool = True

    def to_representation(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class UserCredential:
    """Credential written through the reset-password endpoint."""
    value: str
    type: str = "password"
    temporary: bool = False

    def __repr__(self) -> str:
        return f"UserCredential(type={self.type!r}, temporary={self.temporary}, value='xxx')"

    def to_representation(self) -> dict:
        return {"type": self.type, "value": self.value, "temporary": self.temporary}


class UserService:
    """Service for managing IdP users inside one realm."""

    def __init__(self, client: IdpClient, realm: str):
        """Initialize user service.

        Args:
            client: IdP HTTP client
            realm: Realm holding the users
        """
        self.client = client
        self.realm = realm

    def create_user(self, token: str, user: UserDefinition) -> None:
        self.client.request("POST", self.client.endpoints.users(self.realm), token=token, json=user.to_representation())
        logger.info("User '%s' created", user.username)

    def lookup_user_id(self, token: str, username: str) -> str:
        """Resolve a username to the IdP internal user identifier.

        Raises:
            ResourceNotFoundError: No user with that username
        """
        url = self.client.endpoints.users(self.realm)
        resp = self.client.request("GET", url, token=token, params={"username": username})
        record = first_match(parse_json(resp, url), "username", username, "User", url)
        user_id = record.get("id")
        if not isinstance(user_id, str) or not user_id:
            raise MalformedResponseError(f"User '{username}' record has no id", url)
        logger.info("User %s id is %s", username, user_id)
        return user_id

    def delete_user(self, token: str, user_uid: str) -> None:
        self.client.request("DELETE", self.client.endpoints.user(self.realm, user_uid), token=token)
        logger.info("User with id=%s deleted", user_uid)

    def set_user_credential(self, token: str, user_uid: str, credential: UserCredential) -> None:
        """Set the user's password credential."""
        url = self.client.endpoints.user_password(self.realm, user_uid)
        self.client.request("PUT", url, token=token, json=credential.to_representation())
        logger.info("Credential of type '%s' set for user id=%s", credential.type, user_uid)
