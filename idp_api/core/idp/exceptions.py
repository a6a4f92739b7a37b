"""IdP-specific exceptions for error handling."""


class IdpError(Exception):
    """Base exception for all IdP gateway operations."""
    pass


class IdpAPIError(IdpError):
    """Non-success HTTP status from the IdP.

    Attributes:
        status_code: HTTP status code
        message: Raw response body (opaque diagnostic text)
        endpoint: URL that failed
    """

    def __init__(self, status_code: int, message: str, endpoint: str):
        self.status_code = status_code
        self.message = message
        self.endpoint = endpoint
        super().__init__(f"[{status_code}] {endpoint}: {message}")


class IdpTransportError(IdpError):
    """Connection, timeout or body read failure talking to the IdP."""

    def __init__(self, message: str, endpoint: str):
        self.message = message
        self.endpoint = endpoint
        super().__init__(f"{endpoint}: {message}")


class MalformedResponseError(IdpError):
    """Success status but the body lacks the expected value."""

    def __init__(self, message: str, endpoint: str):
        self.message = message
        self.endpoint = endpoint
        super().__init__(f"{endpoint}: {message}")


class MalformedTokenResponseError(MalformedResponseError):
    """Token endpoint answered 200 without a usable ``access_token``."""
    pass


class ResourceNotFoundError(IdpError):
    """Collection lookup matched no record."""

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} '{key}' not found")


class AuthenticationFailedError(IdpError):
    """Every grant attempt of a negotiation was rejected by the IdP.

    Attributes:
        message: Upstream text of the last rejected attempt
        attempts: Number of attempts issued
    """

    def __init__(self, message: str, attempts: int):
        self.message = message
        self.attempts = attempts
        super().__init__(f"All {attempts} auth attempt(s) failed: {message}")
