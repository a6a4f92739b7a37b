"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_OPENAPI_SPEC_PATH = str(Path(__file__).resolve().parents[2] / "openapi" / "idp_api.yaml")


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.info("Loaded %s from /run/secrets", secret_name)
                return secret_value
        except OSError as e:
            logger.warning("Failed to read /run/secrets/%s: %s", secret_name, e)

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            return secret_value

    return None


@dataclass
class AppConfig:
    """Application configuration container.

    Built once at process start and handed explicitly to the IdP client and
    the request handlers (via ``app.config["APP_CONFIG"]``).
    """
    demo_mode: bool

    # IdP location
    idp_url: str
    idp_realm: str
    idp_admin_realm: str = "master"
    idp_context_path: str = "/auth"

    # Public client used for the resource-owner password grant
    client_id: str = ""
    client_secret: str = ""

    # Administrative identity
    api_client_id: str = "admin-cli"
    api_client_secret: str = ""
    idp_admin_user: str = "admin"
    idp_admin_password: str = ""

    # Transport
    request_timeout: float = 15.0

    # Service
    log_level: str = "INFO"
    openapi_spec_path: str = DEFAULT_OPENAPI_SPEC_PATH

    def __repr__(self) -> str:
        return (
            f"AppConfig(demo_mode={self.demo_mode}, idp_url={self.idp_url!r}, "
            f"idp_realm={self.idp_realm!r}, client_id={self.client_id!r}, "
            f"api_client_id={self.api_client_id!r}, idp_admin_user={self.idp_admin_user!r})"
        )


def _get_or_generate(var_name: str, demo_default: str | None = None, required: bool = True, demo_mode: bool = False) -> str:
    """Get environment variable or fall back to the demo default."""
    value = os.environ.get(var_name)
    if value:
        return value

    if demo_mode and demo_default is not None:
        logger.warning("[demo-mode] Using default for %s", var_name)
        return demo_default

    if not required:
        return ""

    raise RuntimeError(f"Environment variable {var_name} is required in production mode.")


def _get_secret(secret_name: str, var_name: str, demo_default: str, demo_mode: bool) -> str:
    """Resolve a secret from /run/secrets, then environment, then demo default."""
    value = _load_secret_from_file(secret_name, var_name)
    if value:
        return value
    return _get_or_generate(var_name, demo_default=demo_default, demo_mode=demo_mode)


def _parse_timeout(raw: str) -> float:
    try:
        timeout = float(raw)
    except ValueError:
        raise RuntimeError(f"IDP_REQUEST_TIMEOUT must be a number of seconds, got {raw!r}")
    if timeout <= 0:
        raise RuntimeError("IDP_REQUEST_TIMEOUT must be positive")
    return timeout


def _parse_log_level(raw: str) -> str:
    level = raw.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise RuntimeError(f"LOG_LEVEL must be a logging level name, got {raw!r}")
    return level


def load_settings() -> AppConfig:
    """Load application settings from environment and /run/secrets."""
    demo_mode = os.environ.get("DEMO_MODE", "false").lower() == "true"

    idp_url = _get_or_generate("IDP_URL", demo_default="http://127.0.0.1:8080", demo_mode=demo_mode)
    idp_realm = _get_or_generate("IDP_REALM", demo_default="master", demo_mode=demo_mode)
    idp_admin_realm = os.environ.get("IDP_ADMIN_REALM", "master")
    idp_context_path = os.environ.get("IDP_CONTEXT_PATH", "/auth")

    client_id = _get_or_generate("CLIENT_ID", demo_default="idp-api", demo_mode=demo_mode)
    client_secret = _get_secret("client_secret", "CLIENT_SECRET", "demo-client-secret", demo_mode)

    api_client_id = _get_or_generate("API_CLIENT_ID", demo_default="admin-cli", demo_mode=demo_mode)
    api_client_secret = _get_secret("api_client_secret", "API_CLIENT_SECRET", "demo-api-client-secret", demo_mode)

    idp_admin_user = _get_or_generate("IDP_ADMIN_USER", demo_default="admin", demo_mode=demo_mode)
    idp_admin_password = _get_secret("idp_admin_password", "IDP_ADMIN_PASSWORD", "admin", demo_mode)

    request_timeout = _parse_timeout(os.environ.get("IDP_REQUEST_TIMEOUT", "15"))
    log_level = _parse_log_level(os.environ.get("LOG_LEVEL", "INFO"))
    openapi_spec_path = os.environ.get("OPENAPI_SPEC_PATH", DEFAULT_OPENAPI_SPEC_PATH)

    if demo_mode:
        logger.warning("Demo credentials in use. Do not deploy with these defaults.")

    return AppConfig(
        demo_mode=demo_mode,
        idp_url=idp_url.rstrip("/"),
        idp_realm=idp_realm,
        idp_admin_realm=idp_admin_realm,
        idp_context_path=idp_context_path.rstrip("/"),
        client_id=client_id,
        client_secret=client_secret,
        api_client_id=api_client_id,
        api_client_secret=api_client_secret,
        idp_admin_user=idp_admin_user,
        idp_admin_password=idp_admin_password,
        request_timeout=request_timeout,
        log_level=log_level,
        openapi_spec_path=openapi_spec_path,
    )
