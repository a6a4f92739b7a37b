"""Flask application factory and bootstrap.

This module provides the create_app() factory function for initializing
the Flask application with all blueprints, error handlers and configuration.
"""
from __future__ import annotations
import logging
from typing import Optional

from flask import Flask

from idp_api.config import AppConfig, load_settings
from idp_api.core.client_provisioning import ClientProvisioningService
from idp_api.core.idp.client import IdpClient

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s:%(lineno)d %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


# ─────────────────────────────────────────────────────────────────────────────
# Application Factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app(config: Optional[AppConfig] = None, client: Optional[IdpClient] = None) -> Flask:
    """Create and configure Flask application.

    Args:
        config: Explicit configuration (loaded from the environment when omitted)
        client: IdP HTTP client (built from the configuration when omitted)
    """
    cfg = config or load_settings()
    configure_logging(cfg.log_level)

    app = Flask(__name__)
    app.config["APP_CONFIG"] = cfg
    app.config["OPENAPI_SPEC_PATH"] = cfg.openapi_spec_path
    app.config["CLIENT_PROVISIONING"] = ClientProvisioningService(cfg, client)

    # Register blueprints
    from idp_api.api import clients, docs, errors, health

    app.register_blueprint(clients.bp, url_prefix="/api/v1")
    app.register_blueprint(health.bp)
    app.register_blueprint(docs.bp)

    # Register error handlers
    errors.register_error_handlers(app)

    mode_label = "DEMO" if cfg.demo_mode else "PRODUCTION"
    logger.info("Mode=%s; idp=%s; realm=%s; client_id=%s", mode_label, cfg.idp_url, cfg.idp_realm, cfg.client_id)
    if cfg.demo_mode:
        logger.warning("Demo mode active - do not deploy with demo credentials")

    return app


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once per process."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    logging.getLogger().setLevel(level.upper())


# ─────────────────────────────────────────────────────────────────────────────
# Application Instance (for Gunicorn)
# ─────────────────────────────────────────────────────────────────────────────
app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=8000, debug=False)
