"""Health check endpoint."""
from flask import Blueprint, current_app

bp = Blueprint("health", __name__)


@bp.route("/health", methods=["GET"])
def health_check():
    """Probe the IdP admin API; IdP failures are rendered as 500 / 10000."""
    current_app.config["CLIENT_PROVISIONING"].check_health()
    return ("", 200, {"Content-Type": "application/json"})
