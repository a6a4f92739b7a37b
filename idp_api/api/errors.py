"""Error handlers for the application.

Every error leaves the service as ``{"code": ..., "message": ...}`` JSON.
"""
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from idp_api.core import errors
from idp_api.core.errors import ApiError
from idp_api.core.idp.exceptions import IdpError

logger = logging.getLogger(__name__)


def _render(error: ApiError):
    return jsonify(error.to_dict()), error.status


def register_error_handlers(app):
    """Register error handlers with the Flask app."""

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        """Render the normalized error vocabulary."""
        return _render(error)

    @app.errorhandler(IdpError)
    def handle_idp_error(error):
        """Translate gateway failures; the upstream text is forwarded verbatim."""
        logger.warning("IdP failure: %s", error)
        return _render(errors.from_idp_error(error))

    @app.errorhandler(400)
    def bad_request(error):
        return _render(errors.invalid_request_payload())

    @app.errorhandler(404)
    def not_found(error):
        return _render(errors.not_found())

    @app.errorhandler(405)
    def method_not_allowed(error):
        return _render(errors.not_implemented())

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 Internal Server Error."""
        # ALWAYS log the full error; the caller only gets the code
        app.logger.error(f"Internal error: {error}", exc_info=True)
        return _render(errors.internal_server_error())

    @app.errorhandler(Exception)
    def handle_exception(error):
        """Handle uncaught exceptions."""
        # HTTP errors without a dedicated handler (413, 415, ...)
        if isinstance(error, HTTPException):
            if error.code is not None and 400 <= error.code < 500:
                return _render(errors.invalid_request_payload())
            return _render(errors.internal_server_error())

        app.logger.error(f"Unhandled exception: {error}", exc_info=True)
        return _render(errors.internal_server_error())
