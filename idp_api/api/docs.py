"""Documentation endpoints exposing the service's OpenAPI description."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from flask import Blueprint, Response, current_app, jsonify

from idp_api.core import errors

bp = Blueprint("docs", __name__)

logger = logging.getLogger(__name__)


def _spec_path() -> Path:
    """Resolve the OpenAPI document path."""
    override = current_app.config.get("OPENAPI_SPEC_PATH")
    if override:
        return Path(override)
    return Path(current_app.root_path).parent / "openapi" / "idp_api.yaml"


def _read_spec() -> str:
    path = _spec_path()
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Error while reading OpenAPI file %s: %s", path, exc)
        raise errors.internal_server_error()


@bp.route("/swagger.yml", methods=["GET"])
def swagger_document() -> Response:
    """Serve the OpenAPI description as YAML."""
    return Response(_read_spec(), status=200, mimetype="text/yaml")


@bp.route("/openapi.json", methods=["GET"])
def openapi_document() -> Response:
    """Serve the OpenAPI description as JSON."""
    try:
        spec: Any = yaml.safe_load(_read_spec())
    except yaml.YAMLError as exc:
        logger.error("Invalid OpenAPI YAML: %s", exc)
        raise errors.internal_server_error()
    return jsonify(spec)
