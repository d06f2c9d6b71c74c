from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.web import admin_required, domain_error_response, error_response
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/locations", methods=["POST"], endpoint="api_locations_publish")
    @admin_required
    def api_locations_publish():
        data = request.get_json(silent=True) or request.form
        try:
            sample = container.location_service.publish_location(data.get("latitude"), data.get("longitude"))
            return jsonify({"success": True, "location": sample.to_dict()}), 201
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Publishing location failed")
            return error_response("System error while saving the location", 500)

    @app.route("/api/locations/latest", methods=["GET"], endpoint="api_locations_latest")
    def api_locations_latest():
        sample = container.location_service.latest_location()
        return jsonify({"success": True, "location": sample.to_dict() if sample else None})
