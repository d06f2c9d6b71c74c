from __future__ import annotations

import logging

from flask import Flask, Response, jsonify, render_template

from ..core.constants import COURSE_NOT_FOUND_MESSAGE, LOAD_FAILED_MESSAGE
from ..core.enums import ViewState
from ..container import Container
from .session import LinkSnapshot
from .token import qr_data_url, render_qr_png

logger = logging.getLogger(__name__)


def _http_status(snap: LinkSnapshot) -> int:
    if snap.state is not ViewState.ERROR:
        return 200
    if snap.error == COURSE_NOT_FOUND_MESSAGE:
        return 404
    if snap.error == LOAD_FAILED_MESSAGE:
        return 503
    return 400


def register(app: Flask, container: Container) -> None:
    def _snapshot(programme: str, semester: str) -> LinkSnapshot:
        # One-shot session: open, read, always release.
        with container.open_link_session(programme=programme, semester=semester) as link:
            return link.snapshot()

    @app.route("/link/<path:programme>/<semester>", endpoint="link_page")
    def link_page(programme: str, semester: str):
        """Public page staff put on the projector; live updates arrive over Socket.IO."""

        snap = _snapshot(programme, semester)
        return render_template(
            "link.html", snap=snap, qr=qr_data_url(snap.payload), programme=programme, semester=semester
        ), _http_status(snap)

    @app.route("/api/link/<path:programme>/<semester>", endpoint="api_link_snapshot")
    def api_link_snapshot(programme: str, semester: str):
        snap = _snapshot(programme, semester)
        body = snap.to_dict()
        body["success"] = snap.state is not ViewState.ERROR
        return jsonify(body), _http_status(snap)

    @app.route("/qr/<path:programme>/<semester>.png", endpoint="link_qr_image")
    def link_qr_image(programme: str, semester: str):
        snap = _snapshot(programme, semester)
        if not snap.payload:
            # Inactive link, unknown course or bad semester: no code is rendered.
            message = snap.error or "Link is Inactive"
            return jsonify({"success": False, "message": message}), (_http_status(snap) if snap.error else 404)

        png = render_qr_png(snap.payload)
        return Response(png, mimetype="image/png", headers={"Cache-Control": "no-store"})
