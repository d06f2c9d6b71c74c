"""Socket.IO bridge between open link pages and the change feed.

Client protocol:
    -> watch_course {"programme": ..., "semester": ...}
    <- link_state   LinkSnapshot.to_dict() plus "qr", a PNG data URL of the payload,
                    on open, on every change and on each clock tick
    -> unwatch_course / disconnect closes the session
"""

from __future__ import annotations

import logging
import threading
from typing import Dict

from flask import request
from flask_socketio import SocketIO

from ..container import Container
from ..link.session import LinkSnapshot, LinkViewerSession
from ..link.token import qr_data_url

logger = logging.getLogger(__name__)


def register(socketio: SocketIO, container: Container) -> None:
    sessions: Dict[str, LinkViewerSession] = {}
    lock = threading.Lock()

    def _close(sid: str) -> None:
        with lock:
            link = sessions.pop(sid, None)
        if link is not None:
            link.close()

    @socketio.on("watch_course")
    def on_watch_course(data):
        sid = request.sid
        data = data or {}
        _close(sid)

        def push(snap: LinkSnapshot) -> None:
            body = snap.to_dict()
            # The image shown is rendered from this exact payload.
            body["qr"] = qr_data_url(snap.payload)
            socketio.emit("link_state", body, to=sid)

        link = container.open_link_session(
            programme=str(data.get("programme") or ""),
            semester=str(data.get("semester") or ""),
            live=True,
            on_change=push,
        )
        with lock:
            sessions[sid] = link

        try:
            link.open()
        except Exception:
            _close(sid)
            raise

        # Error state is terminal: nothing more will be pushed for this watch.
        if link.snapshot().error:
            _close(sid)

    @socketio.on("unwatch_course")
    def on_unwatch_course(data=None):
        _close(request.sid)

    @socketio.on("disconnect")
    def on_disconnect(*args):
        _close(request.sid)

    logger.debug("Socket.IO link events registered")
