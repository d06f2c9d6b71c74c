from __future__ import annotations

import logging

from flask import Flask, flash, jsonify, redirect, render_template, request, session, url_for

from ..core.exceptions import AuthenticationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        if request.method == "GET":
            if "user_id" in session:
                return redirect(url_for("admin_courses_page"))
            return render_template("login.html")

        data = request.get_json(silent=True) if request.is_json else request.form
        data = data or {}
        try:
            s_user = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))
        except AuthenticationError as e:
            logger.warning("Failed login for %r", data.get("username", ""))
            if request.is_json:
                return jsonify({"success": False, "message": str(e)}), 401
            flash(str(e), "danger")
            return render_template("login.html"), 401

        session.clear()
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        logger.info("User %s logged in as %s", s_user.user_id, s_user.role.value)

        if request.is_json:
            return jsonify({"success": True, "user": {"user_id": s_user.user_id, "name": s_user.full_name, "role": s_user.role.value}})
        return redirect(url_for("admin_courses_page"))

    @app.route("/logout", endpoint="logout")
    def logout():
        session.clear()
        return redirect(url_for("login"))
