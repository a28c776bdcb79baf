from __future__ import annotations

import logging

from flask import Flask, jsonify, session

from ..common.http import error, payload
from ..container import Container
from ..core.exceptions import AuthenticationError, SourceUnavailable, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok", "title": container.options.app_title})

    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        try:
            user = container.auth_service.login(str(payload().get("name") or ""))
        except ValidationError as e:
            return error(str(e), 400)
        except AuthenticationError as e:
            session.clear()
            return error(str(e), 404)
        except SourceUnavailable as e:
            logger.error("Schedule unavailable during login: %s", e)
            return error(f"Startup error: {e}", 503)

        session.clear()
        session["name"] = user.name
        session["role"] = user.role.value
        return jsonify({"success": True, "name": user.name, "role": user.role.value, "is_admin": user.is_admin})

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/me", methods=["GET"], endpoint="me")
    def me():
        user = container.auth_service.restore(session.get("name"), session.get("role"))
        if not user:
            return jsonify({"logged_in": False})
        return jsonify({"logged_in": True, "name": user.name, "role": user.role.value, "is_admin": user.is_admin})
