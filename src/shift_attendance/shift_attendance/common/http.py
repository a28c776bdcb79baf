from __future__ import annotations

from functools import wraps
from typing import Any

from flask import jsonify, request, session

from ..core.enums import Role


def payload() -> dict[str, Any]:
    """JSON body or form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def error(message: str, status: int, **extra: Any):
    return jsonify({"success": False, "message": message, **extra}), status


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "name" not in session:
            return error("Please log in to continue.", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "name" not in session:
            return error("Please log in to continue.", 401)
        if session.get("role") != Role.ADMIN.value:
            return error("Admin only.", 403)
        return view(*args, **kwargs)

    return wrapper
