from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import g, jsonify, redirect, request, url_for

from app.neic.constants import ROLE_DISPLAY_NAMES, ROLE_LEVELS, Role
from app.neic.models import User


def _as_role(value: Role | str | None) -> Role | None:
    if value is None:
        return None
    if isinstance(value, Role):
        return value
    try:
        return Role(str(value).strip().upper())
    except ValueError:
        return None


def has_role(user_role: Role | str | None, required_role: Role | str) -> bool:
    """True when `user_role` sits at or above `required_role`; unknown roles are denied."""
    user_level = ROLE_LEVELS.get(_as_role(user_role))  # type: ignore[arg-type]
    required_level = ROLE_LEVELS.get(_as_role(required_role))  # type: ignore[arg-type]
    if user_level is None or required_level is None:
        return False
    return user_level >= required_level


def role_display_name(role: Role | str, locale: str = "en") -> str:
    r = _as_role(role)
    if r is None:
        return str(role)
    names = ROLE_DISPLAY_NAMES.get(r) or {}
    return names.get(locale) or names.get("en") or r.value


def current_user() -> User:
    u = getattr(g, "current_user", None)
    if not u:
        raise RuntimeError("No current user")
    return u


def _wants_json() -> bool:
    return request.path.startswith("/api/")


def require_role(required_role: Role | str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(fn)
        def wrapped(*args: Any, **kwargs: Any):
            user: User | None = getattr(g, "current_user", None)
            # Unauthenticated → 401 for API clients, login redirect for pages.
            if not user or not user.is_active:
                if _wants_json():
                    return jsonify({"error": "Unauthorized"}), 401
                nxt = request.full_path or request.path
                # Avoid trailing '?' from full_path when there is no query string.
                if nxt.endswith("?"):
                    nxt = nxt[:-1]
                return redirect(url_for("pages.login", next=nxt))
            # Authenticated but unauthorized → 403 / unauthorized page
            if not has_role(user.role, required_role):
                g.missing_role = _as_role(required_role).value if _as_role(required_role) else str(required_role)
                if _wants_json():
                    return jsonify({"error": "Insufficient permissions"}), 403
                return redirect(url_for("pages.unauthorized"))
            return fn(*args, **kwargs)

        return wrapped

    return decorator


require_admin = require_role(Role.ADMIN)
require_management = require_role(Role.MANAGEMENT)
require_support = require_role(Role.SUPPORT)
