from __future__ import annotations

import secrets
from datetime import datetime, timedelta

from flask import Blueprint, current_app, g, jsonify, redirect, render_template, request, session, url_for
from werkzeug.security import check_password_hash, generate_password_hash

from app.neic.audit import record_event
from app.neic.constants import (
    AUDIT_LOGIN_FAILED,
    AUDIT_LOGIN_SUCCESS,
    AUDIT_LOGOUT,
    AUDIT_PASSWORD_RESET_COMPLETED,
    AUDIT_PASSWORD_RESET_REQUESTED,
    Role,
)
from app.neic.db import db_session
from app.neic.i18n import normalize_locale
from app.neic.mailer import MailError, password_reset_email, send_email
from app.neic.models import PasswordResetToken, User
from app.neic.ratelimit import LoginLimiter
from app.neic.security import ensure_csrf_token
from app.neic.utils import is_development, request_payload

bp = Blueprint("auth", __name__)

RESET_TOKEN_TTL = timedelta(minutes=15)
MIN_RESET_PASSWORD_LENGTH = 8
FORGOT_PASSWORD_MESSAGE = "If an account with that email exists, we have sent a password reset link."
LOCKED_OUT_MESSAGE = "Too many login attempts. Please try again later."


def _limiter() -> LoginLimiter:
    return current_app.extensions["login_limiter"]


def _safe_next(nxt: str) -> str | None:
    # Only local paths, never protocol-relative.
    nxt = (nxt or "").strip()
    if nxt.startswith("/") and not nxt.startswith("//"):
        return nxt
    return None


def session_user_payload(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "is_active": user.is_active,
    }


def dashboard_path_for(user: User) -> str:
    if user.role == Role.ADMIN.value:
        return url_for("pages.admin_dashboard")
    if user.role == Role.MANAGEMENT.value:
        return url_for("pages.management_dashboard")
    if user.role == Role.SUPPORT.value:
        return url_for("pages.support_dashboard")
    return url_for("pages.unauthorized")


def load_current_user() -> None:
    """
    Loads g.current_user from the signed session cookie.
    The user is re-read on every request, so deactivation applies immediately.
    """
    if request.path.startswith(("/static/", "/health", "/healthz")):
        g.current_user = None
        return

    user_id = session.get("user_id")
    if not user_id:
        g.current_user = None
        return

    try:
        user = db_session().get(User, int(user_id))
    except (TypeError, ValueError):
        user = None
    if not user or not user.is_active:
        session.pop("user_id", None)
        g.current_user = None
        return
    g.current_user = user


def authenticate(email: str, password: str) -> tuple[User | None, str | None, int]:
    """
    Credential check with lockout. Returns (user, error, status).
    Lockout bookkeeping is skipped entirely in development.
    """
    limiter = _limiter()
    enforce = not is_development()

    if enforce and limiter.is_locked(email):
        current_app.logger.warning("Login locked out email=%s request_id=%s", email, getattr(g, "request_id", None))
        return None, LOCKED_OUT_MESSAGE, 429

    s = db_session()
    user = s.query(User).filter(User.email == email).one_or_none()
    if not user or not user.is_active or not check_password_hash(user.password_hash, password):
        if enforce:
            limiter.record_failure(email)
        if user is not None:
            record_event(s, actor=user, action=AUDIT_LOGIN_FAILED, metadata={"reason": "Invalid credentials"})
            s.commit()
        return None, "Invalid credentials.", 401

    limiter.reset(email)
    user.last_login_at = datetime.utcnow()
    record_event(s, actor=user, action=AUDIT_LOGIN_SUCCESS)
    s.commit()
    return user, None, 200


@bp.post("/login")
def login():
    data = request_payload()
    email = str(data.get("email") or "").strip().lower()
    password = str(data.get("password") or "")
    nxt = _safe_next(str(data.get("next") or ""))
    wants_json = request.is_json

    if not email or not password:
        if wants_json:
            return jsonify({"error": "Email and password are required"}), 400
        return render_template("auth/login.html", next=nxt or "", error="Email and password are required."), 400

    user, error, status = authenticate(email, password)
    if user is None:
        if wants_json:
            return jsonify({"error": error}), status
        return render_template("auth/login.html", next=nxt or "", error=error, email=email), status

    session.clear()
    session.permanent = True
    session["user_id"] = user.id
    ensure_csrf_token()
    current_app.logger.info("Login success user_id=%s request_id=%s", user.id, getattr(g, "request_id", None))

    if wants_json:
        return jsonify({"user": session_user_payload(user), "redirect": nxt or dashboard_path_for(user)})
    return redirect(nxt or dashboard_path_for(user))


@bp.post("/logout")
def logout():
    user = getattr(g, "current_user", None)
    if user:
        s = db_session()
        record_event(s, actor=user, action=AUDIT_LOGOUT)
        s.commit()
    session.clear()
    if request.is_json or not request.form:
        return jsonify({"ok": True})
    return redirect(url_for("pages.login"))


@bp.get("/session")
def session_info():
    user = getattr(g, "current_user", None)
    if not user:
        return jsonify({"user": None})
    return jsonify({"user": session_user_payload(user), "csrf_token": ensure_csrf_token()})


@bp.route("/clear-session", methods=["GET", "POST"])
def clear_session():
    session.clear()
    target = _safe_next(request.args.get("redirect") or "") or url_for("pages.login")
    return redirect(target)


@bp.post("/forgot-password")
def forgot_password():
    data = request_payload()
    email = str(data.get("email") or "").strip().lower()
    if not email:
        return jsonify({"error": "Email is required"}), 400

    s = db_session()
    user = s.query(User).filter(User.email == email, User.is_active.is_(True)).one_or_none()
    if not user:
        return jsonify({"message": FORGOT_PASSWORD_MESSAGE})

    token = secrets.token_hex(32)
    s.query(PasswordResetToken).filter(PasswordResetToken.user_id == user.id).delete(synchronize_session=False)
    s.add(PasswordResetToken(user_id=user.id, token=token, expires_at=datetime.utcnow() + RESET_TOKEN_TTL))
    record_event(s, actor=user, action=AUDIT_PASSWORD_RESET_REQUESTED)
    s.commit()

    try:
        send_email(
            password_reset_email(
                user.email,
                token,
                site_url=current_app.config.get("SITE_URL") or "",
                locale=normalize_locale(data.get("locale")),
            )
        )
    except MailError as e:
        current_app.logger.error("Failed to send password reset email: %s", e)

    return jsonify({"message": FORGOT_PASSWORD_MESSAGE})


@bp.post("/reset-password")
def reset_password():
    data = request_payload()
    token = str(data.get("token") or "").strip()
    password = str(data.get("password") or "")
    if not token or not password:
        return jsonify({"error": "Token and password are required"}), 400
    if len(password) < MIN_RESET_PASSWORD_LENGTH:
        return jsonify({"error": "Password must be at least 8 characters long"}), 400

    s = db_session()
    reset = (
        s.query(PasswordResetToken)
        .filter(PasswordResetToken.token == token, PasswordResetToken.used.is_(False))
        .one_or_none()
    )
    if not reset:
        return jsonify({"error": "Invalid or expired reset token"}), 400
    if reset.expires_at < datetime.utcnow():
        s.delete(reset)
        s.commit()
        return jsonify({"error": "Reset token has expired"}), 400

    user = reset.user
    user.password_hash = generate_password_hash(password)
    user.updated_at = datetime.utcnow()
    reset.used = True
    s.query(PasswordResetToken).filter(
        PasswordResetToken.user_id == user.id, PasswordResetToken.id != reset.id
    ).delete(synchronize_session=False)
    record_event(s, actor=user, action=AUDIT_PASSWORD_RESET_COMPLETED)
    s.commit()
    return jsonify({"message": "Password has been successfully reset"})
