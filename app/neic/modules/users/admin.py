from flask import Blueprint, abort, jsonify, request
from sqlalchemy import or_

from app.neic.db import db_session
from app.neic.models import User, UserAuditLog
from app.neic.modules.users.service import (
    AccountError,
    audit_log_dict,
    change_password,
    create_user,
    deactivate_user,
    parse_role,
    update_profile,
    update_user,
)
from app.neic.rbac import current_user, require_admin, require_support
from app.neic.utils import filter_value, json_error, paginate, parse_int, request_payload

bp = Blueprint("users_admin", __name__)
account_bp = Blueprint("account", __name__)


def _get_or_404(user_id: int) -> User:
    user = db_session().get(User, user_id)
    if not user:
        abort(404, description="User not found")
    return user


@bp.get("")
@require_admin
def list_users():
    s = db_session()
    q = s.query(User)
    role = filter_value(request.args.get("role"))
    if role:
        try:
            q = q.filter(User.role == parse_role(role))
        except AccountError as e:
            return json_error(e.message, 400)
    search = (request.args.get("search") or "").strip()
    if search:
        like = f"%{search}%"
        q = q.filter(or_(User.email.ilike(like), User.name.ilike(like)))
    rows, pagination = paginate(q.order_by(User.created_at.desc(), User.id.desc()), default_limit=20, max_limit=100)
    return jsonify({"users": [u.to_dict() for u in rows], "pagination": pagination})


@bp.get("/<int:user_id>")
@require_admin
def get_user(user_id: int):
    return jsonify({"user": _get_or_404(user_id).to_dict()})


@bp.post("")
@require_admin
def create():
    s = db_session()
    try:
        user = create_user(s, request_payload(), current_user())
    except AccountError as e:
        return json_error(e.message, e.status)
    s.commit()
    return jsonify({"user": user.to_dict(), "message": "User created successfully"}), 201


@bp.put("/<int:user_id>")
@require_admin
def update(user_id: int):
    s = db_session()
    user = _get_or_404(user_id)
    try:
        update_user(s, user, request_payload(), current_user())
    except AccountError as e:
        s.rollback()
        return json_error(e.message, e.status)
    s.commit()
    return jsonify({"user": user.to_dict(), "message": "User updated successfully"})


@bp.delete("/<int:user_id>")
@require_admin
def deactivate(user_id: int):
    s = db_session()
    user = _get_or_404(user_id)
    try:
        deactivate_user(s, user, current_user())
    except AccountError as e:
        return json_error(e.message, e.status)
    s.commit()
    return jsonify({"message": "User deactivated successfully"})


@bp.get("/<int:user_id>/audit-logs")
@require_admin
def user_audit_logs(user_id: int):
    user = _get_or_404(user_id)
    q = db_session().query(UserAuditLog).filter(UserAuditLog.user_id == user.id)
    rows, pagination = paginate(q.order_by(UserAuditLog.created_at.desc(), UserAuditLog.id.desc()))
    return jsonify({"auditLogs": [audit_log_dict(r) for r in rows], "pagination": pagination})


# Self-service account endpoints (any staff role)


@account_bp.get("/profile")
@require_support
def profile():
    return jsonify({"user": current_user().to_dict()})


@account_bp.put("/profile")
@require_support
def profile_update():
    s = db_session()
    user = current_user()
    try:
        update_profile(s, user, request_payload())
    except AccountError as e:
        s.rollback()
        return json_error(e.message, e.status)
    s.commit()
    return jsonify({"user": user.to_dict(), "message": "Profile updated successfully"})


@account_bp.post("/change-password")
@require_support
def change_password_view():
    s = db_session()
    payload = request_payload()
    current = str(payload.get("currentPassword") or payload.get("current_password") or "")
    new = str(payload.get("newPassword") or payload.get("new_password") or "")
    try:
        change_password(s, current_user(), current, new)
    except AccountError as e:
        return json_error(e.message, e.status)
    s.commit()
    return jsonify({"message": "Password changed successfully"})


@account_bp.get("/audit-logs")
@require_admin
def audit_logs():
    q = db_session().query(UserAuditLog).join(User, UserAuditLog.user_id == User.id)
    search = (request.args.get("search") or "").strip()
    if search:
        like = f"%{search}%"
        q = q.filter(
            or_(
                UserAuditLog.action.ilike(like),
                UserAuditLog.details.ilike(like),
                User.name.ilike(like),
                User.email.ilike(like),
            )
        )
    action = (request.args.get("action") or "").strip()
    if action:
        q = q.filter(UserAuditLog.action == action)
    user_id = request.args.get("user_id") or request.args.get("userId")
    if user_id:
        q = q.filter(UserAuditLog.user_id == parse_int(user_id, 0))
    rows, pagination = paginate(q.order_by(UserAuditLog.created_at.desc(), UserAuditLog.id.desc()))
    return jsonify({"auditLogs": [audit_log_dict(r) for r in rows], "pagination": pagination})
