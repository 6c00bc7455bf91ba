"""
Staff account management: creation with the password policy, role and
activation changes, self-service profile and password changes.
"""
from __future__ import annotations

import json
import re
from datetime import datetime
from typing import TYPE_CHECKING, Any

from werkzeug.security import check_password_hash, generate_password_hash

from app.neic.audit import record_event
from app.neic.constants import (
    AUDIT_PASSWORD_CHANGE,
    AUDIT_PROFILE_UPDATE,
    AUDIT_USER_CREATED,
    AUDIT_USER_DEACTIVATED,
    AUDIT_USER_UPDATED,
    Role,
)
from app.neic.models import User, UserAuditLog
from app.neic.utils import clean_str, parse_bool

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

PASSWORD_MIN_LENGTH = 12
CHANGE_PASSWORD_MIN_LENGTH = 8
EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
SPECIAL_RE = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")


class AccountError(ValueError):
    """A rejected account operation; `status` is the HTTP code to answer with."""

    def __init__(self, message: str, status: int = 400):
        super().__init__(message)
        self.message = message
        self.status = status


def validate_password(password: str) -> list[str]:
    errors: list[str] = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
    if not re.search(r"[A-Z]", password):
        errors.append("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        errors.append("Password must contain at least one lowercase letter")
    if not re.search(r"\d", password):
        errors.append("Password must contain at least one number")
    if not SPECIAL_RE.search(password):
        errors.append("Password must contain at least one special character")
    return errors


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email))


def parse_role(value: Any) -> str:
    try:
        return Role(str(value or "").strip().upper()).value
    except ValueError:
        raise AccountError(f"Invalid role. Must be one of: {', '.join(r.value for r in Role)}") from None


def email_taken(s: "Session", email: str, *, exclude_id: int | None = None) -> bool:
    q = s.query(User.id).filter(User.email == email)
    if exclude_id is not None:
        q = q.filter(User.id != exclude_id)
    return q.first() is not None


def create_user(s: "Session", payload: dict, actor: User) -> User:
    email = (clean_str(payload.get("email")) or "").lower()
    password = str(payload.get("password") or "")
    if not email or not password or not payload.get("role"):
        raise AccountError("Email, password and role are required")
    if not is_valid_email(email):
        raise AccountError("Invalid email format")
    role = parse_role(payload.get("role"))
    problems = validate_password(password)
    if problems:
        raise AccountError(f"Password validation failed: {', '.join(problems)}")
    if email_taken(s, email):
        raise AccountError("User with this email already exists", 409)

    user = User(
        email=email,
        name=clean_str(payload.get("name")),
        password_hash=generate_password_hash(password),
        role=role,
        is_active=True,
        created_by=actor.email,
        updated_by=actor.email,
    )
    s.add(user)
    s.flush()
    record_event(
        s,
        actor=actor,
        subject=user,
        action=AUDIT_USER_CREATED,
        entity_type="User",
        entity_id=user.id,
        metadata={"email": email, "role": role},
    )
    return user


def update_user(s: "Session", user: User, payload: dict, actor: User) -> User:
    changes: dict[str, dict[str, Any]] = {}
    if "name" in payload:
        new_name = clean_str(payload.get("name"))
        if new_name != user.name:
            changes["name"] = {"old": user.name, "new": new_name}
            user.name = new_name
    if "role" in payload:
        new_role = parse_role(payload.get("role"))
        if new_role != user.role:
            changes["role"] = {"old": user.role, "new": new_role}
            user.role = new_role
    if "is_active" in payload:
        active = parse_bool(payload.get("is_active"))
        if not active and user.id == actor.id:
            raise AccountError("You cannot deactivate your own account")
        if active != user.is_active:
            changes["is_active"] = {"old": user.is_active, "new": active}
            user.is_active = active
    user.updated_at = datetime.utcnow()
    user.updated_by = actor.email
    record_event(
        s,
        actor=actor,
        subject=user,
        action=AUDIT_USER_UPDATED,
        entity_type="User",
        entity_id=user.id,
        metadata={"changes": changes},
    )
    return user


def deactivate_user(s: "Session", user: User, actor: User) -> User:
    if user.id == actor.id:
        raise AccountError("You cannot deactivate your own account")
    user.is_active = False
    user.updated_at = datetime.utcnow()
    user.updated_by = actor.email
    record_event(
        s,
        actor=actor,
        subject=user,
        action=AUDIT_USER_DEACTIVATED,
        entity_type="User",
        entity_id=user.id,
        metadata={"email": user.email},
    )
    return user


def update_profile(s: "Session", user: User, payload: dict) -> User:
    name = clean_str(payload.get("name"))
    email = (clean_str(payload.get("email")) or "").lower()
    if not name or not email:
        raise AccountError("Name and email are required")
    if not is_valid_email(email):
        raise AccountError("Invalid email format")
    if email_taken(s, email, exclude_id=user.id):
        raise AccountError("Email is already taken")

    new_password = str(payload.get("newPassword") or payload.get("new_password") or "")
    if new_password:
        current = str(payload.get("currentPassword") or payload.get("current_password") or "")
        if not current:
            raise AccountError("Current password is required to set new password")
        if not check_password_hash(user.password_hash, current):
            raise AccountError("Current password is incorrect")
        if len(new_password) < CHANGE_PASSWORD_MIN_LENGTH:
            raise AccountError(f"New password must be at least {CHANGE_PASSWORD_MIN_LENGTH} characters long")
        user.password_hash = generate_password_hash(new_password)

    user.name = name
    user.email = email
    user.updated_at = datetime.utcnow()
    user.updated_by = user.email
    record_event(
        s,
        actor=user,
        action=AUDIT_PROFILE_UPDATE,
        details=f"Updated profile information: name={name}, email={email}"
        + (", password changed" if new_password else ""),
    )
    return user


def change_password(s: "Session", user: User, current: str, new: str) -> None:
    if not current or not new:
        raise AccountError("Current password and new password are required")
    if len(new) < CHANGE_PASSWORD_MIN_LENGTH:
        raise AccountError(f"New password must be at least {CHANGE_PASSWORD_MIN_LENGTH} characters long")
    if not check_password_hash(user.password_hash, current):
        raise AccountError("Current password is incorrect")
    user.password_hash = generate_password_hash(new)
    user.updated_at = datetime.utcnow()
    user.updated_by = user.email
    record_event(s, actor=user, action=AUDIT_PASSWORD_CHANGE, details="Password changed successfully")


def audit_log_dict(log: UserAuditLog) -> dict[str, Any]:
    details: Any = log.details or ""
    if details.startswith("{"):
        try:
            details = json.loads(details)
        except json.JSONDecodeError:
            details = log.details
    return {
        "id": log.id,
        "user_id": log.user_id,
        "user_name": log.user.name or "Unknown User",
        "user_email": log.user.email,
        "user_role": log.user.role,
        "action": log.action,
        "details": details,
        "ip_address": log.ip_address or "Unknown",
        "user_agent": log.user_agent or "Unknown",
        "request_id": log.request_id,
        "created_at": log.created_at.isoformat(),
    }
