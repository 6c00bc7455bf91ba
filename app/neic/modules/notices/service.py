from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from app.neic.constants import NOTICE_TYPES, PRIORITIES
from app.neic.content import (
    MISSING_REQUIRED,
    apply_changes,
    audit_content,
    delete_content,
    flag,
    missing_fields,
    stamp_created,
    stamp_updated,
    text,
    timestamp,
    validate_choice,
    validate_fields,
)
from app.neic.modules.notices.models import Notice

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.neic.models import User

REQUIRED_FIELDS = ("title_en", "title_bn", "content_en", "content_bn")


def attachments(value: Any) -> list:
    if value is None or value == "":
        return []
    if not isinstance(value, list):
        raise ValueError("attachments must be a list")
    return value


FIELDS = {
    "title_en": text,
    "title_bn": text,
    "content_en": text,
    "content_bn": text,
    "type": text,
    "priority": text,
    "category": text,
    "published_at": timestamp,
    "expires_at": timestamp,
    "is_active": flag,
    "is_pinned": flag,
    "attachments": attachments,
}


def validate_notice_payload(payload: dict, *, notice: Notice | None = None) -> list[str]:
    if notice is None and missing_fields(payload, REQUIRED_FIELDS):
        return [MISSING_REQUIRED]
    if notice is not None and any(f in payload and text(payload[f]) is None for f in REQUIRED_FIELDS):
        return [MISSING_REQUIRED]
    errors = validate_fields(payload, FIELDS)
    errors += validate_choice(payload, "type", NOTICE_TYPES)
    errors += validate_choice(payload, "priority", PRIORITIES)
    return errors


def _fill_defaults(notice: Notice) -> None:
    notice.type = notice.type or "INFORMATION"
    notice.priority = notice.priority or "MEDIUM"
    notice.category = notice.category or "general"
    notice.published_at = notice.published_at or datetime.utcnow()


def create_notice(s: "Session", payload: dict, user: "User") -> Notice:
    notice = Notice(is_active=True, is_pinned=False, attachments=[])
    apply_changes(notice, payload, FIELDS)
    _fill_defaults(notice)
    stamp_created(notice, user)
    s.add(notice)
    s.flush()
    audit_content(s, user, "notice.create", notice, {"type": notice.type, "priority": notice.priority})
    return notice


def update_notice(s: "Session", notice: Notice, payload: dict, user: "User") -> Notice:
    changes = apply_changes(notice, payload, FIELDS)
    _fill_defaults(notice)
    stamp_updated(notice, user)
    audit_content(s, user, "notice.edit", notice, {"changes": changes})
    return notice


def delete_notice(s: "Session", notice: Notice, user: "User") -> None:
    delete_content(s, notice, user, "notice.delete")
