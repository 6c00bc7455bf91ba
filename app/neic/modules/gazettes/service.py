from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from app.neic.constants import PRIORITIES
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
from app.neic.modules.gazettes.models import Gazette

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.neic.models import User

REQUIRED_FIELDS = ("title_en", "title_bn", "gazette_number", "download_url")

FIELDS = {
    "title_en": text,
    "title_bn": text,
    "gazette_number": text,
    "category": text,
    "priority": text,
    "published_at": timestamp,
    "download_url": text,
    "description": text,
    "is_active": flag,
}


def gazette_number_taken(s: "Session", number: str, *, exclude_id: int | None = None) -> bool:
    q = s.query(Gazette.id).filter(Gazette.gazette_number == number)
    if exclude_id is not None:
        q = q.filter(Gazette.id != exclude_id)
    return q.first() is not None


def validate_gazette_payload(s: "Session", payload: dict, *, gazette: Gazette | None = None) -> list[str]:
    if gazette is None and missing_fields(payload, REQUIRED_FIELDS):
        return [MISSING_REQUIRED]
    if gazette is not None and any(f in payload and text(payload[f]) is None for f in REQUIRED_FIELDS):
        return [MISSING_REQUIRED]
    errors = validate_fields(payload, FIELDS)
    errors += validate_choice(payload, "priority", PRIORITIES)
    number = text(payload.get("gazette_number"))
    if number and gazette_number_taken(s, number, exclude_id=gazette.id if gazette else None):
        errors.append("Gazette number already exists")
    return errors


def _fill_defaults(gazette: Gazette) -> None:
    gazette.category = gazette.category or "general"
    gazette.priority = gazette.priority or "MEDIUM"
    gazette.published_at = gazette.published_at or datetime.utcnow()


def create_gazette(s: "Session", payload: dict, user: "User") -> Gazette:
    gazette = Gazette(is_active=True)
    apply_changes(gazette, payload, FIELDS)
    _fill_defaults(gazette)
    stamp_created(gazette, user)
    s.add(gazette)
    s.flush()
    audit_content(s, user, "gazette.create", gazette, {"gazette_number": gazette.gazette_number})
    return gazette


def update_gazette(s: "Session", gazette: Gazette, payload: dict, user: "User") -> Gazette:
    changes = apply_changes(gazette, payload, FIELDS)
    _fill_defaults(gazette)
    stamp_updated(gazette, user)
    audit_content(s, user, "gazette.edit", gazette, {"gazette_number": gazette.gazette_number, "changes": changes})
    return gazette


def delete_gazette(s: "Session", gazette: Gazette, user: "User") -> None:
    delete_content(s, gazette, user, "gazette.delete", {"gazette_number": gazette.gazette_number})
