"""
Shared plumbing for the back-office content services.

Each content module declares its writable fields as `{name: parser}`; the
helpers below validate a payload against that map, apply a (partial) update
while collecting an old/new diff, and write the audit row.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date, datetime
from typing import Any

from sqlalchemy.orm import Session

from app.neic.audit import record_event
from app.neic.models import Base, User
from app.neic.utils import clean_str, parse_bool, parse_datetime, parse_int, parse_tags

FieldParser = Callable[[Any], Any]

MISSING_REQUIRED = "Missing required fields"


def text(value: Any) -> str | None:
    return clean_str(value)


def flag(value: Any) -> bool:
    return parse_bool(value)


def integer(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


def order_value(value: Any) -> int:
    return parse_int(value, 0)


def timestamp(value: Any) -> datetime | None:
    return parse_datetime(value)


def tags(value: Any) -> list[str]:
    return parse_tags(value)


def _jsonable(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def missing_fields(payload: dict, required: Iterable[str]) -> list[str]:
    return [name for name in required if clean_str(payload.get(name)) is None]


def validate_fields(payload: dict, fields: dict[str, FieldParser]) -> list[str]:
    """Run each present value through its parser; collect the ones that don't parse."""
    errors: list[str] = []
    for name, parse in fields.items():
        if name not in payload:
            continue
        try:
            parse(payload[name])
        except (TypeError, ValueError):
            errors.append(f"Invalid value for {name}.")
    return errors


def validate_choice(payload: dict, name: str, choices: Iterable[str]) -> list[str]:
    value = clean_str(payload.get(name))
    allowed = sorted(choices)
    if value is not None and value not in allowed:
        return [f"Invalid {name}. Must be one of: {', '.join(allowed)}"]
    return []


def apply_changes(obj: Base, payload: dict, fields: dict[str, FieldParser]) -> dict[str, dict[str, Any]]:
    """Set every field present in `payload`; returns {field: {old, new}} for the ones that changed."""
    changes: dict[str, dict[str, Any]] = {}
    for name, parse in fields.items():
        if name not in payload:
            continue
        new = parse(payload[name])
        old = getattr(obj, name)
        if new != old:
            changes[name] = {"old": _jsonable(old), "new": _jsonable(new)}
            setattr(obj, name, new)
    return changes


def stamp_created(obj: Base, user: User) -> None:
    now = datetime.utcnow()
    obj.created_at = now  # type: ignore[attr-defined]
    obj.updated_at = now  # type: ignore[attr-defined]
    obj.created_by = user.email  # type: ignore[attr-defined]
    obj.updated_by = user.email  # type: ignore[attr-defined]


def stamp_updated(obj: Base, user: User) -> None:
    obj.updated_at = datetime.utcnow()  # type: ignore[attr-defined]
    obj.updated_by = user.email  # type: ignore[attr-defined]


def audit_content(
    s: Session,
    user: User,
    action: str,
    obj: Base,
    metadata: dict[str, Any] | None = None,
) -> None:
    record_event(
        s,
        actor=user,
        action=action,
        entity_type=type(obj).__name__,
        entity_id=getattr(obj, "id", None),
        metadata=metadata,
    )


def delete_content(s: Session, obj: Base, user: User, action: str, metadata: dict[str, Any] | None = None) -> None:
    audit_content(s, user, action, obj, metadata)
    s.delete(obj)
