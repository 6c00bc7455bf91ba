from __future__ import annotations

from typing import TYPE_CHECKING

from app.neic.constants import CONTACT_TYPES
from app.neic.content import (
    MISSING_REQUIRED,
    apply_changes,
    audit_content,
    delete_content,
    flag,
    missing_fields,
    order_value,
    stamp_created,
    stamp_updated,
    text,
    validate_choice,
    validate_fields,
)
from app.neic.modules.contacts.models import ContactInfo

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.neic.models import User

REQUIRED_FIELDS = ("name_en", "name_bn")

FIELDS = {
    "type": text,
    "name_en": text,
    "name_bn": text,
    "description_en": text,
    "description_bn": text,
    "address_en": text,
    "address_bn": text,
    "hours_en": text,
    "hours_bn": text,
    "phone": text,
    "email": text,
    "website": text,
    "order": order_value,
    "is_active": flag,
}


def validate_contact_payload(payload: dict, *, contact: ContactInfo | None = None) -> list[str]:
    if contact is None and missing_fields(payload, REQUIRED_FIELDS):
        return [MISSING_REQUIRED]
    if contact is not None and any(f in payload and text(payload[f]) is None for f in REQUIRED_FIELDS):
        return [MISSING_REQUIRED]
    return validate_fields(payload, FIELDS) + validate_choice(payload, "type", CONTACT_TYPES)


def create_contact(s: "Session", payload: dict, user: "User") -> ContactInfo:
    contact = ContactInfo(type="OFFICE", order=0, is_active=True)
    apply_changes(contact, payload, FIELDS)
    contact.type = contact.type or "OFFICE"
    stamp_created(contact, user)
    s.add(contact)
    s.flush()
    audit_content(s, user, "contact.create", contact, {"type": contact.type})
    return contact


def update_contact(s: "Session", contact: ContactInfo, payload: dict, user: "User") -> ContactInfo:
    changes = apply_changes(contact, payload, FIELDS)
    contact.type = contact.type or "OFFICE"
    stamp_updated(contact, user)
    audit_content(s, user, "contact.edit", contact, {"changes": changes})
    return contact


def delete_contact(s: "Session", contact: ContactInfo, user: "User") -> None:
    delete_content(s, contact, user, "contact.delete", {"type": contact.type})
