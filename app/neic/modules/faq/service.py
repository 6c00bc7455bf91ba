from __future__ import annotations

from typing import TYPE_CHECKING, Any

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
    validate_fields,
)
from app.neic.modules.faq.models import FAQ
from app.neic.utils import bilingual

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.neic.models import User

REQUIRED_FIELDS = ("question_en", "question_bn", "answer_en", "answer_bn")

FIELDS = {
    "question_en": text,
    "question_bn": text,
    "answer_en": text,
    "answer_bn": text,
    "category": text,
    "order": order_value,
    "is_active": flag,
}

# Public grouping: (id, substring matched against the category, en, bn)
PUBLIC_GROUPS = (
    ("general", "general", "General Information", "সাধারণ তথ্য"),
    ("services", "service", "Services", "সেবা সমূহ"),
    ("technical", "technical", "Technical Support", "প্রযুক্তিগত সহায়তা"),
)
OTHER_GROUP = ("other", "Other Questions", "অন্যান্য প্রশ্ন")


def validate_faq_payload(payload: dict, *, faq: FAQ | None = None) -> list[str]:
    if faq is None and missing_fields(payload, REQUIRED_FIELDS):
        return [MISSING_REQUIRED]
    if faq is not None and any(f in payload and text(payload[f]) is None for f in REQUIRED_FIELDS):
        return [MISSING_REQUIRED]
    return validate_fields(payload, FIELDS)


def create_faq(s: "Session", payload: dict, user: "User") -> FAQ:
    faq = FAQ(category="general", order=0, is_active=True)
    apply_changes(faq, payload, FIELDS)
    faq.category = faq.category or "general"
    stamp_created(faq, user)
    s.add(faq)
    s.flush()
    audit_content(s, user, "faq.create", faq, {"category": faq.category})
    return faq


def update_faq(s: "Session", faq: FAQ, payload: dict, user: "User") -> FAQ:
    changes = apply_changes(faq, payload, FIELDS)
    faq.category = faq.category or "general"
    stamp_updated(faq, user)
    audit_content(s, user, "faq.edit", faq, {"changes": changes})
    return faq


def delete_faq(s: "Session", faq: FAQ, user: "User") -> None:
    delete_content(s, faq, user, "faq.delete")


def group_faqs(faqs: list[FAQ]) -> list[dict[str, Any]]:
    """Bucket FAQs into the public categories; anything unmatched lands in "other"."""
    groups = []
    placed: set[int] = set()
    for group_id, needle, name_en, name_bn in PUBLIC_GROUPS:
        members = [f for f in faqs if needle in (f.category or "").lower()]
        placed.update(f.id for f in members)
        groups.append({"id": group_id, "name": {"en": name_en, "bn": name_bn}, "faqs": [_public_faq(f) for f in members]})
    rest = [f for f in faqs if f.id not in placed]
    if rest:
        group_id, name_en, name_bn = OTHER_GROUP
        groups.append({"id": group_id, "name": {"en": name_en, "bn": name_bn}, "faqs": [_public_faq(f) for f in rest]})
    return groups


def _public_faq(faq: FAQ) -> dict[str, Any]:
    return {"id": faq.id, "question": bilingual(faq, "question"), "answer": bilingual(faq, "answer")}
