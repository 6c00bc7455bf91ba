from __future__ import annotations

from typing import TYPE_CHECKING

from app.neic.constants import MEMBER_ROLE_TYPES
from app.neic.content import (
    MISSING_REQUIRED,
    apply_changes,
    audit_content,
    delete_content,
    flag,
    integer,
    missing_fields,
    order_value,
    stamp_created,
    stamp_updated,
    text,
    timestamp,
    validate_choice,
    validate_fields,
)
from app.neic.modules.commission.models import CommissionMember, CommissionOfficial, CommissionTerm

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.neic.models import User

MEMBER_REQUIRED = ("name_en", "name_bn", "designation_en", "designation_bn", "serial_no")
MEMBER_FIELDS = {
    "serial_no": integer,
    "role_type": text,
    "name_en": text,
    "name_bn": text,
    "designation_en": text,
    "designation_bn": text,
    "department_en": text,
    "department_bn": text,
    "description_en": text,
    "description_bn": text,
    "image": text,
    "email": text,
    "phone": text,
    "is_active": flag,
}

OFFICIAL_REQUIRED = ("name_en", "name_bn", "position_en", "position_bn", "department_en", "department_bn")
OFFICIAL_FIELDS = {
    "name_en": text,
    "name_bn": text,
    "position_en": text,
    "position_bn": text,
    "department_en": text,
    "department_bn": text,
    "description_en": text,
    "description_bn": text,
    "experience_en": text,
    "experience_bn": text,
    "qualification_en": text,
    "qualification_bn": text,
    "email": text,
    "phone": text,
    "image": text,
    "category": text,
    "order": order_value,
    "is_active": flag,
}

TERM_REQUIRED = ("title_en", "title_bn", "description_en", "description_bn", "section", "effective_from")
TERM_FIELDS = {
    "title_en": text,
    "title_bn": text,
    "description_en": text,
    "description_bn": text,
    "category": text,
    "section": text,
    "order": order_value,
    "effective_from": timestamp,
    "effective_to": timestamp,
    "is_active": flag,
}


def _required_check(payload: dict, required: tuple[str, ...], *, creating: bool) -> list[str]:
    if creating and missing_fields(payload, required):
        return [MISSING_REQUIRED]
    if not creating and any(f in payload and text(payload[f]) is None for f in required):
        return [MISSING_REQUIRED]
    return []


# Members


def serial_taken(s: "Session", serial_no: int, role_type: str, *, exclude_id: int | None = None) -> bool:
    q = s.query(CommissionMember.id).filter(
        CommissionMember.serial_no == serial_no, CommissionMember.role_type == role_type
    )
    if exclude_id is not None:
        q = q.filter(CommissionMember.id != exclude_id)
    return q.first() is not None


def validate_member_payload(s: "Session", payload: dict, *, member: CommissionMember | None = None) -> list[str]:
    errors = _required_check(payload, MEMBER_REQUIRED, creating=member is None)
    if errors:
        return errors
    errors = validate_fields(payload, MEMBER_FIELDS)
    errors += validate_choice(payload, "role_type", MEMBER_ROLE_TYPES)
    if errors:
        return errors
    serial_no = integer(payload["serial_no"]) if "serial_no" in payload else (member.serial_no if member else None)
    role_type = text(payload.get("role_type")) or (member.role_type if member else "commission_member")
    if serial_no is not None and serial_taken(s, serial_no, role_type, exclude_id=member.id if member else None):
        errors.append("Serial number already exists for this role type")
    return errors


def create_member(s: "Session", payload: dict, user: "User") -> CommissionMember:
    member = CommissionMember(role_type="commission_member", serial_no=1, is_active=True)
    apply_changes(member, payload, MEMBER_FIELDS)
    member.role_type = member.role_type or "commission_member"
    stamp_created(member, user)
    s.add(member)
    s.flush()
    audit_content(s, user, "commission_member.create", member, {"serial_no": member.serial_no, "role_type": member.role_type})
    return member


def update_member(s: "Session", member: CommissionMember, payload: dict, user: "User") -> CommissionMember:
    changes = apply_changes(member, payload, MEMBER_FIELDS)
    member.role_type = member.role_type or "commission_member"
    stamp_updated(member, user)
    audit_content(s, user, "commission_member.edit", member, {"changes": changes})
    return member


def delete_member(s: "Session", member: CommissionMember, user: "User") -> None:
    delete_content(s, member, user, "commission_member.delete", {"serial_no": member.serial_no})


# Officials


def validate_official_payload(payload: dict, *, official: CommissionOfficial | None = None) -> list[str]:
    errors = _required_check(payload, OFFICIAL_REQUIRED, creating=official is None)
    return errors or validate_fields(payload, OFFICIAL_FIELDS)


def create_official(s: "Session", payload: dict, user: "User") -> CommissionOfficial:
    official = CommissionOfficial(category="SECRETARIAT", order=0, is_active=True)
    apply_changes(official, payload, OFFICIAL_FIELDS)
    official.category = official.category or "SECRETARIAT"
    stamp_created(official, user)
    s.add(official)
    s.flush()
    audit_content(s, user, "commission_official.create", official, {"category": official.category})
    return official


def update_official(s: "Session", official: CommissionOfficial, payload: dict, user: "User") -> CommissionOfficial:
    changes = apply_changes(official, payload, OFFICIAL_FIELDS)
    official.category = official.category or "SECRETARIAT"
    stamp_updated(official, user)
    audit_content(s, user, "commission_official.edit", official, {"changes": changes})
    return official


def delete_official(s: "Session", official: CommissionOfficial, user: "User") -> None:
    delete_content(s, official, user, "commission_official.delete")


# Terms of reference


def validate_term_payload(payload: dict, *, term: CommissionTerm | None = None) -> list[str]:
    errors = _required_check(payload, TERM_REQUIRED, creating=term is None)
    return errors or validate_fields(payload, TERM_FIELDS)


def create_term(s: "Session", payload: dict, user: "User") -> CommissionTerm:
    term = CommissionTerm(category="general", order=0, is_active=True)
    apply_changes(term, payload, TERM_FIELDS)
    term.category = term.category or "general"
    stamp_created(term, user)
    s.add(term)
    s.flush()
    audit_content(s, user, "commission_term.create", term, {"section": term.section})
    return term


def update_term(s: "Session", term: CommissionTerm, payload: dict, user: "User") -> CommissionTerm:
    changes = apply_changes(term, payload, TERM_FIELDS)
    term.category = term.category or "general"
    stamp_updated(term, user)
    audit_content(s, user, "commission_term.edit", term, {"changes": changes})
    return term


def delete_term(s: "Session", term: CommissionTerm, user: "User") -> None:
    delete_content(s, term, user, "commission_term.delete", {"section": term.section})
