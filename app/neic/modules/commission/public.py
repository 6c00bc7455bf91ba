from flask import Blueprint, jsonify

from app.neic.db import db_session
from app.neic.modules.commission.models import CommissionMember, CommissionOfficial, CommissionTerm
from app.neic.utils import bilingual

bp = Blueprint("commission_public", __name__)

PUBLIC_EXCLUDE = ("created_by", "updated_by")


def active_members() -> list[CommissionMember]:
    return (
        db_session()
        .query(CommissionMember)
        .filter(CommissionMember.is_active.is_(True))
        .order_by(CommissionMember.role_type.asc(), CommissionMember.serial_no.asc())
        .all()
    )


def active_officials() -> list[CommissionOfficial]:
    return (
        db_session()
        .query(CommissionOfficial)
        .filter(CommissionOfficial.is_active.is_(True))
        .order_by(CommissionOfficial.category.asc(), CommissionOfficial.order.asc(), CommissionOfficial.id.asc())
        .all()
    )


def active_terms() -> list[CommissionTerm]:
    return (
        db_session()
        .query(CommissionTerm)
        .filter(CommissionTerm.is_active.is_(True))
        .order_by(CommissionTerm.order.asc(), CommissionTerm.id.asc())
        .all()
    )


@bp.get("/commission-members")
def members():
    rows = active_members()
    return jsonify({"members": [r.to_dict(exclude=PUBLIC_EXCLUDE) for r in rows], "total": len(rows)})


@bp.get("/commission-officials")
def officials():
    rows = active_officials()
    return jsonify({"officials": [r.to_dict(exclude=PUBLIC_EXCLUDE) for r in rows], "total": len(rows)})


@bp.get("/commission-scope")
def scope():
    """Terms of reference grouped by section, in display order."""
    sections: dict[str, list[dict]] = {}
    for term in active_terms():
        sections.setdefault(term.section, []).append(
            {
                "id": term.id,
                "title": bilingual(term, "title"),
                "description": bilingual(term, "description"),
                "category": term.category,
                "effective_from": term.effective_from.isoformat() if term.effective_from else None,
                "effective_to": term.effective_to.isoformat() if term.effective_to else None,
            }
        )
    return jsonify({"sections": [{"section": name, "terms": terms} for name, terms in sections.items()]})
