from flask import Blueprint, abort, jsonify, request

from app.neic.db import db_session
from app.neic.modules.commission.models import CommissionMember, CommissionOfficial, CommissionTerm
from app.neic.modules.commission.service import (
    create_member,
    create_official,
    create_term,
    delete_member,
    delete_official,
    delete_term,
    update_member,
    update_official,
    update_term,
    validate_member_payload,
    validate_official_payload,
    validate_term_payload,
)
from app.neic.rbac import current_user, require_management
from app.neic.utils import apply_search, filter_value, json_error, paginate, request_payload

bp = Blueprint("commission_admin", __name__)


def _get_or_404(model, obj_id: int, label: str):
    obj = db_session().get(model, obj_id)
    if not obj:
        abort(404, description=f"{label} not found")
    return obj


# Members


@bp.get("/members")
@require_management
def list_members():
    q = db_session().query(CommissionMember)
    role_type = filter_value(request.args.get("role_type"))
    if role_type:
        q = q.filter(CommissionMember.role_type == role_type)
    q = apply_search(
        q,
        request.args.get("search") or "",
        CommissionMember.name_en,
        CommissionMember.name_bn,
        CommissionMember.designation_en,
        CommissionMember.designation_bn,
    )
    rows, pagination = paginate(q.order_by(CommissionMember.serial_no.asc(), CommissionMember.id.asc()))
    return jsonify({"members": [r.to_dict() for r in rows], "pagination": pagination})


@bp.get("/members/<int:member_id>")
@require_management
def get_member(member_id: int):
    return jsonify({"member": _get_or_404(CommissionMember, member_id, "Member").to_dict()})


@bp.post("/members")
@require_management
def create_member_view():
    s = db_session()
    payload = request_payload()
    errors = validate_member_payload(s, payload)
    if errors:
        return json_error(errors[0], 400, errors=errors)
    member = create_member(s, payload, current_user())
    s.commit()
    return jsonify({"member": member.to_dict(), "message": "Member created successfully"}), 201


@bp.put("/members/<int:member_id>")
@require_management
def update_member_view(member_id: int):
    s = db_session()
    member = _get_or_404(CommissionMember, member_id, "Member")
    payload = request_payload()
    errors = validate_member_payload(s, payload, member=member)
    if errors:
        return json_error(errors[0], 400, errors=errors)
    update_member(s, member, payload, current_user())
    s.commit()
    return jsonify({"member": member.to_dict(), "message": "Member updated successfully"})


@bp.delete("/members/<int:member_id>")
@require_management
def delete_member_view(member_id: int):
    s = db_session()
    delete_member(s, _get_or_404(CommissionMember, member_id, "Member"), current_user())
    s.commit()
    return jsonify({"message": "Member deleted successfully"})


# Officials


@bp.get("/officials")
@require_management
def list_officials():
    q = db_session().query(CommissionOfficial)
    category = filter_value(request.args.get("category"))
    if category:
        q = q.filter(CommissionOfficial.category == category)
    q = apply_search(
        q,
        request.args.get("search") or "",
        CommissionOfficial.name_en,
        CommissionOfficial.name_bn,
        CommissionOfficial.position_en,
        CommissionOfficial.position_bn,
        CommissionOfficial.department_en,
        CommissionOfficial.department_bn,
    )
    rows, pagination = paginate(q.order_by(CommissionOfficial.order.asc(), CommissionOfficial.id.asc()))
    return jsonify({"officials": [r.to_dict() for r in rows], "pagination": pagination})


@bp.get("/officials/<int:official_id>")
@require_management
def get_official(official_id: int):
    return jsonify({"official": _get_or_404(CommissionOfficial, official_id, "Official").to_dict()})


@bp.post("/officials")
@require_management
def create_official_view():
    s = db_session()
    payload = request_payload()
    errors = validate_official_payload(payload)
    if errors:
        return json_error(errors[0], 400, errors=errors)
    official = create_official(s, payload, current_user())
    s.commit()
    return jsonify({"official": official.to_dict(), "message": "Official created successfully"}), 201


@bp.put("/officials/<int:official_id>")
@require_management
def update_official_view(official_id: int):
    s = db_session()
    official = _get_or_404(CommissionOfficial, official_id, "Official")
    payload = request_payload()
    errors = validate_official_payload(payload, official=official)
    if errors:
        return json_error(errors[0], 400, errors=errors)
    update_official(s, official, payload, current_user())
    s.commit()
    return jsonify({"official": official.to_dict(), "message": "Official updated successfully"})


@bp.delete("/officials/<int:official_id>")
@require_management
def delete_official_view(official_id: int):
    s = db_session()
    delete_official(s, _get_or_404(CommissionOfficial, official_id, "Official"), current_user())
    s.commit()
    return jsonify({"message": "Official deleted successfully"})


# Terms


@bp.get("/terms")
@require_management
def list_terms():
    q = db_session().query(CommissionTerm)
    for arg, column in (("category", CommissionTerm.category), ("section", CommissionTerm.section)):
        value = filter_value(request.args.get(arg))
        if value:
            q = q.filter(column == value)
    q = apply_search(
        q,
        request.args.get("search") or "",
        CommissionTerm.title_en,
        CommissionTerm.title_bn,
        CommissionTerm.description_en,
        CommissionTerm.description_bn,
    )
    rows, pagination = paginate(q.order_by(CommissionTerm.order.asc(), CommissionTerm.id.asc()))
    return jsonify({"terms": [r.to_dict() for r in rows], "pagination": pagination})


@bp.get("/terms/<int:term_id>")
@require_management
def get_term(term_id: int):
    return jsonify({"term": _get_or_404(CommissionTerm, term_id, "Term").to_dict()})


@bp.post("/terms")
@require_management
def create_term_view():
    s = db_session()
    payload = request_payload()
    errors = validate_term_payload(payload)
    if errors:
        return json_error(errors[0], 400, errors=errors)
    term = create_term(s, payload, current_user())
    s.commit()
    return jsonify({"term": term.to_dict(), "message": "Term created successfully"}), 201


@bp.put("/terms/<int:term_id>")
@require_management
def update_term_view(term_id: int):
    s = db_session()
    term = _get_or_404(CommissionTerm, term_id, "Term")
    payload = request_payload()
    errors = validate_term_payload(payload, term=term)
    if errors:
        return json_error(errors[0], 400, errors=errors)
    update_term(s, term, payload, current_user())
    s.commit()
    return jsonify({"term": term.to_dict(), "message": "Term updated successfully"})


@bp.delete("/terms/<int:term_id>")
@require_management
def delete_term_view(term_id: int):
    s = db_session()
    delete_term(s, _get_or_404(CommissionTerm, term_id, "Term"), current_user())
    s.commit()
    return jsonify({"message": "Term deleted successfully"})
