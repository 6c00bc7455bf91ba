from flask import Blueprint, abort, jsonify, request

from app.neic.db import db_session
from app.neic.modules.contacts.models import ContactInfo
from app.neic.modules.contacts.service import create_contact, delete_contact, update_contact, validate_contact_payload
from app.neic.rbac import current_user, require_management
from app.neic.utils import apply_search, filter_value, json_error, paginate, request_payload

bp = Blueprint("contacts_admin", __name__)


def _get_or_404(contact_id: int) -> ContactInfo:
    contact = db_session().get(ContactInfo, contact_id)
    if not contact:
        abort(404, description="Contact not found")
    return contact


@bp.get("")
@require_management
def list_contacts():
    q = db_session().query(ContactInfo)
    contact_type = filter_value(request.args.get("type"))
    if contact_type:
        q = q.filter(ContactInfo.type == contact_type.upper())
    q = apply_search(
        q,
        request.args.get("search") or "",
        ContactInfo.name_en,
        ContactInfo.name_bn,
        ContactInfo.description_en,
        ContactInfo.description_bn,
        ContactInfo.email,
        ContactInfo.phone,
    )
    rows, pagination = paginate(q.order_by(ContactInfo.order.asc(), ContactInfo.id.asc()))
    return jsonify({"contacts": [r.to_dict() for r in rows], "pagination": pagination})


@bp.get("/<int:contact_id>")
@require_management
def get_contact(contact_id: int):
    return jsonify({"contact": _get_or_404(contact_id).to_dict()})


@bp.post("")
@require_management
def create():
    s = db_session()
    payload = request_payload()
    errors = validate_contact_payload(payload)
    if errors:
        return json_error(errors[0], 400, errors=errors)
    contact = create_contact(s, payload, current_user())
    s.commit()
    return jsonify({"contact": contact.to_dict(), "message": "Contact created successfully"}), 201


@bp.put("/<int:contact_id>")
@require_management
def update(contact_id: int):
    s = db_session()
    contact = _get_or_404(contact_id)
    payload = request_payload()
    errors = validate_contact_payload(payload, contact=contact)
    if errors:
        return json_error(errors[0], 400, errors=errors)
    update_contact(s, contact, payload, current_user())
    s.commit()
    return jsonify({"contact": contact.to_dict(), "message": "Contact updated successfully"})


@bp.delete("/<int:contact_id>")
@require_management
def delete(contact_id: int):
    s = db_session()
    delete_contact(s, _get_or_404(contact_id), current_user())
    s.commit()
    return jsonify({"message": "Contact deleted successfully"})
