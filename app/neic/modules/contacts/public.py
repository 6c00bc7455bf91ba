from flask import Blueprint, jsonify, request

from app.neic.db import db_session
from app.neic.modules.contacts.models import ContactInfo
from app.neic.utils import filter_value

bp = Blueprint("contacts_public", __name__)


@bp.get("")
def contacts():
    q = db_session().query(ContactInfo).filter(ContactInfo.is_active.is_(True))
    contact_type = filter_value(request.args.get("type"))
    if contact_type:
        q = q.filter(ContactInfo.type == contact_type.upper())
    rows = q.order_by(ContactInfo.order.asc(), ContactInfo.id.asc()).all()
    return jsonify({"contacts": [r.to_dict(exclude=("created_by", "updated_by")) for r in rows], "total": len(rows)})
