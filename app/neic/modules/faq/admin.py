from flask import Blueprint, abort, jsonify, request

from app.neic.db import db_session
from app.neic.modules.faq.models import FAQ
from app.neic.modules.faq.service import create_faq, delete_faq, update_faq, validate_faq_payload
from app.neic.rbac import current_user, require_management
from app.neic.utils import apply_search, filter_value, json_error, paginate, request_payload

bp = Blueprint("faq_admin", __name__)


def _get_or_404(faq_id: int) -> FAQ:
    faq = db_session().get(FAQ, faq_id)
    if not faq:
        abort(404, description="FAQ not found")
    return faq


@bp.get("")
@require_management
def list_faqs():
    q = db_session().query(FAQ)
    category = filter_value(request.args.get("category"))
    if category:
        q = q.filter(FAQ.category == category)
    q = apply_search(q, request.args.get("search") or "", FAQ.question_en, FAQ.question_bn, FAQ.answer_en, FAQ.answer_bn)
    rows, pagination = paginate(q.order_by(FAQ.order.asc(), FAQ.id.asc()))
    return jsonify({"faqs": [r.to_dict() for r in rows], "pagination": pagination})


@bp.get("/<int:faq_id>")
@require_management
def get_faq(faq_id: int):
    return jsonify({"faq": _get_or_404(faq_id).to_dict()})


@bp.post("")
@require_management
def create():
    s = db_session()
    payload = request_payload()
    errors = validate_faq_payload(payload)
    if errors:
        return json_error(errors[0], 400, errors=errors)
    faq = create_faq(s, payload, current_user())
    s.commit()
    return jsonify({"faq": faq.to_dict(), "message": "FAQ created successfully"}), 201


@bp.put("/<int:faq_id>")
@require_management
def update(faq_id: int):
    s = db_session()
    faq = _get_or_404(faq_id)
    payload = request_payload()
    errors = validate_faq_payload(payload, faq=faq)
    if errors:
        return json_error(errors[0], 400, errors=errors)
    update_faq(s, faq, payload, current_user())
    s.commit()
    return jsonify({"faq": faq.to_dict(), "message": "FAQ updated successfully"})


@bp.delete("/<int:faq_id>")
@require_management
def delete(faq_id: int):
    s = db_session()
    delete_faq(s, _get_or_404(faq_id), current_user())
    s.commit()
    return jsonify({"message": "FAQ deleted successfully"})
