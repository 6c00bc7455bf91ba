from flask import Blueprint, abort, jsonify, request

from app.neic.db import db_session
from app.neic.modules.notices.models import Notice
from app.neic.modules.notices.service import create_notice, delete_notice, update_notice, validate_notice_payload
from app.neic.rbac import current_user, require_management
from app.neic.utils import apply_search, filter_value, json_error, paginate, request_payload

bp = Blueprint("notices_admin", __name__)


def _get_or_404(notice_id: int) -> Notice:
    notice = db_session().get(Notice, notice_id)
    if not notice:
        abort(404, description="Notice not found")
    return notice


@bp.get("")
@require_management
def list_notices():
    q = db_session().query(Notice)
    for arg, column in (("type", Notice.type), ("priority", Notice.priority), ("category", Notice.category)):
        value = filter_value(request.args.get(arg))
        if value:
            q = q.filter(column == value)
    q = apply_search(q, request.args.get("search") or "", Notice.title_en, Notice.title_bn, Notice.content_en, Notice.content_bn)
    q = q.order_by(Notice.is_pinned.desc(), Notice.published_at.desc(), Notice.id.desc())
    rows, pagination = paginate(q)
    return jsonify({"notices": [r.to_dict() for r in rows], "pagination": pagination})


@bp.get("/<int:notice_id>")
@require_management
def get_notice(notice_id: int):
    return jsonify({"notice": _get_or_404(notice_id).to_dict()})


@bp.post("")
@require_management
def create():
    s = db_session()
    payload = request_payload()
    errors = validate_notice_payload(payload)
    if errors:
        return json_error(errors[0], 400, errors=errors)
    notice = create_notice(s, payload, current_user())
    s.commit()
    return jsonify({"notice": notice.to_dict(), "message": "Notice created successfully"}), 201


@bp.put("/<int:notice_id>")
@require_management
def update(notice_id: int):
    s = db_session()
    notice = _get_or_404(notice_id)
    payload = request_payload()
    errors = validate_notice_payload(payload, notice=notice)
    if errors:
        return json_error(errors[0], 400, errors=errors)
    update_notice(s, notice, payload, current_user())
    s.commit()
    return jsonify({"notice": notice.to_dict(), "message": "Notice updated successfully"})


@bp.delete("/<int:notice_id>")
@require_management
def delete(notice_id: int):
    s = db_session()
    delete_notice(s, _get_or_404(notice_id), current_user())
    s.commit()
    return jsonify({"message": "Notice deleted successfully"})
