from flask import Blueprint, abort, jsonify, request

from app.neic.db import db_session
from app.neic.modules.gazettes.models import Gazette
from app.neic.modules.gazettes.service import create_gazette, delete_gazette, update_gazette, validate_gazette_payload
from app.neic.rbac import current_user, require_management
from app.neic.utils import apply_search, filter_value, json_error, paginate, request_payload

bp = Blueprint("gazettes_admin", __name__)


def _get_or_404(gazette_id: int) -> Gazette:
    gazette = db_session().get(Gazette, gazette_id)
    if not gazette:
        abort(404, description="Gazette not found")
    return gazette


def filter_gazettes(q):
    for arg, column in (("category", Gazette.category), ("priority", Gazette.priority)):
        value = filter_value(request.args.get(arg))
        if value:
            q = q.filter(column == value)
    return q


@bp.get("")
@require_management
def list_gazettes():
    q = filter_gazettes(db_session().query(Gazette))
    q = apply_search(
        q, request.args.get("search") or "", Gazette.title_en, Gazette.title_bn, Gazette.gazette_number, Gazette.description
    )
    rows, pagination = paginate(q.order_by(Gazette.published_at.desc(), Gazette.id.desc()))
    return jsonify({"gazettes": [r.to_dict() for r in rows], "pagination": pagination})


@bp.get("/<int:gazette_id>")
@require_management
def get_gazette(gazette_id: int):
    return jsonify({"gazette": _get_or_404(gazette_id).to_dict()})


@bp.post("")
@require_management
def create():
    s = db_session()
    payload = request_payload()
    errors = validate_gazette_payload(s, payload)
    if errors:
        return json_error(errors[0], 400, errors=errors)
    gazette = create_gazette(s, payload, current_user())
    s.commit()
    return jsonify({"gazette": gazette.to_dict(), "message": "Gazette created successfully"}), 201


@bp.put("/<int:gazette_id>")
@require_management
def update(gazette_id: int):
    s = db_session()
    gazette = _get_or_404(gazette_id)
    payload = request_payload()
    errors = validate_gazette_payload(s, payload, gazette=gazette)
    if errors:
        return json_error(errors[0], 400, errors=errors)
    update_gazette(s, gazette, payload, current_user())
    s.commit()
    return jsonify({"gazette": gazette.to_dict(), "message": "Gazette updated successfully"})


@bp.delete("/<int:gazette_id>")
@require_management
def delete(gazette_id: int):
    s = db_session()
    delete_gazette(s, _get_or_404(gazette_id), current_user())
    s.commit()
    return jsonify({"message": "Gazette deleted successfully"})

