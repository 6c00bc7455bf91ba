from flask import Blueprint, abort, jsonify, request

from app.neic.db import db_session
from app.neic.modules.sliders.models import Slider
from app.neic.modules.sliders.service import create_slider, delete_slider, update_slider, validate_slider_payload
from app.neic.rbac import current_user, require_management
from app.neic.utils import apply_search, json_error, paginate, parse_bool, request_payload

bp = Blueprint("sliders_admin", __name__)


def _get_or_404(slider_id: int) -> Slider:
    slider = db_session().get(Slider, slider_id)
    if not slider:
        abort(404, description="Slider not found")
    return slider


@bp.get("")
@require_management
def list_sliders():
    q = db_session().query(Slider)
    if request.args.get("featured"):
        q = q.filter(Slider.featured.is_(parse_bool(request.args.get("featured"))))
    q = apply_search(
        q,
        request.args.get("search") or "",
        Slider.title_en,
        Slider.title_bn,
        Slider.description_en,
        Slider.description_bn,
    )
    rows, pagination = paginate(q.order_by(Slider.order.asc(), Slider.id.asc()))
    return jsonify({"sliders": [r.to_dict() for r in rows], "pagination": pagination})


@bp.get("/<int:slider_id>")
@require_management
def get_slider(slider_id: int):
    return jsonify({"slider": _get_or_404(slider_id).to_dict()})


@bp.post("")
@require_management
def create():
    s = db_session()
    payload = request_payload()
    errors = validate_slider_payload(payload)
    if errors:
        return json_error(errors[0], 400, errors=errors)
    slider = create_slider(s, payload, current_user())
    s.commit()
    return jsonify({"slider": slider.to_dict(), "message": "Slider created successfully"}), 201


@bp.put("/<int:slider_id>")
@require_management
def update(slider_id: int):
    s = db_session()
    slider = _get_or_404(slider_id)
    payload = request_payload()
    errors = validate_slider_payload(payload, slider=slider)
    if errors:
        return json_error(errors[0], 400, errors=errors)
    update_slider(s, slider, payload, current_user())
    s.commit()
    return jsonify({"slider": slider.to_dict(), "message": "Slider updated successfully"})


@bp.delete("/<int:slider_id>")
@require_management
def delete(slider_id: int):
    s = db_session()
    delete_slider(s, _get_or_404(slider_id), current_user())
    s.commit()
    return jsonify({"message": "Slider deleted successfully"})
