from flask import Blueprint, jsonify, request

from app.neic.i18n import homepage_payload, localize, normalize_locale

bp = Blueprint("homepage_public", __name__)


@bp.get("/homepage")
def homepage():
    """Static bilingual homepage copy; `?locale=` collapses it to one language."""
    payload = homepage_payload()
    if request.args.get("locale"):
        payload = localize(payload, normalize_locale(request.args.get("locale")))
    return jsonify(payload)
