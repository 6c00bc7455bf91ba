from flask import Blueprint, jsonify

from app.neic.db import db_session
from app.neic.modules.gazettes.admin import filter_gazettes
from app.neic.modules.gazettes.models import Gazette
from app.neic.utils import paginate

bp = Blueprint("gazettes_public", __name__)

PUBLIC_EXCLUDE = ("is_active", "created_at", "updated_at", "created_by", "updated_by")


@bp.get("")
def list_gazettes():
    q = filter_gazettes(db_session().query(Gazette).filter(Gazette.is_active.is_(True)))
    rows, pagination = paginate(q.order_by(Gazette.published_at.desc(), Gazette.id.desc()))
    return jsonify({"gazettes": [r.to_dict(exclude=PUBLIC_EXCLUDE) for r in rows], "pagination": pagination})
