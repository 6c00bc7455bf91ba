from datetime import datetime

from flask import Blueprint, jsonify, request
from sqlalchemy import or_

from app.neic.db import db_session
from app.neic.modules.notices.models import Notice
from app.neic.utils import filter_value, paginate

bp = Blueprint("notices_public", __name__)

PUBLIC_EXCLUDE = ("is_active", "created_at", "updated_at", "created_by", "updated_by")


def current_notices_query(*, category: str | None = None, priority: str | None = None):
    """Active, unexpired notices, pinned first."""
    now = datetime.utcnow()
    q = (
        db_session()
        .query(Notice)
        .filter(Notice.is_active.is_(True), or_(Notice.expires_at.is_(None), Notice.expires_at > now))
    )
    if category:
        q = q.filter(Notice.category == category)
    if priority:
        q = q.filter(Notice.priority == priority)
    return q.order_by(Notice.is_pinned.desc(), Notice.published_at.desc(), Notice.id.desc())


@bp.get("")
def list_notices():
    q = current_notices_query(
        category=filter_value(request.args.get("category")),
        priority=filter_value(request.args.get("priority")),
    )
    rows, pagination = paginate(q)
    return jsonify({"notices": [r.to_dict(exclude=PUBLIC_EXCLUDE) for r in rows], "pagination": pagination})
