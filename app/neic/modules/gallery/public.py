from flask import Blueprint, jsonify, request

from app.neic.db import db_session
from app.neic.modules.gallery.models import GalleryItem
from app.neic.utils import filter_value, paginate, parse_bool

bp = Blueprint("gallery_public", __name__)


@bp.get("")
def gallery():
    s = db_session()
    q = s.query(GalleryItem).filter(GalleryItem.is_active.is_(True))
    category = filter_value(request.args.get("category"))
    if category:
        q = q.filter(GalleryItem.category == category)
    if parse_bool(request.args.get("featured")):
        q = q.filter(GalleryItem.featured.is_(True))
    q = q.order_by(GalleryItem.featured.desc(), GalleryItem.order.asc(), GalleryItem.published_at.desc())
    rows, pagination = paginate(q, default_limit=24, max_limit=100)
    categories = [
        c
        for (c,) in s.query(GalleryItem.category)
        .filter(GalleryItem.is_active.is_(True))
        .distinct()
        .order_by(GalleryItem.category.asc())
    ]
    return jsonify(
        {
            "items": [r.to_dict(exclude=("image_key", "created_by", "updated_by")) for r in rows],
            "categories": categories,
            "pagination": pagination,
        }
    )
