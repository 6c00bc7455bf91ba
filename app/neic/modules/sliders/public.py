from flask import Blueprint, jsonify

from app.neic.db import db_session
from app.neic.modules.sliders.models import Slider
from app.neic.modules.sliders.service import public_slide

bp = Blueprint("sliders_public", __name__)

SLIDER_HEADER = {
    "title": {"en": "Latest Updates", "bn": "সর্বশেষ আপডেট"},
    "description": {
        "en": "News and announcements from the commission",
        "bn": "কমিশনের সংবাদ ও ঘোষণা",
    },
}


def active_sliders() -> list[Slider]:
    return (
        db_session()
        .query(Slider)
        .filter(Slider.is_active.is_(True))
        .order_by(Slider.order.asc(), Slider.id.asc())
        .all()
    )


@bp.get("")
def sliders():
    return jsonify({"sliderData": {**SLIDER_HEADER, "slides": [public_slide(s) for s in active_sliders()]}})
