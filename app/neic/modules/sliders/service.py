from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.neic.content import (
    MISSING_REQUIRED,
    apply_changes,
    audit_content,
    delete_content,
    flag,
    missing_fields,
    order_value,
    stamp_created,
    stamp_updated,
    text,
    timestamp,
    validate_fields,
)
from app.neic.modules.sliders.models import Slider

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.neic.models import User

REQUIRED_FIELDS = ("title_en", "title_bn", "description_en", "description_bn", "image", "link")

FIELDS = {
    "title_en": text,
    "title_bn": text,
    "description_en": text,
    "description_bn": text,
    "button_text_en": text,
    "button_text_bn": text,
    "category_en": text,
    "category_bn": text,
    "image": text,
    "link": text,
    "date": timestamp,
    "featured": flag,
    "order": order_value,
    "is_active": flag,
}

DEFAULT_BUTTON = {"en": "Learn More", "bn": "আরও জানুন"}
DEFAULT_CATEGORY = {"en": "Update", "bn": "আপডেট"}


def validate_slider_payload(payload: dict, *, slider: Slider | None = None) -> list[str]:
    if slider is None and missing_fields(payload, REQUIRED_FIELDS):
        return [MISSING_REQUIRED]
    if slider is not None and any(f in payload and text(payload[f]) is None for f in REQUIRED_FIELDS):
        return [MISSING_REQUIRED]
    return validate_fields(payload, FIELDS)


def create_slider(s: "Session", payload: dict, user: "User") -> Slider:
    slider = Slider(featured=False, order=0, is_active=True)
    apply_changes(slider, payload, FIELDS)
    stamp_created(slider, user)
    s.add(slider)
    s.flush()
    audit_content(s, user, "slider.create", slider, {"title_en": slider.title_en})
    return slider


def update_slider(s: "Session", slider: Slider, payload: dict, user: "User") -> Slider:
    changes = apply_changes(slider, payload, FIELDS)
    stamp_updated(slider, user)
    audit_content(s, user, "slider.edit", slider, {"changes": changes})
    return slider


def delete_slider(s: "Session", slider: Slider, user: "User") -> None:
    delete_content(s, slider, user, "slider.delete", {"title_en": slider.title_en})


def public_slide(slider: Slider) -> dict[str, Any]:
    """Homepage carousel shape; missing button/category copy falls back to the defaults."""
    when = slider.date or slider.created_at
    return {
        "id": slider.id,
        "title": {"en": slider.title_en, "bn": slider.title_bn},
        "description": {"en": slider.description_en, "bn": slider.description_bn},
        "buttonText": {
            "en": slider.button_text_en or DEFAULT_BUTTON["en"],
            "bn": slider.button_text_bn or DEFAULT_BUTTON["bn"],
        },
        "category": {
            "en": slider.category_en or DEFAULT_CATEGORY["en"],
            "bn": slider.category_bn or DEFAULT_CATEGORY["bn"],
        },
        "image": slider.image,
        "link": slider.link,
        "date": when.date().isoformat() if when else None,
        "featured": slider.featured,
    }
