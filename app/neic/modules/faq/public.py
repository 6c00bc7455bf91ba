from flask import Blueprint, jsonify

from app.neic.db import db_session
from app.neic.modules.faq.models import FAQ
from app.neic.modules.faq.service import group_faqs

bp = Blueprint("faq_public", __name__)

HEADER = {
    "title": {"en": "Frequently Asked Questions", "bn": "প্রায়শই জিজ্ঞাসিত প্রশ্ন"},
    "subtitle": {
        "en": "Find answers to common questions about our services and processes",
        "bn": "আমাদের সেবা এবং প্রক্রিয়া সম্পর্কে সাধারণ প্রশ্নের উত্তর খুঁজুন",
    },
}


def active_faqs() -> list[FAQ]:
    return (
        db_session()
        .query(FAQ)
        .filter(FAQ.is_active.is_(True))
        .order_by(FAQ.order.asc(), FAQ.created_at.desc())
        .all()
    )


@bp.get("")
def faq_page():
    return jsonify({"faqPage": {"header": HEADER, "categories": group_faqs(active_faqs())}})
