"""
Bilingual static copy for the public pages and the homepage JSON endpoint.
Database-backed content (blog, notices, ...) carries its own *_en / *_bn fields.
"""
from __future__ import annotations

from typing import Any

from app.neic.constants import DEFAULT_LOCALE, LOCALES

SITE = {
    "title": {"en": "National Elections Inquiry Commission", "bn": "জাতীয় নির্বাচন তদন্ত কমিশন"},
    "subtitle": {
        "en": "Government of the People's Republic of Bangladesh",
        "bn": "গণপ্রজাতন্ত্রী বাংলাদেশ সরকার",
    },
    "portal": {"en": "Official Portal", "bn": "অফিসিয়াল পোর্টাল"},
    "tagline": {"en": "Transparency • Accountability • Democracy", "bn": "স্বচ্ছতা • জবাবদিহিতা • গণতন্ত্র"},
}

NAV = {
    "home": {"en": "Home", "bn": "প্রচ্ছদ"},
    "formation": {"en": "Commission Formation", "bn": "কমিশন গঠন"},
    "members": {"en": "Commission Members", "bn": "কমিশনের সদস্যবৃন্দ"},
    "blog": {"en": "Blog", "bn": "ব্লগ"},
    "submit": {"en": "Submit Information", "bn": "তথ্য জমা দিন"},
    "privacy": {"en": "Privacy Policy", "bn": "গোপনীয়তা নীতি"},
    "login": {"en": "Login", "bn": "লগইন"},
    "logout": {"en": "Logout", "bn": "লগআউট"},
}

HOME = {
    "hero_title": SITE["title"],
    "hero_body": {
        "en": (
            "The Commission inquires into irregularities in the national elections of 2014, 2018 and 2024. "
            "Citizens may share information, testimony and evidence through this portal."
        ),
        "bn": (
            "কমিশন ২০১৪, ২০১৮ ও ২০২৪ সালের জাতীয় নির্বাচনের অনিয়ম তদন্ত করছে। "
            "নাগরিকগণ এই পোর্টালের মাধ্যমে তথ্য, সাক্ষ্য ও প্রমাণ জমা দিতে পারেন।"
        ),
    },
    "submit_cta": {"en": "Submit Information", "bn": "তথ্য জমা দিন"},
    "latest_notices": {"en": "Latest Notices", "bn": "সর্বশেষ নোটিশ"},
}

FORMATION = {
    "title": NAV["formation"],
    "body": {
        "en": (
            "The National Elections Inquiry Commission was formed by government gazette notification "
            "to inquire into the conduct of the national parliamentary elections and to recommend "
            "measures for free, fair and credible elections."
        ),
        "bn": (
            "সরকারি গেজেট প্রজ্ঞাপনের মাধ্যমে জাতীয় নির্বাচন তদন্ত কমিশন গঠিত হয়েছে, "
            "যার দায়িত্ব জাতীয় সংসদ নির্বাচনের পরিচালনা তদন্ত করা এবং অবাধ, সুষ্ঠু ও "
            "বিশ্বাসযোগ্য নির্বাচনের জন্য সুপারিশ প্রদান করা।"
        ),
    },
}

SUBMIT_FORM = {
    "title": {"en": "Share Information with the Commission", "bn": "কমিশনের কাছে তথ্য প্রদান করুন"},
    "intro": {
        "en": "Tell us what you witnessed. Only your phone number and message are required.",
        "bn": "আপনি যা প্রত্যক্ষ করেছেন তা আমাদের জানান। শুধুমাত্র ফোন নম্বর ও বার্তা আবশ্যক।",
    },
    "name": {"en": "Name", "bn": "নাম"},
    "share_name": {
        "en": "I agree to share my name with the Commission",
        "bn": "আমি কমিশনের সাথে আমার নাম শেয়ার করতে সম্মত",
    },
    "phone": {"en": "Phone number", "bn": "ফোন নম্বর"},
    "email": {"en": "Email", "bn": "ইমেইল"},
    "district": {"en": "District", "bn": "জেলা"},
    "seat_name": {"en": "Constituency", "bn": "নির্বাচনী আসন"},
    "message": {"en": "Your message", "bn": "আপনার বার্তা"},
    "attachment": {"en": "Attachment (optional)", "bn": "সংযুক্তি (ঐচ্ছিক)"},
    "upload_hint": {"en": "Images, PDF, Office documents, audio or video up to", "bn": "ছবি, পিডিএফ, অফিস ডকুমেন্ট, অডিও বা ভিডিও, সর্বোচ্চ"},
    "submit": {"en": "Submit", "bn": "জমা দিন"},
    "privacy": {
        "en": "Your IP address is never stored. Attachments are visible only to authorised Commission staff.",
        "bn": "আপনার আইপি ঠিকানা সংরক্ষণ করা হয় না। সংযুক্তি শুধুমাত্র কমিশনের অনুমোদিত কর্মকর্তাগণ দেখতে পারেন।",
    },
    "success": {
        "en": "Thank you. Your information has been submitted.",
        "bn": "ধন্যবাদ। আপনার তথ্য জমা দেওয়া হয়েছে।",
    },
    "failure": {
        "en": "Submission failed. Please check the form and try again.",
        "bn": "জমা দেওয়া যায়নি। অনুগ্রহ করে ফর্মটি যাচাই করে আবার চেষ্টা করুন।",
    },
}

PRIVACY = {
    "title": NAV["privacy"],
    "sections": [
        {
            "heading": {"en": "What we collect", "bn": "আমরা কী সংগ্রহ করি"},
            "body": {
                "en": (
                    "Your phone number and message are required. Your name is stored only if you choose "
                    "to share it. Attachments are kept in private storage."
                ),
                "bn": (
                    "আপনার ফোন নম্বর ও বার্তা আবশ্যক। আপনি নাম প্রকাশে সম্মত হলেই কেবল তা সংরক্ষণ করা হয়। "
                    "সংযুক্তিগুলি ব্যক্তিগত সংরক্ষণাগারে রাখা হয়।"
                ),
            },
        },
        {
            "heading": {"en": "IP addresses", "bn": "আইপি ঠিকানা"},
            "body": {
                "en": "We never store your IP address; only a salted one-way hash is kept to prevent abuse.",
                "bn": "আমরা আপনার আইপি ঠিকানা সংরক্ষণ করি না; অপব্যবহার রোধে শুধুমাত্র একটি একমুখী হ্যাশ রাখা হয়।",
            },
        },
        {
            "heading": {"en": "Who can see your submission", "bn": "কে আপনার তথ্য দেখতে পারে"},
            "body": {
                "en": "Only authorised Commission staff can review submissions.",
                "bn": "শুধুমাত্র কমিশনের অনুমোদিত কর্মকর্তাগণ জমাকৃত তথ্য পর্যালোচনা করতে পারেন।",
            },
        },
    ],
}


def normalize_locale(locale: str | None) -> str:
    loc = (locale or "").strip().lower()
    return loc if loc in LOCALES else DEFAULT_LOCALE


def localize(value: Any, locale: str) -> Any:
    """Pick the locale from {'en':..,'bn':..} leaves, recursing into dicts and lists."""
    if isinstance(value, dict):
        if set(value.keys()) <= set(LOCALES) and value:
            return value.get(locale) or value.get("en")
        return {k: localize(v, locale) for k, v in value.items()}
    if isinstance(value, list):
        return [localize(v, locale) for v in value]
    return value


def homepage_payload() -> dict[str, Any]:
    return {"homePage": {"header": SITE, "hero": HOME, "formation": FORMATION}}
