"""
Central constants for the NEIC portal.
"""
from __future__ import annotations

import enum


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    MANAGEMENT = "MANAGEMENT"
    SUPPORT = "SUPPORT"
    VIEWER = "VIEWER"


# Ordered permission levels. VIEWER sits below every staff role.
ROLE_LEVELS = {
    Role.VIEWER: 0,
    Role.SUPPORT: 1,
    Role.MANAGEMENT: 2,
    Role.ADMIN: 3,
}

ROLE_DISPLAY_NAMES = {
    Role.ADMIN: {"en": "Administrator", "bn": "প্রশাসক"},
    Role.MANAGEMENT: {"en": "Management", "bn": "ব্যবস্থাপনা"},
    Role.SUPPORT: {"en": "Support Staff", "bn": "সহায়তা কর্মী"},
    Role.VIEWER: {"en": "Viewer", "bn": "দর্শক"},
}

LOCALES = ("bn", "en")
DEFAULT_LOCALE = "bn"

SUBMISSION_STATUSES = ("PENDING", "REVIEWED", "FLAGGED")

NOTICE_TYPES = ("ANNOUNCEMENT", "WARNING", "INFORMATION", "URGENT")
PRIORITIES = ("LOW", "MEDIUM", "HIGH", "CRITICAL")

NOTICE_CATEGORIES = frozenset(
    {
        "general",
        "registration",
        "polling",
        "nomination",
        "schedule",
        "education",
        "conduct",
        "media",
        "security",
        "observers",
        "technology",
    }
)
GAZETTE_CATEGORIES = frozenset({"formation", "terms", "appointment", "powers", "procedures", "general"})
BLOG_CATEGORIES = frozenset({"electoral", "technology", "rights", "transparency", "security", "general"})
FAQ_CATEGORIES = frozenset({"general", "complaints", "process", "support", "reporting", "technical"})
GALLERY_CATEGORIES = frozenset(
    {"general", "events", "meetings", "activities", "facilities", "team", "achievements"}
)
CONTACT_TYPES = ("OFFICE", "DEPARTMENT", "PERSON", "HOTLINE")
MEMBER_ROLE_TYPES = ("commission_member", "secretarial_support")

# Audit actions written to user_audit_logs.action
AUDIT_LOGIN_SUCCESS = "LOGIN_SUCCESS"
AUDIT_LOGIN_FAILED = "LOGIN_FAILED"
AUDIT_LOGOUT = "LOGOUT"
AUDIT_PASSWORD_CHANGE = "PASSWORD_CHANGE"
AUDIT_PASSWORD_RESET_REQUESTED = "PASSWORD_RESET_REQUESTED"
AUDIT_PASSWORD_RESET_COMPLETED = "PASSWORD_RESET_COMPLETED"
AUDIT_PROFILE_UPDATE = "PROFILE_UPDATE"
AUDIT_USER_CREATED = "USER_CREATED"
AUDIT_USER_UPDATED = "USER_UPDATED"
AUDIT_USER_DEACTIVATED = "USER_DEACTIVATED"
AUDIT_REPORT_GENERATION = "REPORT_GENERATION"
