from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import func

from app.neic.models import User, UserAuditLog
from app.neic.modules.reports.service import start_of_day
from app.neic.modules.submissions.models import Submission
from app.neic.modules.submissions.service import submission_dict
from app.neic.modules.users.service import audit_log_dict

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

RECENT_LIMIT = 10


def status_counts(s: "Session") -> dict[str, int]:
    counts = {"PENDING": 0, "REVIEWED": 0, "FLAGGED": 0}
    for status, n in s.query(Submission.status, func.count(Submission.id)).group_by(Submission.status):
        counts[status] = n
    return counts


def _submission_count(s: "Session", *criteria) -> int:
    return s.query(func.count(Submission.id)).filter(*criteria).scalar() or 0


def admin_stats(s: "Session") -> dict[str, Any]:
    counts = status_counts(s)
    recent = (
        s.query(UserAuditLog)
        .order_by(UserAuditLog.created_at.desc(), UserAuditLog.id.desc())
        .limit(RECENT_LIMIT)
        .all()
    )
    return {
        "stats": {
            "totalSubmissions": sum(counts.values()),
            "pendingReview": counts["PENDING"],
            "reviewed": counts["REVIEWED"],
            "flagged": counts["FLAGGED"],
            "activeUsers": s.query(func.count(User.id)).filter(User.is_active.is_(True)).scalar() or 0,
        },
        "activities": [audit_log_dict(ev) for ev in recent],
    }


def management_stats(s: "Session", *, now: datetime | None = None) -> dict[str, Any]:
    today = start_of_day(now)
    counts = status_counts(s)
    recent = s.query(Submission).order_by(Submission.created_at.desc(), Submission.id.desc()).limit(RECENT_LIMIT).all()
    return {
        "stats": {
            "totalSubmissions": sum(counts.values()),
            "pendingReview": counts["PENDING"],
            "reviewedToday": _submission_count(s, Submission.status == "REVIEWED", Submission.updated_at >= today),
            "flaggedItems": counts["FLAGGED"],
        },
        "recentSubmissions": [submission_dict(sub, include_key=False) for sub in recent],
    }


def support_stats(s: "Session", *, now: datetime | None = None) -> dict[str, Any]:
    today = start_of_day(now)
    return {
        "stats": {
            "totalSubmissions": _submission_count(s),
            "pendingSubmissions": _submission_count(s, Submission.status == "PENDING"),
            "todaySubmissions": _submission_count(s, Submission.created_at >= today),
        }
    }
