from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from sqlalchemy import func

from app.neic.modules.submissions.models import Submission

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

MAX_REPORT_DAYS = 365
TOP_DISTRICTS = 10

CSV_HEADERS = [
    "ID",
    "Name",
    "Contact",
    "Email",
    "District",
    "Seat Name",
    "Message",
    "Status",
    "Source",
    "Language",
    "Created At",
    "Updated At",
    "Attachment Name",
    "Attachment Size",
    "Attachment Type",
]


@dataclass(frozen=True)
class ReportWindow:
    days: int
    start: datetime
    end: datetime

    @classmethod
    def last(cls, days: int, *, now: datetime | None = None) -> "ReportWindow":
        end = now or datetime.utcnow()
        return cls(days=days, start=end - timedelta(days=days), end=end)

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat(), "days": self.days}


def start_of_day(now: datetime | None = None) -> datetime:
    now = now or datetime.utcnow()
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def _in_window(q, window: ReportWindow):
    return q.filter(Submission.created_at >= window.start, Submission.created_at <= window.end)


def _count(s: "Session", *criteria) -> int:
    return s.query(func.count(Submission.id)).filter(*criteria).scalar() or 0


def _grouped(s: "Session", column, window: ReportWindow, *, limit: int | None = None) -> list[dict[str, Any]]:
    count = func.count(Submission.id)
    q = _in_window(s.query(column, count), window).group_by(column).order_by(count.desc(), column.asc())
    if limit:
        q = q.limit(limit)
    return [{"value": value or "Unknown", "count": n} for value, n in q.all()]


def average_processing_time(s: "Session", window: ReportWindow) -> str:
    """Mean created->updated time of reviewed submissions, as '3.5h' or '2.1d'."""
    rows = (
        s.query(Submission.created_at, Submission.updated_at)
        .filter(Submission.status == "REVIEWED", Submission.updated_at >= window.start)
        .limit(100)
        .all()
    )
    if not rows:
        return "0h"
    hours = sum((updated - created).total_seconds() for created, updated in rows) / len(rows) / 3600
    if hours < 24:
        return f"{round(hours, 1):g}h"
    return f"{round(hours / 24, 1):g}d"


def build_report(s: "Session", window: ReportWindow) -> dict[str, Any]:
    in_window = (Submission.created_at >= window.start, Submission.created_at <= window.end)
    total = _count(s, *in_window)
    today = start_of_day(window.end)
    return {
        "totalSubmissions": total,
        "pendingReview": _count(s, Submission.status == "PENDING", *in_window),
        "flaggedItems": _count(s, Submission.status == "FLAGGED", *in_window),
        "reviewedToday": _count(s, Submission.status == "REVIEWED", Submission.updated_at >= today),
        "todaySubmissions": _count(s, Submission.created_at >= today),
        "averageProcessingTime": average_processing_time(s, window),
        "byStatus": _grouped(s, Submission.status, window),
        "byLocale": _grouped(s, Submission.locale, window),
        "byDistrict": _grouped(s, Submission.district, window, limit=TOP_DISTRICTS),
        "bySource": _grouped(s, Submission.source, window),
        "dateRange": window.to_dict(),
        "lastUpdated": datetime.utcnow().isoformat(),
    }


def submissions_in_window(s: "Session", window: ReportWindow) -> list[Submission]:
    return _in_window(s.query(Submission), window).order_by(Submission.created_at.desc()).all()


def submissions_csv(submissions: list[Submission]) -> str:
    out = io.StringIO()
    w = csv.writer(out)
    w.writerow(CSV_HEADERS)
    for sub in submissions:
        w.writerow(
            [
                sub.id,
                sub.name or "",
                sub.contact or "",
                sub.email or "",
                sub.district or "",
                sub.seat_name or "",
                sub.message or "",
                sub.status,
                sub.source or "web",
                sub.locale or "en",
                sub.created_at.isoformat(),
                sub.updated_at.isoformat(),
                sub.attachment_name or "",
                sub.attachment_size or "",
                sub.attachment_type or "",
            ]
        )
    return out.getvalue()


def report_filename(days: int, *, today: datetime | None = None) -> str:
    return f"management-report-{days}days-{(today or datetime.utcnow()).date().isoformat()}.csv"
