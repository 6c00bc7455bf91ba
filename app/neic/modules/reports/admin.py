from flask import Blueprint, Response, jsonify, request

from app.neic.audit import record_event
from app.neic.constants import AUDIT_REPORT_GENERATION
from app.neic.db import db_session
from app.neic.modules.reports.service import (
    MAX_REPORT_DAYS,
    ReportWindow,
    build_report,
    report_filename,
    submissions_csv,
    submissions_in_window,
)
from app.neic.rbac import current_user, require_management
from app.neic.utils import json_error, parse_int

bp = Blueprint("reports", __name__)


def _window() -> ReportWindow | None:
    days = parse_int(request.args.get("days"), 7)
    if days < 1 or days > MAX_REPORT_DAYS:
        return None
    return ReportWindow.last(days)


@bp.get("")
@require_management
def report():
    window = _window()
    if window is None:
        return json_error("Invalid date range", 400)
    return jsonify({"success": True, "data": build_report(db_session(), window)})


@bp.get("/generate")
@require_management
def generate():
    fmt = (request.args.get("format") or "csv").strip().lower()
    if fmt != "csv":
        return json_error("Invalid format. Only CSV is supported.", 400)
    window = _window()
    if window is None:
        return json_error("Invalid date range", 400)

    s = db_session()
    rows = submissions_in_window(s, window)
    record_event(
        s,
        actor=current_user(),
        action=AUDIT_REPORT_GENERATION,
        metadata={"endpoint": request.path, "format": fmt, "days": window.days, "record_count": len(rows)},
    )
    s.commit()
    return Response(
        submissions_csv(rows),
        mimetype="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{report_filename(window.days)}"'},
    )
