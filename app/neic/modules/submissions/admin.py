from __future__ import annotations

import mimetypes

from flask import Blueprint, abort, current_app, jsonify, request, send_file

from app.neic.db import db_session
from app.neic.modules.submissions.models import Submission
from app.neic.modules.submissions.service import (
    delete_submission,
    submission_dict,
    update_submission_status,
    validate_status,
)
from app.neic.rbac import current_user, require_management, require_support
from app.neic.storage import StorageError, storage_from_config
from app.neic.utils import apply_search, json_error, paginate, parse_int, request_payload

bp = Blueprint("submissions_admin", __name__)
support_bp = Blueprint("support_submissions", __name__)


def _get_or_404(submission_id: int) -> Submission:
    sub = db_session().get(Submission, submission_id)
    if not sub:
        abort(404, description="Submission not found")
    return sub


@bp.get("")
@require_management
def list_submissions():
    s = db_session()
    q = s.query(Submission)
    status = (request.args.get("status") or "").strip().upper()
    if status and status != "ALL":
        q = q.filter(Submission.status == status)
    limit = parse_int(request.args.get("limit"), 100, minimum=1, maximum=500)
    offset = parse_int(request.args.get("offset"), 0, minimum=0)
    total = q.count()
    rows = q.order_by(Submission.created_at.desc(), Submission.id.desc()).offset(offset).limit(limit).all()
    return jsonify(
        {
            "submissions": [submission_dict(r) for r in rows],
            "total": total,
            "limit": limit,
            "offset": offset,
        }
    )


@bp.get("/<int:submission_id>")
@require_management
def get_submission(submission_id: int):
    return jsonify({"submission": submission_dict(_get_or_404(submission_id))})


@bp.route("/<int:submission_id>", methods=["PUT", "PATCH"])
@require_management
def update_submission(submission_id: int):
    s = db_session()
    sub = _get_or_404(submission_id)
    status = request_payload().get("status")
    errors = validate_status(status)
    if errors:
        return json_error(errors[0], 400)
    update_submission_status(s, sub, str(status), current_user())
    s.commit()
    return jsonify(
        {
            "success": True,
            "submission": {"id": sub.id, "status": sub.status, "updated_at": sub.updated_at.isoformat()},
        }
    )


@bp.delete("/<int:submission_id>")
@require_management
def remove_submission(submission_id: int):
    s = db_session()
    sub = _get_or_404(submission_id)
    try:
        delete_submission(s, sub, current_user(), storage_from_config(current_app.config))
    except StorageError as e:
        current_app.logger.error("Failed to delete attachment for submission %s: %s", submission_id, e)
        return json_error("Failed to delete submission attachment", 500)
    s.commit()
    return jsonify({"success": True, "message": "Submission deleted successfully"})


@bp.get("/<int:submission_id>/attachment")
@require_management
def download_attachment(submission_id: int):
    sub = _get_or_404(submission_id)
    if not sub.attachment_key:
        abort(404, description="Attachment not found")
    storage = storage_from_config(current_app.config)
    try:
        fobj = storage.open(sub.attachment_key)
    except (StorageError, OSError):
        abort(404, description="Attachment not found")
    mimetype = sub.attachment_type or mimetypes.guess_type(sub.attachment_name or "")[0] or "application/octet-stream"
    return send_file(
        fobj,
        mimetype=mimetype,
        as_attachment=True,
        download_name=sub.attachment_name or "attachment.bin",
    )


@support_bp.get("/submissions")
@require_support
def support_submissions():
    """Read-only submission list for support staff."""
    s = db_session()
    q = s.query(Submission)
    q = apply_search(
        q,
        request.args.get("search") or "",
        Submission.name,
        Submission.contact,
        Submission.email,
        Submission.message,
        Submission.district,
        Submission.seat_name,
    )
    q = q.order_by(Submission.created_at.desc(), Submission.id.desc())
    rows, pagination = paginate(q, default_limit=50, max_limit=100)
    return jsonify(
        {
            "success": True,
            "data": [submission_dict(r, include_key=False) for r in rows],
            "pagination": pagination,
        }
    )
