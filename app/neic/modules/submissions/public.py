from __future__ import annotations

from flask import Blueprint, current_app, g, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from app.neic.db import db_session
from app.neic.i18n import normalize_locale
from app.neic.modules.submissions.service import (
    create_submission,
    is_honeypot_tripped,
    log_submission_event,
    validate_submission_payload,
)
from app.neic.storage import FileValidationError, StorageError, StoredFile, store_upload, storage_from_config
from app.neic.utils import client_ip, hash_ip, is_development

bp = Blueprint("submit", __name__)


def _fail(code: str, message: str, status: int, **extra):
    error = {"code": code, "message": message}
    error.update(extra)
    return jsonify({"ok": False, "error": error}), status


def _discard_attachment(key: str, rid: str | None) -> None:
    try:
        storage_from_config(current_app.config).delete(key)
    except (StorageError, OSError) as e:
        current_app.logger.error("Orphaned attachment %s (request_id=%s): %s", key, rid, e)


@bp.post("/submit")
def submit():
    ip = client_ip()
    rid = getattr(g, "request_id", None)

    if not is_development():
        result = current_app.extensions["rate_limiter"].check(f"submit:{ip}")
        if not result.allowed:
            return _fail("RATE_LIMIT", "Too many requests", 429)

    attachment_file = None
    if request.mimetype == "multipart/form-data":
        payload = request.form.to_dict()
        captcha_token = payload.get("captcha_token") or payload.get("g-recaptcha-response")
        attachment_file = request.files.get("attachment")
    else:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return _fail("BAD_REQUEST", "Invalid request format", 400)
        payload = data
        captcha_token = data.get("captcha_token") or data.get("captchaToken")

    verifier = current_app.extensions["captcha"]
    if verifier.configured:
        if not captcha_token:
            return _fail("CAPTCHA_REQUIRED", "Captcha verification is required.", 400)
        outcome = verifier.verify(str(captcha_token), None if ip == "unknown" else ip)
        if not outcome.success:
            log_submission_event(
                "submission.captcha_failed", {"error_codes": outcome.error_codes, "message": outcome.message}, rid
            )
            return _fail("CAPTCHA_FAILED", "Captcha verification failed. Please try again.", 400)

    if is_honeypot_tripped(payload):
        return _fail("SPAM", "Rejected", 400)

    data_in, issues = validate_submission_payload(payload)
    if data_in is None:
        return _fail("VALIDATION", "Validation failed", 422, issues=issues)

    stored: StoredFile | None = None
    if attachment_file is not None and attachment_file.filename:
        raw = attachment_file.read()
        if raw:
            try:
                stored = store_upload(
                    storage_from_config(current_app.config),
                    "submissions",
                    raw,
                    attachment_file.filename,
                    attachment_file.mimetype or "application/octet-stream",
                    max_bytes=int(current_app.config["UPLOAD_MAX_BYTES"]),
                )
            except FileValidationError as e:
                return _fail("FILE_VALIDATION_ERROR", str(e), 400)
            except (StorageError, OSError) as e:
                current_app.logger.error("File storage error (request_id=%s): %s", rid, e)
                return _fail("FILE_STORAGE_ERROR", "Failed to store file. Please try again.", 500)
            log_submission_event(
                "submission.file_stored",
                {"file_name": stored.original_name, "file_size": stored.size, "mime_type": stored.content_type},
                rid,
            )

    locale = normalize_locale(payload.get("locale"))
    s = db_session()
    try:
        sub, spam = create_submission(s, data_in, ip_hash=hash_ip(ip), locale=locale, attachment=stored)
        s.commit()
    except SQLAlchemyError as e:
        s.rollback()
        log_submission_event("submission.error", {"error": str(e)}, rid)
        if stored is not None:
            _discard_attachment(stored.key, rid)
        return _fail("DB_ERROR", "Could not store submission", 500)

    log_submission_event(
        "submission.created",
        {
            "id": sub.id,
            "locale": sub.locale,
            "status": sub.status,
            "spam_score": spam.score,
            "spam_reasons": spam.reasons,
            "has_file": stored is not None,
        },
        rid,
    )
    return jsonify({"ok": True})
