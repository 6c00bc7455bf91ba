from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from app.neic.audit import record_event
from app.neic.constants import SUBMISSION_STATUSES
from app.neic.modules.submissions.spam import SpamResult, assess_spam
from app.neic.storage import Storage, StoredFile
from app.neic.utils import parse_bool

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.neic.models import User
    from app.neic.modules.submissions.models import Submission

logger = logging.getLogger(__name__)

PHONE_RE = re.compile(r"^(\+880|880|0)?1[3-9]\d{8}$")
EMAIL_RE = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)
# Bengali, Devanagari, Arabic and Latin letters plus basic punctuation.
NAME_RE = re.compile(r"^[\u0980-\u09FF\u0900-\u097F\u0600-\u06FF\u0750-\u077Fa-zA-Z\s.,'-]+$")
SPAM_PATTERNS = (
    re.compile(r"viagra|cialis|pharmacy", re.IGNORECASE),
    re.compile(r"\b(www\.|http|https)\b.*\b(\.|com|net|org|info)", re.IGNORECASE),
    re.compile(r"\$\d+|USD|bitcoin|crypto", re.IGNORECASE),
    re.compile(r"click here|visit now|buy now", re.IGNORECASE),
)

NAME_MAX = 120
MESSAGE_MIN = 10
MESSAGE_MAX = 500
HONEYPOT_FIELDS = ("website", "honeypot", "hp_field")


@dataclass(frozen=True)
class SubmissionInput:
    phone: str
    message: str
    name: str | None = None
    email: str | None = None
    district: str | None = None
    seat_name: str | None = None
    share_name: bool = False


def _issue(path: str, message: str) -> dict[str, Any]:
    return {"path": [path], "message": message}


def is_honeypot_tripped(payload: dict) -> bool:
    return any(str(payload.get(f) or "").strip() for f in HONEYPOT_FIELDS)


def message_has_spam_patterns(message: str) -> bool:
    return any(p.search(message) for p in SPAM_PATTERNS)


def validate_submission_payload(payload: dict) -> tuple[SubmissionInput | None, list[dict[str, Any]]]:
    """
    Validate a public submission. Returns (input, []) on success or (None, issues)
    where each issue is {"path": [field], "message": str}.
    """
    issues: list[dict[str, Any]] = []

    name = str(payload.get("name") or "").strip()
    if name:
        if len(name) > NAME_MAX:
            issues.append(_issue("name", "Name must be less than 120 characters"))
        elif not NAME_RE.match(name):
            issues.append(
                _issue("name", "Name contains invalid characters. Only letters, spaces, and basic punctuation are allowed")
            )

    phone = str(payload.get("phone") or "").strip()
    if not phone:
        issues.append(_issue("phone", "Phone number is required"))
    elif not PHONE_RE.match(phone):
        issues.append(
            _issue("phone", "Please enter a valid Bangladesh phone number (e.g., +8801xxxxxxxxx or 01xxxxxxxxx)")
        )

    email = str(payload.get("email") or "").strip()
    if email and not EMAIL_RE.match(email):
        issues.append(_issue("email", "Please enter a valid email address"))

    message = str(payload.get("message") or "").strip()
    if not message:
        issues.append(_issue("message", "Message is required"))
    elif len(message) < MESSAGE_MIN:
        issues.append(_issue("message", "Message must be at least 10 characters long"))
    elif len(message) > MESSAGE_MAX:
        issues.append(_issue("message", "Message must be less than 500 characters"))
    elif message_has_spam_patterns(message):
        issues.append(_issue("message", "Message contains inappropriate content or spam patterns"))

    if issues:
        return None, issues

    share_raw = payload.get("share_name", payload.get("shareName"))
    return (
        SubmissionInput(
            phone=phone,
            message=message,
            name=name or None,
            email=email or None,
            district=str(payload.get("district") or "").strip() or None,
            seat_name=str(payload.get("seat_name") or payload.get("seatName") or "").strip() or None,
            share_name=parse_bool(share_raw),
        ),
        [],
    )


def log_submission_event(event: str, meta: dict[str, Any], request_id: str | None = None) -> None:
    payload = {"event": event, "request_id": request_id, **meta}
    logger.info("%s %s", event, json.dumps(payload, default=str, ensure_ascii=False, sort_keys=True))


def create_submission(
    s: "Session",
    data: SubmissionInput,
    *,
    ip_hash: str,
    locale: str,
    attachment: StoredFile | None = None,
) -> tuple["Submission", SpamResult]:
    from app.neic.modules.submissions.models import Submission

    spam = assess_spam(data.message)
    now = datetime.utcnow()
    sub = Submission(
        name=data.name if data.share_name else None,
        contact=data.phone,
        email=data.email,
        district=data.district,
        seat_name=data.seat_name,
        message=data.message,
        ip_hash=ip_hash,
        locale=locale,
        status="FLAGGED" if spam.flagged else "PENDING",
        source="web",
        created_at=now,
        updated_at=now,
    )
    if attachment is not None:
        sub.attachment_url = attachment.url
        sub.attachment_key = attachment.key
        sub.attachment_name = attachment.original_name
        sub.attachment_size = attachment.size
        sub.attachment_type = attachment.content_type
    s.add(sub)
    s.flush()
    return sub, spam


def validate_status(status: Any) -> list[str]:
    if str(status or "") not in SUBMISSION_STATUSES:
        return ["Invalid status"]
    return []


def update_submission_status(s: "Session", sub: "Submission", status: str, user: "User") -> "Submission":
    old = sub.status
    sub.status = status
    sub.updated_at = datetime.utcnow()
    record_event(
        s,
        actor=user,
        action="submission.status",
        entity_type="Submission",
        entity_id=sub.id,
        metadata={"changes": {"status": {"old": old, "new": status}}},
    )
    return sub


def delete_submission(s: "Session", sub: "Submission", user: "User", storage: Storage) -> None:
    if sub.attachment_key:
        storage.delete(sub.attachment_key)
    record_event(
        s,
        actor=user,
        action="submission.delete",
        entity_type="Submission",
        entity_id=sub.id,
        metadata={"had_attachment": bool(sub.attachment_key)},
    )
    s.delete(sub)


def submission_dict(sub: "Submission", *, include_key: bool = True) -> dict[str, Any]:
    """Back-office view of a submission; the IP hash never leaves the server."""
    exclude = {"ip_hash"}
    if not include_key:
        exclude.add("attachment_key")
    d = sub.to_dict(exclude=exclude)
    d["has_attachment"] = sub.has_attachment
    return d
