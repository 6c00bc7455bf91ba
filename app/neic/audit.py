import json
from typing import Any

from flask import g, has_request_context, request
from sqlalchemy.orm import Session

from app.neic.models import User, UserAuditLog
from app.neic.utils import client_ip


def record_event(
    s: Session,
    *,
    actor: User,
    action: str,
    entity_type: str | None = None,
    entity_id: str | int | None = None,
    metadata: dict[str, Any] | None = None,
    subject: User | None = None,
    details: str | None = None,
) -> UserAuditLog:
    """
    Append-only audit event helper.

    The row is filed under `subject` when given (e.g. the account that was
    created or deactivated) and under `actor` otherwise; the actor's email is
    kept in the details so admin-on-user actions stay attributable.
    """
    owner = subject or actor
    if details is None:
        payload: dict[str, Any] = {}
        if entity_type:
            payload["entity_type"] = entity_type
        if entity_id is not None:
            payload["entity_id"] = str(entity_id)
        if subject is not None and subject is not actor:
            payload["actor"] = actor.email
        if metadata:
            payload.update(metadata)
        details = json.dumps(payload, sort_keys=True, default=str, ensure_ascii=False) if payload else None

    ip = None
    user_agent = None
    rid = None
    if has_request_context():
        ip = client_ip()
        user_agent = (request.headers.get("User-Agent") or "unknown")[:512]
        rid = getattr(g, "request_id", None)

    ev = UserAuditLog(
        user_id=owner.id,
        action=action,
        details=details,
        ip_address=ip,
        user_agent=user_agent,
        request_id=rid,
    )
    s.add(ev)
    return ev
