from __future__ import annotations

import hashlib
import json
import math
from datetime import date, datetime
from typing import Any

from flask import current_app, jsonify, request
from sqlalchemy import or_
from sqlalchemy.orm import Query


def client_ip() -> str:
    """First hop of X-Forwarded-For, then X-Real-IP, then the socket peer."""
    forwarded = (request.headers.get("X-Forwarded-For") or "").split(",")[0].strip()
    if forwarded:
        return forwarded
    real_ip = (request.headers.get("X-Real-IP") or "").strip()
    if real_ip:
        return real_ip
    return request.remote_addr or "unknown"


def hash_ip(ip: str) -> str:
    salt = current_app.config.get("HASH_SALT") or ""
    return hashlib.sha256(f"{salt}|{ip}".encode("utf-8")).hexdigest()


def is_development() -> bool:
    return (current_app.config.get("ENV") or "").strip().lower() == "development"


def request_payload() -> dict[str, Any]:
    """JSON body when present, otherwise form fields."""
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}
    return request.form.to_dict()


def parse_int(value: Any, default: int, *, minimum: int | None = None, maximum: int | None = None) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        n = default
    if minimum is not None and n < minimum:
        n = minimum
    if maximum is not None and n > maximum:
        n = maximum
    return n


def parse_bool(value: Any, default: bool = False) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def parse_datetime(value: Any) -> datetime | None:
    """Parse an ISO date or datetime string (a trailing Z is accepted)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    s = str(value).strip()
    if not s:
        return None
    if s.endswith("Z"):
        s = s[:-1]
    parsed = datetime.fromisoformat(s)
    # Stored columns are naive UTC.
    if parsed.tzinfo is not None:
        parsed = (parsed - parsed.utcoffset()).replace(tzinfo=None)
    return parsed


def parse_tags(value: Any) -> list[str]:
    """Tags arrive as a JSON list, a JSON-encoded string (multipart forms) or comma separated text."""
    if value is None or value == "":
        return []
    if isinstance(value, list):
        return [str(t).strip() for t in value if str(t).strip()]
    s = str(value).strip()
    if s.startswith("["):
        try:
            loaded = json.loads(s)
        except json.JSONDecodeError:
            loaded = None
        if isinstance(loaded, list):
            return [str(t).strip() for t in loaded if str(t).strip()]
    return [t.strip() for t in s.split(",") if t.strip()]


def clean_str(value: Any) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def apply_search(q: Query, search: str, *columns) -> Query:
    """Case-insensitive contains-match across any of the given columns."""
    search = (search or "").strip()
    if not search:
        return q
    like = f"%{search}%"
    return q.filter(or_(*[c.ilike(like) for c in columns]))


def filter_value(raw: str | None) -> str | None:
    """Query-string filter where '' and 'all' mean no filtering."""
    v = (raw or "").strip()
    if not v or v.lower() == "all":
        return None
    return v


def paginate(q: Query, *, default_limit: int = 50, max_limit: int = 200) -> tuple[list, dict[str, int]]:
    page = parse_int(request.args.get("page"), 1, minimum=1)
    limit = parse_int(request.args.get("limit"), default_limit, minimum=1, maximum=max_limit)
    total = q.order_by(None).count()
    items = q.offset((page - 1) * limit).limit(limit).all()
    return items, {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if total else 0,
    }


def bilingual(obj: Any, field: str) -> dict[str, Any]:
    """{'en': obj.<field>_en, 'bn': obj.<field>_bn}"""
    return {"en": getattr(obj, f"{field}_en"), "bn": getattr(obj, f"{field}_bn")}


def json_error(message: str, status: int = 400, **extra: Any):
    body: dict[str, Any] = {"error": message}
    body.update(extra)
    return jsonify(body), status
