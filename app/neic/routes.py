import mimetypes

from flask import Blueprint, abort, current_app, redirect, send_file, url_for

from app.neic.constants import DEFAULT_LOCALE
from app.neic.storage import StorageError, storage_from_config

bp = Blueprint("routes", __name__)

# Submission attachments are private and only reachable through the admin API.
PUBLIC_UPLOAD_PREFIXES = ("gallery/",)


@bp.get("/")
def index():
    return redirect(url_for("pages.home", locale=DEFAULT_LOCALE))


@bp.get("/health")
def health():
    """Health check endpoint. Returns JSON."""
    return {"ok": True}


@bp.get("/healthz")
def healthz():
    """
    Fast health check for load balancer probes. No DB access, minimal overhead.
    """
    return "ok", 200


def public_upload_key(key: str) -> str | None:
    """The key when it names a file under a public prefix, else None."""
    parts = key.replace("\\", "/").split("/")
    if any(part in ("", ".", "..") for part in parts):
        return None
    clean = "/".join(parts)
    return clean if clean.startswith(PUBLIC_UPLOAD_PREFIXES) else None


@bp.get("/uploads/<path:key>")
def uploads(key: str):
    key = public_upload_key(key)
    if key is None:
        abort(404)
    storage = storage_from_config(current_app.config)
    try:
        if not storage.exists(key):
            abort(404)
        fobj = storage.open(key)
    except StorageError:
        abort(404)
    mimetype = mimetypes.guess_type(key)[0] or "application/octet-stream"
    return send_file(fobj, mimetype=mimetype, max_age=3600)
