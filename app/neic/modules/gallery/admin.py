from __future__ import annotations

from flask import Blueprint, abort, current_app, jsonify, request

from app.neic.db import db_session
from app.neic.modules.gallery.models import GalleryItem
from app.neic.modules.gallery.service import (
    UPLOAD_PREFIX,
    create_gallery_item,
    delete_gallery_item,
    update_gallery_item,
    validate_gallery_payload,
)
from app.neic.rbac import current_user, require_management
from app.neic.storage import (
    ALLOWED_IMAGE_TYPES,
    FileValidationError,
    StorageError,
    StoredFile,
    store_upload,
    storage_from_config,
)
from app.neic.utils import apply_search, filter_value, json_error, paginate, parse_bool, request_payload

bp = Blueprint("gallery_admin", __name__)


def _get_or_404(item_id: int) -> GalleryItem:
    item = db_session().get(GalleryItem, item_id)
    if not item:
        abort(404, description="Gallery item not found")
    return item


def _uploaded_image():
    upload = request.files.get("file") or request.files.get("image")
    if upload is None or not upload.filename:
        return None
    return upload


def _store_image(upload) -> StoredFile:
    return store_upload(
        storage_from_config(current_app.config),
        UPLOAD_PREFIX,
        upload.read(),
        upload.filename,
        upload.mimetype or "application/octet-stream",
        max_bytes=int(current_app.config["UPLOAD_MAX_BYTES"]),
        allowed_types=ALLOWED_IMAGE_TYPES,
    )


@bp.get("")
@require_management
def list_items():
    q = db_session().query(GalleryItem)
    category = filter_value(request.args.get("category"))
    if category:
        q = q.filter(GalleryItem.category == category)
    if request.args.get("featured"):
        q = q.filter(GalleryItem.featured.is_(parse_bool(request.args.get("featured"))))
    q = apply_search(
        q,
        request.args.get("search") or "",
        GalleryItem.title_en,
        GalleryItem.title_bn,
        GalleryItem.description_en,
        GalleryItem.description_bn,
    )
    q = q.order_by(GalleryItem.featured.desc(), GalleryItem.order.asc(), GalleryItem.published_at.desc())
    rows, pagination = paginate(q)
    return jsonify({"items": [r.to_dict() for r in rows], "pagination": pagination})


@bp.get("/<int:item_id>")
@require_management
def get_item(item_id: int):
    return jsonify({"item": _get_or_404(item_id).to_dict()})


@bp.post("")
@require_management
def create():
    s = db_session()
    payload = request_payload()
    upload = _uploaded_image()
    errors = validate_gallery_payload(payload, has_file=upload is not None)
    if errors:
        return json_error(errors[0], 400, errors=errors)
    try:
        image = _store_image(upload)
    except FileValidationError as e:
        return json_error(str(e), 400)
    except (StorageError, OSError) as e:
        current_app.logger.error("Gallery upload failed: %s", e)
        return json_error("Failed to store image", 500)
    item = create_gallery_item(s, payload, image, current_user())
    s.commit()
    return jsonify({"item": item.to_dict(), "message": "Gallery item created successfully"}), 201


@bp.put("/<int:item_id>")
@require_management
def update(item_id: int):
    s = db_session()
    item = _get_or_404(item_id)
    payload = request_payload()
    errors = validate_gallery_payload(payload, item=item)
    if errors:
        return json_error(errors[0], 400, errors=errors)
    image = None
    upload = _uploaded_image()
    if upload is not None:
        try:
            image = _store_image(upload)
        except FileValidationError as e:
            return json_error(str(e), 400)
        except (StorageError, OSError) as e:
            current_app.logger.error("Gallery upload failed: %s", e)
            return json_error("Failed to store image", 500)
    update_gallery_item(
        s, item, payload, current_user(), image=image, storage=storage_from_config(current_app.config)
    )
    s.commit()
    return jsonify({"item": item.to_dict(), "message": "Gallery item updated successfully"})


@bp.delete("/<int:item_id>")
@require_management
def delete(item_id: int):
    s = db_session()
    delete_gallery_item(s, _get_or_404(item_id), current_user(), storage_from_config(current_app.config))
    s.commit()
    return jsonify({"message": "Gallery item deleted successfully"})
