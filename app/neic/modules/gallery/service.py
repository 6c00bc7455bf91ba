from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from app.neic.content import (
    MISSING_REQUIRED,
    apply_changes,
    audit_content,
    delete_content,
    flag,
    missing_fields,
    order_value,
    stamp_created,
    stamp_updated,
    tags,
    text,
    timestamp,
    validate_fields,
)
from app.neic.modules.gallery.models import GalleryItem
from app.neic.storage import Storage, StorageError, StoredFile

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.neic.models import User

log = logging.getLogger(__name__)

UPLOAD_PREFIX = "gallery"
REQUIRED_FIELDS = ("title_en", "title_bn")

FIELDS = {
    "title_en": text,
    "title_bn": text,
    "description_en": text,
    "description_bn": text,
    "category": text,
    "tags": tags,
    "featured": flag,
    "order": order_value,
    "is_active": flag,
    "published_at": timestamp,
}


def validate_gallery_payload(payload: dict, *, item: GalleryItem | None = None, has_file: bool = False) -> list[str]:
    if item is None:
        if not has_file:
            return ["Image file is required"]
        if missing_fields(payload, REQUIRED_FIELDS):
            return [MISSING_REQUIRED]
    elif any(f in payload and text(payload[f]) is None for f in REQUIRED_FIELDS):
        return [MISSING_REQUIRED]
    return validate_fields(payload, FIELDS)


def _fill_defaults(item: GalleryItem) -> None:
    item.category = item.category or "general"
    item.published_at = item.published_at or datetime.utcnow()


def _drop_image(storage: Storage, key: str | None) -> None:
    if not key:
        return
    try:
        storage.delete(key)
    except StorageError as e:
        # Orphaned object; the row still goes.
        log.warning("Could not delete gallery image %s: %s", key, e)


def create_gallery_item(s: "Session", payload: dict, image: StoredFile, user: "User") -> GalleryItem:
    item = GalleryItem(tags=[], featured=False, order=0, is_active=True)
    apply_changes(item, payload, FIELDS)
    item.image_url = image.url
    item.image_key = image.key
    _fill_defaults(item)
    stamp_created(item, user)
    s.add(item)
    s.flush()
    audit_content(s, user, "gallery.create", item, {"image_key": image.key, "size": image.size})
    return item


def update_gallery_item(
    s: "Session",
    item: GalleryItem,
    payload: dict,
    user: "User",
    *,
    image: StoredFile | None = None,
    storage: Storage | None = None,
) -> GalleryItem:
    """Partial update; a new image replaces (and removes) the previous one."""
    changes = apply_changes(item, payload, FIELDS)
    if image is not None:
        old_key = item.image_key
        changes["image_key"] = {"old": old_key, "new": image.key}
        item.image_url = image.url
        item.image_key = image.key
        if storage is not None:
            _drop_image(storage, old_key)
    _fill_defaults(item)
    stamp_updated(item, user)
    audit_content(s, user, "gallery.edit", item, {"changes": changes})
    return item


def delete_gallery_item(s: "Session", item: GalleryItem, user: "User", storage: Storage) -> None:
    _drop_image(storage, item.image_key)
    delete_content(s, item, user, "gallery.delete", {"image_key": item.image_key})
