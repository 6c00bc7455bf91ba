from __future__ import annotations

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
from app.neic.modules.blog.models import DEFAULT_AUTHOR_BN, DEFAULT_AUTHOR_EN, DEFAULT_IMAGE, BlogPost

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.neic.models import User

REQUIRED_FIELDS = ("slug", "title_en", "title_bn", "excerpt_en", "excerpt_bn", "content_en", "content_bn")

FIELDS = {
    "slug": text,
    "title_en": text,
    "title_bn": text,
    "excerpt_en": text,
    "excerpt_bn": text,
    "content_en": text,
    "content_bn": text,
    "author_en": text,
    "author_bn": text,
    "category": text,
    "image": text,
    "tags": tags,
    "featured": flag,
    "read_time": order_value,
    "is_active": flag,
    "published_at": timestamp,
}


def slug_taken(s: "Session", slug: str, *, exclude_id: int | None = None) -> bool:
    q = s.query(BlogPost.id).filter(BlogPost.slug == slug)
    if exclude_id is not None:
        q = q.filter(BlogPost.id != exclude_id)
    return q.first() is not None


def validate_blog_payload(s: "Session", payload: dict, *, post: BlogPost | None = None) -> list[str]:
    """Validate a create (post=None) or partial update payload. Returns list of errors."""
    if post is None and missing_fields(payload, REQUIRED_FIELDS):
        return [MISSING_REQUIRED]
    if post is not None:
        # Required fields may be omitted on update but not blanked.
        blanked = [f for f in REQUIRED_FIELDS if f in payload and text(payload[f]) is None]
        if blanked:
            return [MISSING_REQUIRED]
    errors = validate_fields(payload, FIELDS)
    slug = text(payload.get("slug"))
    if slug and slug_taken(s, slug, exclude_id=post.id if post else None):
        errors.append("Slug already exists")
    return errors


def create_blog_post(s: "Session", payload: dict, user: "User") -> BlogPost:
    post = BlogPost(
        author_en=DEFAULT_AUTHOR_EN,
        author_bn=DEFAULT_AUTHOR_BN,
        category="general",
        image=DEFAULT_IMAGE,
        tags=[],
        featured=False,
        read_time=5,
        is_active=True,
        published_at=datetime.utcnow(),
    )
    apply_changes(post, payload, FIELDS)
    # Blank optional values fall back to their defaults.
    post.author_en = post.author_en or DEFAULT_AUTHOR_EN
    post.author_bn = post.author_bn or DEFAULT_AUTHOR_BN
    post.category = post.category or "general"
    post.image = post.image or DEFAULT_IMAGE
    post.read_time = post.read_time or 5
    post.published_at = post.published_at or datetime.utcnow()
    stamp_created(post, user)
    s.add(post)
    s.flush()
    audit_content(s, user, "blog.create", post, {"slug": post.slug})
    return post


def update_blog_post(s: "Session", post: BlogPost, payload: dict, user: "User") -> BlogPost:
    changes = apply_changes(post, payload, FIELDS)
    if "published_at" in changes and post.published_at is None:
        post.published_at = datetime.utcnow()
    stamp_updated(post, user)
    audit_content(s, user, "blog.edit", post, {"slug": post.slug, "changes": changes})
    return post


def delete_blog_post(s: "Session", post: BlogPost, user: "User") -> None:
    delete_content(s, post, user, "blog.delete", {"slug": post.slug})


def related_posts(s: "Session", post: BlogPost, limit: int = 3) -> list[BlogPost]:
    return (
        s.query(BlogPost)
        .filter(BlogPost.is_active.is_(True), BlogPost.category == post.category, BlogPost.id != post.id)
        .order_by(BlogPost.featured.desc(), BlogPost.published_at.desc())
        .limit(limit)
        .all()
    )
