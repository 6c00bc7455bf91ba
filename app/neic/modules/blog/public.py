from flask import Blueprint, abort, jsonify, request

from app.neic.db import db_session
from app.neic.modules.blog.models import BlogPost
from app.neic.modules.blog.service import related_posts
from app.neic.utils import filter_value, paginate, parse_bool

bp = Blueprint("blog_public", __name__)

LIST_EXCLUDE = ("content_en", "content_bn", "created_by", "updated_by")
RELATED_FIELDS = ("id", "slug", "title_en", "title_bn", "excerpt_en", "excerpt_bn", "image", "category", "published_at")


def public_posts_query(*, category: str | None = None, featured_only: bool = False):
    q = db_session().query(BlogPost).filter(BlogPost.is_active.is_(True))
    if category:
        q = q.filter(BlogPost.category == category)
    if featured_only:
        q = q.filter(BlogPost.featured.is_(True))
    return q.order_by(BlogPost.featured.desc(), BlogPost.published_at.desc(), BlogPost.id.desc())


def get_public_post(slug: str) -> BlogPost | None:
    return (
        db_session()
        .query(BlogPost)
        .filter(BlogPost.slug == slug, BlogPost.is_active.is_(True))
        .one_or_none()
    )


@bp.get("")
def list_posts():
    q = public_posts_query(
        category=filter_value(request.args.get("category")),
        featured_only=parse_bool(request.args.get("featured")),
    )
    rows, pagination = paginate(q)
    return jsonify({"posts": [r.to_dict(exclude=LIST_EXCLUDE) for r in rows], "pagination": pagination})


@bp.get("/<slug>")
def get_post(slug: str):
    post = get_public_post(slug)
    if not post:
        abort(404, description="Blog post not found")
    related = related_posts(db_session(), post)
    return jsonify(
        {
            "post": post.to_dict(exclude=("created_by", "updated_by")),
            "related_posts": [{k: v for k, v in r.to_dict().items() if k in RELATED_FIELDS} for r in related],
        }
    )
