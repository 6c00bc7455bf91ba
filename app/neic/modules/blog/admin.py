from flask import Blueprint, abort, jsonify, request

from app.neic.db import db_session
from app.neic.modules.blog.models import BlogPost
from app.neic.modules.blog.service import create_blog_post, delete_blog_post, update_blog_post, validate_blog_payload
from app.neic.rbac import current_user, require_management
from app.neic.utils import apply_search, filter_value, json_error, paginate, request_payload

bp = Blueprint("blog_admin", __name__)


def _get_or_404(post_id: int) -> BlogPost:
    post = db_session().get(BlogPost, post_id)
    if not post:
        abort(404, description="Blog post not found")
    return post


@bp.get("")
@require_management
def list_posts():
    s = db_session()
    q = s.query(BlogPost)
    category = filter_value(request.args.get("category"))
    if category:
        q = q.filter(BlogPost.category == category)
    q = apply_search(
        q, request.args.get("search") or "", BlogPost.title_en, BlogPost.title_bn, BlogPost.excerpt_en, BlogPost.excerpt_bn
    )
    q = q.order_by(BlogPost.published_at.desc(), BlogPost.id.desc())
    rows, pagination = paginate(q)
    return jsonify({"posts": [r.to_dict() for r in rows], "pagination": pagination})


@bp.get("/<int:post_id>")
@require_management
def get_post(post_id: int):
    return jsonify({"post": _get_or_404(post_id).to_dict()})


@bp.post("")
@require_management
def create_post():
    s = db_session()
    payload = request_payload()
    errors = validate_blog_payload(s, payload)
    if errors:
        return json_error(errors[0], 400, errors=errors)
    post = create_blog_post(s, payload, current_user())
    s.commit()
    return jsonify({"post": post.to_dict(), "message": "Blog post created successfully"}), 201


@bp.put("/<int:post_id>")
@require_management
def update_post(post_id: int):
    s = db_session()
    post = _get_or_404(post_id)
    payload = request_payload()
    errors = validate_blog_payload(s, payload, post=post)
    if errors:
        return json_error(errors[0], 400, errors=errors)
    update_blog_post(s, post, payload, current_user())
    s.commit()
    return jsonify({"post": post.to_dict(), "message": "Blog post updated successfully"})


@bp.delete("/<int:post_id>")
@require_management
def delete_post(post_id: int):
    s = db_session()
    post = _get_or_404(post_id)
    delete_blog_post(s, post, current_user())
    s.commit()
    return jsonify({"message": "Blog post deleted successfully"})
