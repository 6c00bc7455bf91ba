"""
Server-rendered pages: the bilingual public site under /<locale>/, the login
and unauthorized pages, and the three role dashboards.
"""
from flask import Blueprint, abort, current_app, g, redirect, render_template, request

from app.neic.auth import dashboard_path_for
from app.neic.db import db_session
from app.neic.i18n import FORMATION, HOME, PRIVACY, SUBMIT_FORM, localize, normalize_locale
from app.neic.modules.blog.public import get_public_post, public_posts_query
from app.neic.modules.blog.service import related_posts
from app.neic.modules.commission.public import active_members
from app.neic.modules.dashboards.service import admin_stats, management_stats, support_stats
from app.neic.modules.notices.public import current_notices_query
from app.neic.modules.sliders.public import active_sliders
from app.neic.rbac import require_admin, require_management, require_support, role_display_name
from app.neic.utils import parse_int

bp = Blueprint("pages", __name__)

LOCALE = "<any(bn, en):locale>"
HOME_NOTICES = 5
BLOG_PAGE_SIZE = 9


def _render(template: str, locale: str, **ctx):
    # Read by the locale context processor in create_app().
    g.locale = locale
    return render_template(template, **ctx)


def _request_locale() -> str:
    return normalize_locale(request.args.get("locale") or getattr(g, "locale", None))


@bp.get("/login")
def login():
    user = getattr(g, "current_user", None)
    if user:
        return redirect(dashboard_path_for(user))
    return _render("auth/login.html", _request_locale(), next=request.args.get("next") or "", error=None)


@bp.get("/unauthorized")
def unauthorized():
    user = getattr(g, "current_user", None)
    locale = _request_locale()
    role = role_display_name(user.role, locale) if user else None
    return _render("auth/unauthorized.html", locale, role=role), 403


@bp.get(f"/{LOCALE}/")
def home(locale: str):
    notices = current_notices_query().limit(HOME_NOTICES).all()
    return _render("public/home.html", locale, home=localize(HOME, locale), notices=notices, slides=active_sliders())


@bp.get(f"/{LOCALE}/formation")
def formation(locale: str):
    return _render("public/formation.html", locale, formation=localize(FORMATION, locale))


@bp.get(f"/{LOCALE}/members")
def members(locale: str):
    rows = active_members()
    return _render(
        "public/members.html",
        locale,
        members=[m for m in rows if m.role_type == "commission_member"],
        support=[m for m in rows if m.role_type == "secretarial_support"],
    )


@bp.get(f"/{LOCALE}/blog")
def blog(locale: str):
    page = parse_int(request.args.get("page"), 1, minimum=1)
    q = public_posts_query()
    total = q.order_by(None).count()
    posts = q.offset((page - 1) * BLOG_PAGE_SIZE).limit(BLOG_PAGE_SIZE).all()
    pages = (total + BLOG_PAGE_SIZE - 1) // BLOG_PAGE_SIZE
    return _render("public/blog_list.html", locale, posts=posts, page=page, pages=pages)


@bp.get(f"/{LOCALE}/blog/<slug>")
def blog_post(locale: str, slug: str):
    post = get_public_post(slug)
    if not post:
        abort(404)
    return _render("public/blog_post.html", locale, post=post, related=related_posts(db_session(), post))


@bp.get(f"/{LOCALE}/privacy")
def privacy(locale: str):
    return _render("public/privacy.html", locale, privacy=localize(PRIVACY, locale))


@bp.get(f"/{LOCALE}/submit")
def submit(locale: str):
    max_mb = int(current_app.config["UPLOAD_MAX_BYTES"]) // (1024 * 1024)
    return _render("public/submit.html", locale, form=localize(SUBMIT_FORM, locale), max_upload=f"{max_mb} MB")


@bp.get(f"/{LOCALE}/forgot-password")
def forgot_password(locale: str):
    return _render("auth/forgot_password.html", locale)


@bp.get(f"/{LOCALE}/reset-password")
def reset_password(locale: str):
    token = (request.args.get("token") or "").strip()
    return _render("auth/reset_password.html", locale, token=token)


@bp.get("/admin")
@require_admin
def admin_dashboard():
    return _render("dashboards/admin.html", _request_locale(), data=admin_stats(db_session()))


@bp.get("/management")
@require_management
def management_dashboard():
    return _render("dashboards/management.html", _request_locale(), data=management_stats(db_session()))


@bp.get("/support")
@require_support
def support_dashboard():
    return _render("dashboards/support.html", _request_locale(), data=support_stats(db_session()))
