import logging
import os
import uuid
from datetime import timedelta

from dotenv import load_dotenv
from flask import Flask, g, jsonify, render_template, request, session
from werkzeug.exceptions import HTTPException

from app.neic.auth import bp as auth_bp, load_current_user
from app.neic.captcha import verifier_from_config
from app.neic.config import load_config
from app.neic.db import init_db, teardown_db_session
from app.neic.i18n import NAV, SITE, localize, normalize_locale
from app.neic.modules.blog.admin import bp as blog_admin_bp
from app.neic.modules.blog.public import bp as blog_public_bp
from app.neic.modules.commission.admin import bp as commission_admin_bp
from app.neic.modules.commission.public import bp as commission_public_bp
from app.neic.modules.contacts.admin import bp as contacts_admin_bp
from app.neic.modules.contacts.public import bp as contacts_public_bp
from app.neic.modules.dashboards.admin import bp as dashboards_bp
from app.neic.modules.faq.admin import bp as faq_admin_bp
from app.neic.modules.faq.public import bp as faq_public_bp
from app.neic.modules.gallery.admin import bp as gallery_admin_bp
from app.neic.modules.gallery.public import bp as gallery_public_bp
from app.neic.modules.gazettes.admin import bp as gazettes_admin_bp
from app.neic.modules.gazettes.public import bp as gazettes_public_bp
from app.neic.modules.notices.admin import bp as notices_admin_bp
from app.neic.modules.notices.public import bp as notices_public_bp
from app.neic.modules.public.public import bp as homepage_public_bp
from app.neic.modules.reports.admin import bp as reports_bp
from app.neic.modules.sliders.admin import bp as sliders_admin_bp
from app.neic.modules.sliders.public import bp as sliders_public_bp
from app.neic.modules.submissions.admin import bp as submissions_admin_bp, support_bp as support_submissions_bp
from app.neic.modules.submissions.public import bp as submit_bp
from app.neic.modules.users.admin import account_bp, bp as users_admin_bp
from app.neic.pages import bp as pages_bp
from app.neic.ratelimit import init_rate_limiting
from app.neic.routes import bp as routes_bp
from app.neic.security import apply_security_headers, csrf_exempt, ensure_csrf_token, validate_csrf

PRODUCTION_ENVS = ("prod", "production")
SKIP_PREFIXES = ("/static/", "/health", "/healthz")


def _configure_logging(app: Flask) -> None:
    level = getattr(logging, str(app.config.get("LOG_LEVEL") or "INFO").upper(), logging.INFO)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("app.neic").setLevel(level)
    app.logger.setLevel(level)


def _register_blueprints(app: Flask) -> None:
    app.register_blueprint(routes_bp)
    app.register_blueprint(pages_bp)
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(submit_bp, url_prefix="/api")

    # Back office
    app.register_blueprint(dashboards_bp, url_prefix="/api")
    app.register_blueprint(submissions_admin_bp, url_prefix="/api/admin/submissions")
    app.register_blueprint(submissions_admin_bp, url_prefix="/api/management/submissions", name="management_submissions")
    app.register_blueprint(support_submissions_bp, url_prefix="/api/support")
    app.register_blueprint(reports_bp, url_prefix="/api/admin/reports")
    app.register_blueprint(reports_bp, url_prefix="/api/management/reports", name="management_reports")
    app.register_blueprint(users_admin_bp, url_prefix="/api/admin/users")
    app.register_blueprint(account_bp, url_prefix="/api/admin")
    app.register_blueprint(blog_admin_bp, url_prefix="/api/admin/blog")
    app.register_blueprint(faq_admin_bp, url_prefix="/api/admin/faq")
    app.register_blueprint(notices_admin_bp, url_prefix="/api/admin/notices")
    app.register_blueprint(gazettes_admin_bp, url_prefix="/api/admin/gazettes")
    app.register_blueprint(commission_admin_bp, url_prefix="/api/admin/commission")
    app.register_blueprint(contacts_admin_bp, url_prefix="/api/admin/contacts")
    app.register_blueprint(gallery_admin_bp, url_prefix="/api/admin/gallery")
    app.register_blueprint(sliders_admin_bp, url_prefix="/api/admin/sliders")

    # Public JSON
    app.register_blueprint(homepage_public_bp, url_prefix="/api/public")
    app.register_blueprint(commission_public_bp, url_prefix="/api/public")
    app.register_blueprint(blog_public_bp, url_prefix="/api/public/blog")
    app.register_blueprint(faq_public_bp, url_prefix="/api/public/faq")
    app.register_blueprint(notices_public_bp, url_prefix="/api/public/notices")
    app.register_blueprint(gazettes_public_bp, url_prefix="/api/public/gazettes")
    app.register_blueprint(contacts_public_bp, url_prefix="/api/public/contacts")
    app.register_blueprint(gallery_public_bp, url_prefix="/api/public/gallery")
    app.register_blueprint(sliders_public_bp, url_prefix="/api/public/sliders")


def create_app() -> Flask:
    load_dotenv()
    app = Flask(__name__, template_folder="templates", static_folder="static")
    app.config.from_mapping(load_config())
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(hours=8)
    app.config["SESSION_REFRESH_EACH_REQUEST"] = True
    app.json.ensure_ascii = False
    _configure_logging(app)

    env = (app.config.get("ENV") or "").strip().lower()
    is_production = env in PRODUCTION_ENVS

    # Production guardrails (fail fast with clear logs)
    if is_production:
        if not app.config.get("DATABASE_URL") or str(app.config["DATABASE_URL"]).strip() == "":
            raise RuntimeError("DATABASE_URL is required in production.")
        if str(app.config["DATABASE_URL"]).startswith("sqlite"):
            raise RuntimeError("DATABASE_URL must be Postgres in production (not sqlite).")
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")
        if str(app.config.get("HASH_SALT") or "") in ("", "dev-salt-change-me"):
            raise RuntimeError("HASH_SALT must be set in production (not default).")

    @app.context_processor
    def _inject_csrf() -> dict:
        return {"csrf_token": ensure_csrf_token()}

    @app.context_processor
    def _inject_locale() -> dict:
        locale = normalize_locale(getattr(g, "locale", None) or request.args.get("locale"))
        return {
            "locale": locale,
            "other_locale": "en" if locale == "bn" else "bn",
            "site": localize(SITE, locale),
            "nav": localize(NAV, locale),
            "t": lambda value: localize(value, locale),
            # tr(post, "title") -> post.title_bn / post.title_en
            "tr": lambda obj, field: getattr(obj, f"{field}_{locale}", None) or getattr(obj, f"{field}_en", None),
            "current_user": getattr(g, "current_user", None),
            "recaptcha_site_key": app.config.get("RECAPTCHA_SITE_KEY") or "",
        }

    @app.template_filter("dateformat")
    def _dateformat_filter(value, format: str = "%Y-%m-%d") -> str:
        if value is None:
            return "-"
        if hasattr(value, "strftime"):
            return value.strftime(format)
        return str(value)

    @app.before_request
    def _assign_request_id():
        g.request_id = (request.headers.get("X-Request-ID") or "").strip()[:64] or uuid.uuid4().hex

    @app.before_request
    def _csrf_guard():
        if request.path.startswith(SKIP_PREFIXES):
            return None
        ensure_csrf_token()
        session.permanent = True
        if not app.config.get("CSRF_ENABLED", True):
            return None
        if request.method in ("POST", "PUT", "PATCH", "DELETE"):
            if csrf_exempt(request.path):
                return None
            if not validate_csrf(request):
                app.logger.warning("CSRF rejected path=%s request_id=%s", request.path, g.request_id)
                if request.path.startswith("/api/"):
                    return jsonify({"error": "CSRF token missing or invalid."}), 400
                return render_template("errors/400.html", message="CSRF token missing or invalid."), 400

    @app.after_request
    def _security_headers(resp):
        rid = getattr(g, "request_id", None)
        if rid:
            resp.headers.setdefault("X-Request-ID", rid)
        return apply_security_headers(resp, production=is_production)

    init_db(app)

    def _dispose_engine_on_fork() -> None:
        if hasattr(os, "register_at_fork"):
            def _after_fork_child():
                engine = app.extensions.get("sqlalchemy_engine")
                if engine:
                    engine.dispose()
                    app.logger.info("Disposed DB engine after fork (pid=%s)", os.getpid())

            os.register_at_fork(after_in_child=_after_fork_child)

    _dispose_engine_on_fork()

    init_rate_limiting(app)
    app.extensions["captcha"] = verifier_from_config(app.config)
    if is_production and not app.extensions["captcha"].configured:
        app.logger.warning("RECAPTCHA_SECRET_KEY not set; public submissions are not captcha-protected.")

    # Storage health check (fail loudly on misconfiguration)
    if app.config.get("STORAGE_BACKEND") == "s3":
        missing_s3 = [
            key
            for key in ("S3_ENDPOINT", "S3_BUCKET", "S3_ACCESS_KEY_ID", "S3_SECRET_ACCESS_KEY")
            if not app.config.get(key)
        ]
        if missing_s3:
            app.logger.error("STORAGE CONFIG ERROR: Missing required S3 env vars: %s", ", ".join(missing_s3))
        else:
            from botocore.exceptions import BotoCoreError, ClientError

            from app.neic.storage import S3Storage, storage_from_config

            try:
                storage = storage_from_config(app.config)
                if isinstance(storage, S3Storage):
                    storage._client().head_bucket(Bucket=storage.bucket)
                    app.logger.info("Storage health check PASSED: S3 bucket '%s' accessible", storage.bucket)
            except (BotoCoreError, ClientError) as e:
                app.logger.error("STORAGE CONFIG ERROR: Cannot access S3 bucket: %s", e)

    _register_blueprints(app)

    def _load_user_wrapper():
        if request.path.startswith(SKIP_PREFIXES):
            g.current_user = None
            return None
        return load_current_user()

    app.before_request(_load_user_wrapper)
    app.teardown_appcontext(teardown_db_session)

    def _wants_json() -> bool:
        return request.path.startswith("/api/")

    @app.errorhandler(HTTPException)
    def _err_http(e: HTTPException):
        if e.code == 403:
            app.logger.warning(
                "Forbidden: missing_role=%s request_id=%s",
                getattr(g, "missing_role", None),
                getattr(g, "request_id", None),
            )
        if _wants_json():
            return jsonify({"error": e.description or e.name}), e.code
        if e.code in (400, 403, 404, 413):
            return render_template(f"errors/{e.code}.html", message=e.description), e.code
        return e

    @app.errorhandler(413)
    def _err_413(e):
        limit_mb = int(app.config["UPLOAD_MAX_BYTES"]) // (1024 * 1024)
        message = f"File too large. Maximum size is {limit_mb}MB."
        if _wants_json():
            return jsonify({"error": message}), 413
        return render_template("errors/413.html", message=message), 413

    @app.errorhandler(500)
    def _err_500(e):
        app.logger.exception("Unhandled 500 (request_id=%s)", getattr(g, "request_id", None))
        if _wants_json():
            return jsonify({"error": "Internal server error"}), 500
        return render_template("errors/500.html"), 500

    logging.getLogger(__name__).info("create_app() complete; app ready to serve (env=%s)", env or "unset")

    return app
