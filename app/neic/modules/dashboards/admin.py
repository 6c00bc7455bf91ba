from flask import Blueprint, jsonify

from app.neic.db import db_session
from app.neic.modules.dashboards.service import admin_stats, management_stats, support_stats
from app.neic.rbac import require_admin, require_management, require_support

bp = Blueprint("dashboards", __name__)


@bp.get("/admin/dashboard")
@require_admin
def admin_dashboard():
    return jsonify(admin_stats(db_session()))


@bp.get("/management/dashboard")
@require_management
def management_dashboard():
    return jsonify(management_stats(db_session()))


@bp.get("/support/dashboard")
@require_support
def support_dashboard():
    return jsonify(support_stats(db_session()))
