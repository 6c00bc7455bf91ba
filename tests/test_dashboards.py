from datetime import datetime

from app.neic.db import session_scope
from app.neic.modules.submissions.models import Submission

IP_HASH = "0" * 64


def _seed(app):
    now = datetime.utcnow()
    with session_scope(app) as s:
        for status in ("PENDING", "PENDING", "REVIEWED", "FLAGGED"):
            s.add(Submission(ip_hash=IP_HASH, message=f"{status} report", status=status, created_at=now, updated_at=now))


def test_admin_dashboard(app, admin_client):
    _seed(app)
    r = admin_client.get("/api/admin/dashboard")
    assert r.status_code == 200
    stats = r.json["stats"]
    assert stats == {"totalSubmissions": 4, "pendingReview": 2, "reviewed": 1, "flagged": 1, "activeUsers": 4}
    assert r.json["activities"][0]["action"] == "LOGIN_SUCCESS"


def test_management_dashboard(app, management_client):
    _seed(app)
    r = management_client.get("/api/management/dashboard")
    assert r.status_code == 200
    assert r.json["stats"]["pendingReview"] == 2
    assert r.json["stats"]["reviewedToday"] == 1
    assert r.json["stats"]["flaggedItems"] == 1
    recent = r.json["recentSubmissions"]
    assert len(recent) == 4
    assert "attachment_key" not in recent[0]


def test_support_dashboard(app, support_client):
    _seed(app)
    r = support_client.get("/api/support/dashboard")
    assert r.json["stats"] == {"totalSubmissions": 4, "pendingSubmissions": 2, "todaySubmissions": 4}


def test_dashboards_are_role_gated(support_client, management_client):
    assert support_client.get("/api/management/dashboard").status_code == 403
    assert management_client.get("/api/admin/dashboard").status_code == 403
    assert management_client.get("/api/support/dashboard").status_code == 200
