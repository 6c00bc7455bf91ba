import io
import json
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from app.neic.db import session_scope
from app.neic.modules.submissions.models import Submission
from app.neic.models import UserAuditLog

MESSAGE = "ভোটকেন্দ্রে ব্যালট ছিনতাই হয়েছিল, আমি নিজে দেখেছি।"


def _payload(**overrides):
    data = {
        "name": "রহিম উদ্দিন",
        "phone": "01712345678",
        "email": "rahim@example.com",
        "district": "Dhaka",
        "seatName": "Dhaka-10",
        "message": MESSAGE,
        "locale": "bn",
    }
    data.update(overrides)
    return data


def _only_submission(app) -> Submission:
    with session_scope(app) as s:
        return s.query(Submission).one()


def test_submit_stores_pending_submission(app, client):
    r = client.post("/api/submit", json=_payload())
    assert r.status_code == 200
    assert r.json == {"ok": True}

    sub = _only_submission(app)
    assert sub.status == "PENDING"
    assert sub.contact == "01712345678"
    assert sub.seat_name == "Dhaka-10"
    assert sub.locale == "bn"
    assert sub.source == "web"
    assert len(sub.ip_hash) == 64
    # Name is only kept when the citizen opts in.
    assert sub.name is None


def test_submit_keeps_name_when_shared(app, client):
    client.post("/api/submit", json=_payload(shareName=True, locale="en"))
    sub = _only_submission(app)
    assert sub.name == "রহিম উদ্দিন"
    assert sub.locale == "en"


def test_submit_validation_issues(client):
    r = client.post("/api/submit", json=_payload(phone="12345", message="short"))
    assert r.status_code == 422
    body = r.json
    assert body["ok"] is False
    assert body["error"]["code"] == "VALIDATION"
    paths = {issue["path"][0] for issue in body["error"]["issues"]}
    assert paths == {"phone", "message"}


def test_submit_rejects_spam_patterns(client):
    r = client.post("/api/submit", json=_payload(message="Cheap pharmacy deals, buy now please"))
    assert r.status_code == 422
    assert r.json["error"]["issues"][0]["path"] == ["message"]


def test_submit_rejects_non_json_body(client):
    r = client.post("/api/submit", data="not json", content_type="text/plain")
    assert r.status_code == 400
    assert r.json["error"]["code"] == "BAD_REQUEST"


def test_honeypot_rejects(app, client):
    r = client.post("/api/submit", json=_payload(website="http://spam.example"))
    assert r.status_code == 400
    assert r.json["error"]["code"] == "SPAM"
    with session_scope(app) as s:
        assert s.query(Submission).count() == 0


def test_spammy_message_is_flagged(app, client):
    r = client.post("/api/submit", json=_payload(message="Evidence at http://localhost/a and http://localhost/b !!!!!!"))
    assert r.status_code == 200
    assert _only_submission(app).status == "FLAGGED"


def test_submit_with_attachment(app, client, tmp_path):
    data = _payload()
    data["attachment"] = (io.BytesIO(b"%PDF-1.4 evidence"), "proof.pdf", "application/pdf")
    r = client.post("/api/submit", data=data, content_type="multipart/form-data")
    assert r.status_code == 200

    sub = _only_submission(app)
    assert sub.attachment_key.startswith("submissions/")
    assert sub.attachment_key.endswith(".pdf")
    assert sub.attachment_name == "proof.pdf"
    assert sub.attachment_size == len(b"%PDF-1.4 evidence")
    assert (Path(tmp_path) / "storage" / sub.attachment_key).exists()


def test_submit_rejects_disallowed_attachment(client):
    data = _payload()
    data["attachment"] = (io.BytesIO(b"MZ"), "run.exe", "application/x-msdownload")
    r = client.post("/api/submit", data=data, content_type="multipart/form-data")
    assert r.status_code == 400
    assert r.json["error"]["code"] == "FILE_VALIDATION_ERROR"


def test_attachments_are_not_public(app, client):
    data = _payload()
    data["attachment"] = (io.BytesIO(b"%PDF-1.4"), "proof.pdf", "application/pdf")
    client.post("/api/submit", data=data, content_type="multipart/form-data")
    key = _only_submission(app).attachment_key
    assert client.get(f"/uploads/{key}").status_code == 404
    assert client.get(f"/uploads/gallery/../{key}").status_code == 404
    assert client.get(f"/uploads/gallery/%2e%2e/{key}").status_code == 404
    assert client.get(f"/uploads/gallery/%2E%2E%2F{key}").status_code == 404


def test_bengali_attachment_name_is_kept(app, client):
    data = _payload()
    data["attachment"] = (io.BytesIO(b"%PDF-1.4 evidence"), "অভিযোগ.pdf", "application/pdf")
    r = client.post("/api/submit", data=data, content_type="multipart/form-data")
    assert r.status_code == 200

    sub = _only_submission(app)
    assert sub.attachment_name == "অভিযোগ.pdf"
    assert sub.attachment_key.endswith(".pdf")


def test_failed_insert_discards_attachment(app, client, tmp_path, monkeypatch):
    def broken_insert(*args, **kwargs):
        raise SQLAlchemyError("database unavailable")

    monkeypatch.setattr("app.neic.modules.submissions.public.create_submission", broken_insert)
    data = _payload()
    data["attachment"] = (io.BytesIO(b"%PDF-1.4 evidence"), "proof.pdf", "application/pdf")
    r = client.post("/api/submit", data=data, content_type="multipart/form-data")
    assert r.status_code == 500
    assert r.json["error"]["code"] == "DB_ERROR"

    folder = Path(tmp_path) / "storage" / "submissions"
    assert not folder.exists() or not any(folder.iterdir())


def test_submit_rate_limited(make_app):
    c = make_app(RATE_LIMIT_MAX="2").test_client()
    assert c.post("/api/submit", json=_payload()).status_code == 200
    assert c.post("/api/submit", json=_payload()).status_code == 200
    r = c.post("/api/submit", json=_payload())
    assert r.status_code == 429
    assert r.json["error"]["code"] == "RATE_LIMIT"


def test_captcha_required_when_configured(make_app):
    c = make_app(RECAPTCHA_SECRET_KEY="secret", RECAPTCHA_SITE_KEY="site").test_client()
    r = c.post("/api/submit", json=_payload())
    assert r.status_code == 400
    assert r.json["error"]["code"] == "CAPTCHA_REQUIRED"


def test_admin_lists_and_filters(client, management_client):
    client.post("/api/submit", json=_payload())
    client.post("/api/submit", json=_payload(message="Evidence at http://localhost/a and http://localhost/b !!!!!!"))

    r = management_client.get("/api/management/submissions")
    assert r.status_code == 200
    assert r.json["total"] == 2
    assert "ip_hash" not in r.json["submissions"][0]

    r = management_client.get("/api/admin/submissions?status=flagged")
    assert r.json["total"] == 1
    assert r.json["submissions"][0]["status"] == "FLAGGED"


def test_admin_updates_status_and_audits(app, client, management_client):
    client.post("/api/submit", json=_payload())
    sub_id = _only_submission(app).id

    r = management_client.put(f"/api/admin/submissions/{sub_id}", json={"status": "BOGUS"})
    assert r.status_code == 400

    r = management_client.put(f"/api/admin/submissions/{sub_id}", json={"status": "REVIEWED"})
    assert r.status_code == 200
    assert r.json["submission"]["status"] == "REVIEWED"

    with session_scope(app) as s:
        log = s.query(UserAuditLog).filter(UserAuditLog.action == "submission.status").one()
        assert json.loads(log.details)["changes"]["status"] == {"old": "PENDING", "new": "REVIEWED"}


def test_admin_downloads_and_deletes_attachment(app, client, management_client, tmp_path):
    data = _payload()
    data["attachment"] = (io.BytesIO(b"%PDF-1.4 evidence"), "proof.pdf", "application/pdf")
    client.post("/api/submit", data=data, content_type="multipart/form-data")
    sub = _only_submission(app)

    r = management_client.get(f"/api/admin/submissions/{sub.id}/attachment")
    assert r.status_code == 200
    assert r.data == b"%PDF-1.4 evidence"
    assert "proof.pdf" in r.headers["Content-Disposition"]

    r = management_client.delete(f"/api/admin/submissions/{sub.id}")
    assert r.status_code == 200
    assert not (Path(tmp_path) / "storage" / sub.attachment_key).exists()
    assert management_client.get(f"/api/admin/submissions/{sub.id}").status_code == 404


def test_support_sees_read_only_list(client, support_client):
    client.post("/api/submit", json=_payload(district="Sylhet"))
    client.post("/api/submit", json=_payload(district="Khulna"))

    r = support_client.get("/api/support/submissions?search=sylhet")
    assert r.status_code == 200
    assert r.json["success"] is True
    assert r.json["pagination"]["total"] == 1
    row = r.json["data"][0]
    assert row["district"] == "Sylhet"
    assert "attachment_key" not in row
    assert "ip_hash" not in row

    assert support_client.put("/api/admin/submissions/1", json={"status": "REVIEWED"}).status_code == 403
