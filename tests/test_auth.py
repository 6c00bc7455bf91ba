from datetime import datetime, timedelta

from app.neic.db import session_scope
from app.neic.models import PasswordResetToken, User, UserAuditLog

from conftest import PASSWORD


def _login(client, email, password=PASSWORD):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_json_login_returns_user_and_dashboard(client):
    r = _login(client, "admin@example.com")
    assert r.status_code == 200
    assert r.json["user"]["role"] == "ADMIN"
    assert r.json["redirect"] == "/admin"
    assert "password_hash" not in r.json["user"]


def test_login_redirect_follows_role(client):
    r = _login(client, "support@example.com")
    assert r.json["redirect"] == "/support"


def test_form_login_redirects(client):
    r = client.post("/api/auth/login", data={"email": "management@example.com", "password": PASSWORD})
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/management")


def test_form_login_honours_local_next_only(client):
    r = client.post(
        "/api/auth/login",
        data={"email": "admin@example.com", "password": PASSWORD, "next": "//evil.example.com"},
    )
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/admin")


def test_login_requires_both_fields(client):
    r = client.post("/api/auth/login", json={"email": "admin@example.com"})
    assert r.status_code == 400


def test_bad_password_is_401_and_audited(app, client):
    r = _login(client, "admin@example.com", "wrong-password")
    assert r.status_code == 401
    with session_scope(app) as s:
        actions = [a for (a,) in s.query(UserAuditLog.action).all()]
    assert "LOGIN_FAILED" in actions


def test_email_is_case_insensitive(client):
    r = _login(client, "  ADMIN@Example.com ")
    assert r.status_code == 200


def test_lockout_after_five_failures(client):
    for _ in range(5):
        assert _login(client, "support@example.com", "nope").status_code == 401
    r = _login(client, "support@example.com")
    assert r.status_code == 429
    assert "Too many login attempts" in r.json["error"]


def test_no_lockout_in_development(make_app):
    c = make_app(ENV="development").test_client()
    for _ in range(6):
        assert _login(c, "support@example.com", "nope").status_code == 401
    assert _login(c, "support@example.com").status_code == 200


def test_successful_login_clears_failures(client):
    for _ in range(4):
        _login(client, "viewer@example.com", "nope")
    assert _login(client, "viewer@example.com").status_code == 200
    for _ in range(4):
        assert _login(client, "viewer@example.com", "nope").status_code == 401


def test_session_and_logout(admin_client):
    r = admin_client.get("/api/auth/session")
    assert r.json["user"]["email"] == "admin@example.com"
    assert r.json["csrf_token"]

    r = admin_client.post("/api/auth/logout", json={})
    assert r.json["ok"] is True
    assert admin_client.get("/api/auth/session").json["user"] is None


def test_deactivated_user_loses_session(app, support_client):
    with session_scope(app) as s:
        s.query(User).filter(User.email == "support@example.com").one().is_active = False
    r = support_client.get("/api/support/dashboard")
    assert r.status_code == 401


def test_login_page_redirects_signed_in_user(admin_client):
    r = admin_client.get("/login")
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/admin")


def test_forgot_password_is_silent_for_unknown_email(app, client):
    r = client.post("/api/auth/forgot-password", json={"email": "nobody@example.com"})
    assert r.status_code == 200
    assert "If an account with that email exists" in r.json["message"]
    with session_scope(app) as s:
        assert s.query(PasswordResetToken).count() == 0


def test_forgot_password_requires_email(client):
    assert client.post("/api/auth/forgot-password", json={}).status_code == 400


def test_reset_password_flow(app, client):
    r = client.post("/api/auth/forgot-password", json={"email": "viewer@example.com", "locale": "en"})
    assert r.status_code == 200
    with session_scope(app) as s:
        token = s.query(PasswordResetToken).one().token

    r = client.post("/api/auth/reset-password", json={"token": token, "password": "short"})
    assert r.status_code == 400

    r = client.post("/api/auth/reset-password", json={"token": token, "password": "brand-new-pass"})
    assert r.status_code == 200

    assert _login(client, "viewer@example.com", "brand-new-pass").status_code == 200
    r = client.post("/api/auth/reset-password", json={"token": token, "password": "another-pass"})
    assert r.status_code == 400


def test_expired_reset_token_is_rejected(app, client):
    client.post("/api/auth/forgot-password", json={"email": "viewer@example.com"})
    with session_scope(app) as s:
        reset = s.query(PasswordResetToken).one()
        reset.expires_at = datetime.utcnow() - timedelta(minutes=1)
        token = reset.token
    r = client.post("/api/auth/reset-password", json={"token": token, "password": "brand-new-pass"})
    assert r.status_code == 400
    assert r.json["error"] == "Reset token has expired"


def test_csrf_enforced_for_admin_writes(make_app):
    from conftest import STAFF

    app = make_app(CSRF_ENABLED="true")
    c = app.test_client()
    assert _login(c, STAFF["management"][0]).status_code == 200

    payload = {"question_en": "Q", "question_bn": "প্র", "answer_en": "A", "answer_bn": "উ"}
    r = c.post("/api/admin/faq", json=payload)
    assert r.status_code == 400
    assert "CSRF" in r.json["error"]

    token = c.get("/api/auth/session").json["csrf_token"]
    r = c.post("/api/admin/faq", json=payload, headers={"X-CSRF-Token": token})
    assert r.status_code == 201


def test_csrf_rejection_carries_request_id(make_app):
    c = make_app(CSRF_ENABLED="true").test_client()
    r = c.post("/api/admin/faq", json={}, headers={"X-Request-ID": "trace-42"})
    assert r.status_code == 400
    assert r.headers["X-Request-ID"] == "trace-42"

    r = c.post("/en/submit", data={})
    assert r.status_code == 400
    assert len(r.headers["X-Request-ID"]) == 32


def test_clear_session_drops_login(admin_client):
    r = admin_client.get("/api/auth/clear-session?redirect=/en/")
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/en/")
    assert admin_client.get("/api/auth/session").json["user"] is None

    r = admin_client.get("/api/auth/clear-session?redirect=https://evil.example.com/")
    assert r.headers["Location"].endswith("/login")
