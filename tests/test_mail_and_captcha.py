import io
import json

import pytest

from app.neic import captcha
from app.neic.captcha import RecaptchaVerifier
from app.neic.mailer import MailError, OutgoingEmail, password_reset_email, send_email


class FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def _fake_urlopen(payload, seen=None):
    def _open(req, timeout=None):
        if seen is not None:
            seen.append(req)
        return FakeResponse(json.dumps(payload).encode("utf-8"))

    return _open


def test_reset_email_links_to_locale_page():
    msg = password_reset_email("a@example.com", "tok123", site_url="https://neic.example/", locale="bn")
    assert "https://neic.example/bn/reset-password?token=tok123" in msg.text
    assert "15 minutes" in msg.text
    assert msg.to == "a@example.com"


def test_send_email_is_logged_in_test_env(app, caplog):
    with app.app_context(), caplog.at_level("INFO", logger="app.neic.mailer"):
        send_email(OutgoingEmail(to="a@example.com", subject="Hello", text="body"))
    assert "EMAIL (not sent) to=a@example.com" in caplog.text


def test_send_email_requires_server_outside_development(make_app):
    app = make_app(ENV="staging")
    with app.app_context():
        app.config["MAIL_SERVER"] = ""
        with pytest.raises(MailError):
            send_email(OutgoingEmail(to="a@example.com", subject="Hello", text="body"))


def test_send_email_over_smtp(make_app, monkeypatch):
    sent = []

    class FakeSMTP:
        def __init__(self, host, port, timeout=None):
            sent.append(("connect", host, port))

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def starttls(self):
            sent.append(("starttls",))

        def login(self, user, password):
            sent.append(("login", user))

        def send_message(self, msg):
            sent.append(("send", msg["To"], msg["Subject"]))

    monkeypatch.setattr("app.neic.mailer.smtplib.SMTP", FakeSMTP)
    app = make_app(ENV="staging")
    with app.app_context():
        app.config.update(MAIL_SERVER="smtp.example.com", MAIL_PORT=2525, MAIL_USE_TLS=True, MAIL_USERNAME="bot")
        send_email(OutgoingEmail(to="a@example.com", subject="Hello", text="body", html="<p>body</p>"))
    assert sent == [
        ("connect", "smtp.example.com", 2525),
        ("starttls",),
        ("login", "bot"),
        ("send", "a@example.com", "Hello"),
    ]


def test_captcha_skipped_without_secret():
    result = RecaptchaVerifier(secret_key="", site_key="").verify("anything")
    assert result.success and result.status == "skipped"


def test_captcha_missing_token():
    result = RecaptchaVerifier(secret_key="s", site_key="k").verify("")
    assert not result.success


def test_captcha_verified(monkeypatch):
    seen = []
    monkeypatch.setattr(captcha.urllib.request, "urlopen", _fake_urlopen({"success": True}, seen))
    result = RecaptchaVerifier(secret_key="s", site_key="k").verify("tok", "203.0.113.9")
    assert result.status == "verified"
    assert b"remoteip=203.0.113.9" in seen[0].data


def test_captcha_rejected(monkeypatch):
    monkeypatch.setattr(
        captcha.urllib.request, "urlopen", _fake_urlopen({"success": False, "error-codes": ["invalid-input-response"]})
    )
    result = RecaptchaVerifier(secret_key="s", site_key="k").verify("tok")
    assert not result.success
    assert result.error_codes == ["invalid-input-response"]


def test_submit_with_valid_captcha(make_app, monkeypatch):
    monkeypatch.setattr(captcha.urllib.request, "urlopen", _fake_urlopen({"success": True}))
    c = make_app(RECAPTCHA_SECRET_KEY="secret", RECAPTCHA_SITE_KEY="site").test_client()
    payload = {"phone": "01712345678", "message": "A polling agent was turned away at noon.", "captcha_token": "tok"}
    r = c.post("/api/submit", json=payload)
    assert r.status_code == 200


def test_submit_with_failed_captcha(make_app, monkeypatch):
    monkeypatch.setattr(captcha.urllib.request, "urlopen", _fake_urlopen({"success": False}))
    c = make_app(RECAPTCHA_SECRET_KEY="secret", RECAPTCHA_SITE_KEY="site").test_client()
    payload = {"phone": "01712345678", "message": "A polling agent was turned away at noon.", "captcha_token": "tok"}
    r = c.post("/api/submit", json=payload)
    assert r.status_code == 400
    assert r.json["error"]["code"] == "CAPTCHA_FAILED"
