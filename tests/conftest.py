import pytest
from werkzeug.security import generate_password_hash

from app.neic import create_app
from app.neic.constants import Role
from app.neic.db import session_scope
from app.neic.models import Base, User

PASSWORD = "Corr3ct-Horse!Battery"

STAFF = {
    "admin": ("admin@example.com", Role.ADMIN),
    "management": ("management@example.com", Role.MANAGEMENT),
    "support": ("support@example.com", Role.SUPPORT),
    "viewer": ("viewer@example.com", Role.VIEWER),
}


@pytest.fixture()
def make_app(tmp_path, monkeypatch):
    """Build a fresh app on a throwaway sqlite file; keyword args become env overrides."""

    def _make(**env):
        monkeypatch.setenv("SECRET_KEY", "test-secret")
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
        monkeypatch.setenv("ENV", "test")
        monkeypatch.setenv("STORAGE_BACKEND", "local")
        monkeypatch.setenv("STORAGE_ROOT", str(tmp_path / "storage"))
        monkeypatch.setenv("CSRF_ENABLED", "false")
        for k in (
            "S3_ENDPOINT",
            "S3_REGION",
            "S3_BUCKET",
            "S3_ACCESS_KEY_ID",
            "S3_SECRET_ACCESS_KEY",
            "RECAPTCHA_SECRET_KEY",
            "RECAPTCHA_SITE_KEY",
            "LOGIN_ATTEMPTS_REDIS_URL",
            "RATE_LIMIT_REDIS_URL",
        ):
            monkeypatch.delenv(k, raising=False)
        for k, v in env.items():
            monkeypatch.setenv(k, str(v))

        app = create_app()
        engine = app.extensions["sqlalchemy_engine"]
        Base.metadata.create_all(bind=engine)

        with session_scope(app) as s:
            for key, (email, role) in STAFF.items():
                s.add(
                    User(
                        email=email,
                        name=f"{key.title()} User",
                        password_hash=generate_password_hash(PASSWORD),
                        role=role.value,
                        is_active=True,
                    )
                )
        return app

    return _make


@pytest.fixture()
def app(make_app):
    return make_app()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def login_as(app):
    """Return a test client already signed in as one of the seeded staff accounts."""

    def _login(who: str = "admin"):
        c = app.test_client()
        email, _ = STAFF[who]
        r = c.post("/api/auth/login", json={"email": email, "password": PASSWORD})
        assert r.status_code == 200, r.json
        return c

    return _login


@pytest.fixture()
def admin_client(login_as):
    return login_as("admin")


@pytest.fixture()
def management_client(login_as):
    return login_as("management")


@pytest.fixture()
def support_client(login_as):
    return login_as("support")
