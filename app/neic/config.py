import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    secret_key: str
    env: str
    database_url: str
    log_level: str
    hash_salt: str
    site_url: str

    storage_backend: str
    storage_root: str
    s3_endpoint: str
    s3_region: str
    s3_bucket: str
    s3_access_key_id: str
    s3_secret_access_key: str
    upload_max_bytes: int

    login_max_attempts: int
    login_lockout_seconds: int
    login_attempts_redis_url: str
    rate_limit_max: int
    rate_limit_window_seconds: int
    rate_limit_redis_url: str

    recaptcha_secret_key: str
    recaptcha_site_key: str

    mail_server: str
    mail_port: int
    mail_username: str
    mail_password: str
    mail_use_tls: bool
    mail_from: str

    csrf_enabled: bool


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _getint(name: str, default: int) -> int:
    raw = _getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer (got {raw!r}).")


def _getbool(name: str, default: bool) -> bool:
    raw = _getenv(name).lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    return Settings(
        secret_key=_getenv("SECRET_KEY", "change-me"),
        env=_getenv("ENV", "development"),
        database_url=_getenv("DATABASE_URL", "sqlite:///neic.db"),
        log_level=_getenv("LOG_LEVEL", "INFO").upper(),
        hash_salt=_getenv("HASH_SALT", "dev-salt-change-me"),
        site_url=_getenv("SITE_URL", "http://localhost:8080").rstrip("/"),
        storage_backend=_getenv("STORAGE_BACKEND", "local"),
        storage_root=_getenv("STORAGE_ROOT", ""),
        s3_endpoint=_getenv("S3_ENDPOINT", ""),
        s3_region=_getenv("S3_REGION", "ap-southeast-1"),
        s3_bucket=_getenv("S3_BUCKET", ""),
        s3_access_key_id=_getenv("S3_ACCESS_KEY_ID", ""),
        s3_secret_access_key=_getenv("S3_SECRET_ACCESS_KEY", ""),
        upload_max_bytes=_getint("UPLOAD_MAX_BYTES", 25 * 1024 * 1024),
        login_max_attempts=_getint("LOGIN_MAX_ATTEMPTS", 5),
        login_lockout_seconds=_getint("LOGIN_LOCKOUT_SECONDS", 15 * 60),
        login_attempts_redis_url=_getenv("LOGIN_ATTEMPTS_REDIS_URL", ""),
        rate_limit_max=_getint("RATE_LIMIT_MAX", 10),
        rate_limit_window_seconds=_getint("RATE_LIMIT_WINDOW_SECONDS", 60),
        rate_limit_redis_url=_getenv("RATE_LIMIT_REDIS_URL", ""),
        recaptcha_secret_key=_getenv("RECAPTCHA_SECRET_KEY", ""),
        recaptcha_site_key=_getenv("RECAPTCHA_SITE_KEY", ""),
        mail_server=_getenv("MAIL_SERVER", ""),
        mail_port=_getint("MAIL_PORT", 587),
        mail_username=_getenv("MAIL_USERNAME", ""),
        mail_password=_getenv("MAIL_PASSWORD", ""),
        mail_use_tls=_getbool("MAIL_USE_TLS", True),
        mail_from=_getenv("MAIL_FROM", "no-reply@neic.gov.bd"),
        csrf_enabled=_getbool("CSRF_ENABLED", True),
    )


def load_config() -> dict:
    s = load_settings()
    is_production = s.env in ("prod", "production")
    return {
        "SECRET_KEY": s.secret_key,
        "ENV": s.env,
        "DATABASE_URL": s.database_url,
        "LOG_LEVEL": s.log_level,
        "HASH_SALT": s.hash_salt,
        "SITE_URL": s.site_url,
        "STORAGE_BACKEND": s.storage_backend,
        "STORAGE_ROOT": s.storage_root,
        "S3_ENDPOINT": s.s3_endpoint,
        "S3_REGION": s.s3_region,
        "S3_BUCKET": s.s3_bucket,
        "S3_ACCESS_KEY_ID": s.s3_access_key_id,
        "S3_SECRET_ACCESS_KEY": s.s3_secret_access_key,
        "UPLOAD_MAX_BYTES": s.upload_max_bytes,
        "LOGIN_MAX_ATTEMPTS": s.login_max_attempts,
        "LOGIN_LOCKOUT_SECONDS": s.login_lockout_seconds,
        "LOGIN_ATTEMPTS_REDIS_URL": s.login_attempts_redis_url,
        "RATE_LIMIT_MAX": s.rate_limit_max,
        "RATE_LIMIT_WINDOW_SECONDS": s.rate_limit_window_seconds,
        "RATE_LIMIT_REDIS_URL": s.rate_limit_redis_url,
        "RECAPTCHA_SECRET_KEY": s.recaptcha_secret_key,
        "RECAPTCHA_SITE_KEY": s.recaptcha_site_key,
        "MAIL_SERVER": s.mail_server,
        "MAIL_PORT": s.mail_port,
        "MAIL_USERNAME": s.mail_username,
        "MAIL_PASSWORD": s.mail_password,
        "MAIL_USE_TLS": s.mail_use_tls,
        "MAIL_FROM": s.mail_from,
        "CSRF_ENABLED": s.csrf_enabled,
        # security defaults
        "SESSION_COOKIE_HTTPONLY": True,
        "SESSION_COOKIE_SAMESITE": "Lax",
        "SESSION_COOKIE_SECURE": is_production,  # Require HTTPS in production
        # request body cap; attachment limit itself is UPLOAD_MAX_BYTES
        "MAX_CONTENT_LENGTH": s.upload_max_bytes + 1024 * 1024,
    }
