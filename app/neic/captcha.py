from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass, field

RECAPTCHA_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CaptchaResult:
    success: bool
    status: str  # "verified" | "skipped" | "error"
    message: str | None = None
    error_codes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RecaptchaVerifier:
    secret_key: str
    site_key: str
    verify_url: str = RECAPTCHA_VERIFY_URL
    timeout_seconds: int = 10

    @property
    def configured(self) -> bool:
        return bool(self.secret_key and self.site_key)

    def verify(self, token: str, remote_ip: str | None = None) -> CaptchaResult:
        if not self.secret_key:
            return CaptchaResult(success=True, status="skipped", message="Captcha secret not configured.")
        if not token:
            return CaptchaResult(success=False, status="error", message="Captcha token is missing.")

        params = {"secret": self.secret_key, "response": token}
        if remote_ip:
            params["remoteip"] = remote_ip
        body = urllib.parse.urlencode(params).encode("utf-8")
        req = urllib.request.Request(self.verify_url, data=body, method="POST")
        req.add_header("Content-Type", "application/x-www-form-urlencoded")
        try:
            with urllib.request.urlopen(req, timeout=self.timeout_seconds) as resp:
                data = json.loads(resp.read().decode("utf-8"))
        except urllib.error.HTTPError as e:
            logger.error("Captcha verification request failed: HTTP %s", e.code)
            return CaptchaResult(success=False, status="error", message="Captcha verification failed due to network error.")
        except (OSError, ValueError) as e:
            logger.error("Captcha verification exception: %s", e)
            return CaptchaResult(success=False, status="error", message="Captcha verification encountered an unexpected error.")

        if not data.get("success"):
            return CaptchaResult(
                success=False,
                status="error",
                message="Captcha verification failed.",
                error_codes=list(data.get("error-codes") or []),
            )
        return CaptchaResult(success=True, status="verified")


def verifier_from_config(config: dict) -> RecaptchaVerifier:
    return RecaptchaVerifier(
        secret_key=(config.get("RECAPTCHA_SECRET_KEY") or "").strip(),
        site_key=(config.get("RECAPTCHA_SITE_KEY") or "").strip(),
    )
