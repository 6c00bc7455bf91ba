from __future__ import annotations

import os
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO


class StorageError(RuntimeError):
    pass


class FileValidationError(ValueError):
    pass


ALLOWED_ATTACHMENT_TYPES = frozenset(
    {
        # Images
        "image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp", "image/bmp",
        # Documents
        "application/pdf", "text/plain", "text/csv",
        # Microsoft Office
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.ms-powerpoint",
        "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        # Archives
        "application/zip", "application/x-zip-compressed", "application/x-rar-compressed",
        # Audio/Video
        "audio/mpeg", "audio/wav", "audio/mp3",
        "video/mp4", "video/avi", "video/quicktime",
    }
)
ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"})
DANGEROUS_EXTENSIONS = frozenset({".exe", ".bat", ".cmd", ".scr", ".com", ".pif", ".vbs", ".js", ".jar"})
KEY_EXTENSIONS = frozenset(
    {
        ".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp",
        ".pdf", ".txt", ".csv", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
        ".zip", ".rar", ".mp3", ".wav", ".mp4", ".avi", ".mov",
    }
)
MAX_DISPLAY_NAME = 255
DEFAULT_DISPLAY_NAME = "attachment.bin"


@dataclass(frozen=True)
class StoredFile:
    key: str
    url: str
    original_name: str
    size: int
    content_type: str


class Storage:
    def put_bytes(self, key: str, data: bytes, *, content_type: str | None = None) -> None:
        raise NotImplementedError

    def open(self, key: str) -> BinaryIO:
        raise NotImplementedError

    def exists(self, key: str) -> bool:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def url_for(self, key: str) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class LocalStorage(Storage):
    root: Path

    def _path(self, key: str) -> Path:
        safe_key = key.lstrip("/").replace("\\", "/")
        p = (self.root / safe_key).resolve()
        if self.root.resolve() not in p.parents:
            raise StorageError(f"Storage key escapes storage root: {key!r}")
        return p

    def put_bytes(self, key: str, data: bytes, *, content_type: str | None = None) -> None:
        p = self._path(key)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)

    def open(self, key: str) -> BinaryIO:
        p = self._path(key)
        return p.open("rb")

    def exists(self, key: str) -> bool:
        return self._path(key).exists()

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def url_for(self, key: str) -> str:
        return f"/uploads/{key.lstrip('/')}"


@dataclass(frozen=True)
class S3Storage(Storage):
    endpoint: str
    region: str
    bucket: str
    access_key_id: str
    secret_access_key: str

    @contextmanager
    def _errors(self, action: str, key: str) -> Iterator[None]:
        from botocore.exceptions import BotoCoreError, ClientError

        try:
            yield
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"S3 {action} failed for {key!r}: {e}") from e

    def _client(self):
        import boto3

        return boto3.client(
            "s3",
            endpoint_url=f"https://{self.endpoint}" if self.endpoint else None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
        )

    def put_bytes(self, key: str, data: bytes, *, content_type: str | None = None) -> None:
        extra: dict[str, object] = {"ACL": "private"}
        if content_type:
            extra["ContentType"] = content_type
        with self._errors("upload", key):
            self._client().put_object(Bucket=self.bucket, Key=key, Body=data, **extra)

    def open(self, key: str) -> BinaryIO:
        with self._errors("download", key):
            obj = self._client().get_object(Bucket=self.bucket, Key=key)
        return obj["Body"]  # type: ignore[return-value]

    def exists(self, key: str) -> bool:
        from botocore.exceptions import BotoCoreError, ClientError

        try:
            self._client().head_object(Bucket=self.bucket, Key=key)
        except ClientError:
            return False
        except BotoCoreError as e:
            raise StorageError(f"S3 lookup failed for {key!r}: {e}") from e
        return True

    def delete(self, key: str) -> None:
        with self._errors("delete", key):
            self._client().delete_object(Bucket=self.bucket, Key=key)

    def url_for(self, key: str) -> str:
        # Objects are private; downloads go through the app.
        return f"/uploads/{key.lstrip('/')}"


def storage_from_config(config: dict) -> Storage:
    backend = (config.get("STORAGE_BACKEND") or "local").strip().lower()
    if backend == "s3":
        return S3Storage(
            endpoint=(config.get("S3_ENDPOINT") or "").strip(),
            region=(config.get("S3_REGION") or "ap-southeast-1").strip(),
            bucket=(config.get("S3_BUCKET") or "").strip(),
            access_key_id=(config.get("S3_ACCESS_KEY_ID") or "").strip(),
            secret_access_key=(config.get("S3_SECRET_ACCESS_KEY") or "").strip(),
        )
    # default local
    root = Path(config.get("STORAGE_ROOT") or Path(os.getcwd()) / "storage")
    return LocalStorage(root=root)


def _extension(filename: str) -> str:
    return os.path.splitext(display_filename(filename))[1].lower()


def display_filename(filename: str) -> str:
    """Basename with control characters removed; Bengali and other scripts are kept."""
    name = (filename or "").replace("\\", "/").rsplit("/", 1)[-1]
    name = "".join(ch for ch in name if ch.isprintable()).strip().lstrip(".")
    return name[:MAX_DISPLAY_NAME] or DEFAULT_DISPLAY_NAME


def validate_upload(
    filename: str,
    content_type: str,
    size: int,
    *,
    max_bytes: int,
    allowed_types: frozenset[str] = ALLOWED_ATTACHMENT_TYPES,
) -> None:
    if size <= 0:
        raise FileValidationError("File is empty.")
    if size > max_bytes:
        raise FileValidationError(
            f"File size exceeds {max_bytes // (1024 * 1024)}MB limit. "
            f"Current size: {size / (1024 * 1024):.2f}MB"
        )
    if content_type not in allowed_types:
        raise FileValidationError(f"File type '{content_type}' is not allowed")
    if _extension(filename) in DANGEROUS_EXTENSIONS:
        raise FileValidationError("Executable files are not allowed for security reasons")


def build_storage_key(prefix: str, filename: str) -> str:
    """`<prefix>/<epoch-ms>-<uuid><ext>`; only an allow-listed extension of the original name is kept."""
    ext = _extension(filename)
    if ext not in KEY_EXTENSIONS:
        ext = ""
    return f"{prefix.strip('/')}/{int(time.time() * 1000)}-{uuid.uuid4()}{ext}"


def store_upload(
    storage: Storage,
    prefix: str,
    data: bytes,
    filename: str,
    content_type: str,
    *,
    max_bytes: int,
    allowed_types: frozenset[str] = ALLOWED_ATTACHMENT_TYPES,
) -> StoredFile:
    validate_upload(filename, content_type, len(data), max_bytes=max_bytes, allowed_types=allowed_types)
    key = build_storage_key(prefix, filename)
    storage.put_bytes(key, data, content_type=content_type)
    return StoredFile(
        key=key,
        url=storage.url_for(key),
        original_name=display_filename(filename),
        size=len(data),
        content_type=content_type,
    )
