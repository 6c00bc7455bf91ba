from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.neic.models import Base


class Submission(Base):
    """A citizen complaint/testimony received through the public form."""

    __tablename__ = "submissions"
    __table_args__ = (
        Index("idx_submissions_status", "status"),
        Index("idx_submissions_created_at", "created_at"),
        Index("idx_submissions_locale", "locale"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    # Only kept when the citizen opted to share it.
    name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    contact: Mapped[str | None] = mapped_column(String(32), nullable=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    district: Mapped[str | None] = mapped_column(String(128), nullable=True)
    seat_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    ip_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    locale: Mapped[str] = mapped_column(String(8), nullable=False, default="bn")
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="PENDING")  # PENDING | REVIEWED | FLAGGED
    source: Mapped[str] = mapped_column(String(32), nullable=False, default="web")

    attachment_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    attachment_key: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    attachment_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    attachment_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    attachment_type: Mapped[str | None] = mapped_column(String(128), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    @property
    def has_attachment(self) -> bool:
        return bool(self.attachment_key)
