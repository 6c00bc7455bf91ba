from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime
from typing import Any

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from app.neic.constants import Role


class Base(DeclarativeBase):
    def to_dict(self, *, exclude: Iterable[str] = ()) -> dict[str, Any]:
        """Column values as a JSON-ready dict (dates become ISO strings)."""
        skip = set(exclude)
        out: dict[str, Any] = {}
        for col in self.__table__.columns:
            if col.key in skip:
                continue
            value = getattr(self, col.key)
            if isinstance(value, (datetime, date)):
                value = value.isoformat()
            out[col.key] = value
        return out


class User(Base):
    __tablename__ = "users"
    __table_args__ = (Index("idx_users_role", "role"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default=Role.VIEWER.value)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    created_by: Mapped[str | None] = mapped_column(String(320), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(320), nullable=True)

    audit_logs: Mapped[list["UserAuditLog"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def to_dict(self, *, exclude: Iterable[str] = ()) -> dict[str, Any]:
        return super().to_dict(exclude={"password_hash", *exclude})


class UserAuditLog(Base):
    """
    Append-only record of what a user did (login, password change, content edits).
    """

    __tablename__ = "user_audit_logs"
    __table_args__ = (
        Index("idx_user_audit_logs_user_id", "user_id"),
        Index("idx_user_audit_logs_action", "action"),
        Index("idx_user_audit_logs_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    action: Mapped[str] = mapped_column(String(128), nullable=False)  # e.g. "LOGIN_SUCCESS", "blog.create"
    details: Mapped[str | None] = mapped_column(Text, nullable=True)  # JSON string or free text
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)
    request_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    user: Mapped[User] = relationship(back_populates="audit_logs", lazy="joined")


class PasswordResetToken(Base):
    __tablename__ = "password_reset_tokens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    token: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    user: Mapped[User] = relationship(lazy="joined")


# Ensure module models are imported so Base.metadata includes their tables.
# (Kept at bottom to avoid circular imports.)
from app.neic.modules.submissions.models import Submission  # noqa: E402,F401
from app.neic.modules.blog.models import BlogPost  # noqa: E402,F401
from app.neic.modules.faq.models import FAQ  # noqa: E402,F401
from app.neic.modules.notices.models import Notice  # noqa: E402,F401
from app.neic.modules.gazettes.models import Gazette  # noqa: E402,F401
from app.neic.modules.commission.models import (  # noqa: E402,F401
    CommissionMember,
    CommissionOfficial,
    CommissionTerm,
)
from app.neic.modules.contacts.models import ContactInfo  # noqa: E402,F401
from app.neic.modules.gallery.models import GalleryItem  # noqa: E402,F401
from app.neic.modules.sliders.models import Slider  # noqa: E402,F401
