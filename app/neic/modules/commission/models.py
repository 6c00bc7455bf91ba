from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.neic.models import Base


class CommissionMember(Base):
    __tablename__ = "commission_members"
    __table_args__ = (
        UniqueConstraint("serial_no", "role_type", name="uq_commission_members_serial_role"),
        Index("idx_commission_members_role_type", "role_type"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    serial_no: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    role_type: Mapped[str] = mapped_column(String(32), nullable=False, default="commission_member")

    name_en: Mapped[str] = mapped_column(String(255), nullable=False)
    name_bn: Mapped[str] = mapped_column(String(255), nullable=False)
    designation_en: Mapped[str] = mapped_column(String(255), nullable=False)
    designation_bn: Mapped[str] = mapped_column(String(255), nullable=False)
    department_en: Mapped[str | None] = mapped_column(String(255), nullable=True)
    department_bn: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description_en: Mapped[str | None] = mapped_column(Text, nullable=True)
    description_bn: Mapped[str | None] = mapped_column(Text, nullable=True)

    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    created_by: Mapped[str | None] = mapped_column(String(320), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(320), nullable=True)


class CommissionOfficial(Base):
    __tablename__ = "commission_officials"
    __table_args__ = (Index("idx_commission_officials_category_order", "category", "order"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name_en: Mapped[str] = mapped_column(String(255), nullable=False)
    name_bn: Mapped[str] = mapped_column(String(255), nullable=False)
    position_en: Mapped[str] = mapped_column(String(255), nullable=False)
    position_bn: Mapped[str] = mapped_column(String(255), nullable=False)
    department_en: Mapped[str] = mapped_column(String(255), nullable=False)
    department_bn: Mapped[str] = mapped_column(String(255), nullable=False)
    description_en: Mapped[str | None] = mapped_column(Text, nullable=True)
    description_bn: Mapped[str | None] = mapped_column(Text, nullable=True)
    experience_en: Mapped[str | None] = mapped_column(Text, nullable=True)
    experience_bn: Mapped[str | None] = mapped_column(Text, nullable=True)
    qualification_en: Mapped[str | None] = mapped_column(Text, nullable=True)
    qualification_bn: Mapped[str | None] = mapped_column(Text, nullable=True)

    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    category: Mapped[str] = mapped_column(String(64), nullable=False, default="SECRETARIAT")
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    created_by: Mapped[str | None] = mapped_column(String(320), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(320), nullable=True)


class CommissionTerm(Base):
    """A clause of the commission's terms of reference ("commission scope")."""

    __tablename__ = "commission_terms"
    __table_args__ = (Index("idx_commission_terms_order", "order"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title_en: Mapped[str] = mapped_column(String(500), nullable=False)
    title_bn: Mapped[str] = mapped_column(String(500), nullable=False)
    description_en: Mapped[str] = mapped_column(Text, nullable=False)
    description_bn: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(64), nullable=False, default="general")
    section: Mapped[str] = mapped_column(String(64), nullable=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    effective_from: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    effective_to: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    created_by: Mapped[str | None] = mapped_column(String(320), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(320), nullable=True)
