from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.neic.models import Base

DEFAULT_AUTHOR_EN = "Election Commission"
DEFAULT_AUTHOR_BN = "নির্বাচন কমিশন"
DEFAULT_IMAGE = "/blog-images/placeholder.svg"


class BlogPost(Base):
    __tablename__ = "blog_posts"
    __table_args__ = (
        Index("idx_blog_posts_category", "category"),
        Index("idx_blog_posts_published_at", "published_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    title_en: Mapped[str] = mapped_column(String(500), nullable=False)
    title_bn: Mapped[str] = mapped_column(String(500), nullable=False)
    excerpt_en: Mapped[str] = mapped_column(Text, nullable=False)
    excerpt_bn: Mapped[str] = mapped_column(Text, nullable=False)
    content_en: Mapped[str] = mapped_column(Text, nullable=False)
    content_bn: Mapped[str] = mapped_column(Text, nullable=False)
    author_en: Mapped[str] = mapped_column(String(255), nullable=False, default=DEFAULT_AUTHOR_EN)
    author_bn: Mapped[str] = mapped_column(String(255), nullable=False, default=DEFAULT_AUTHOR_BN)

    category: Mapped[str] = mapped_column(String(64), nullable=False, default="general")
    image: Mapped[str] = mapped_column(String(1024), nullable=False, default=DEFAULT_IMAGE)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    read_time: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    published_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    created_by: Mapped[str | None] = mapped_column(String(320), nullable=True)
    updated_by: Mapped[str | None] = mapped_column(String(320), nullable=True)
