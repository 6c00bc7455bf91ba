"""initial schema: users, submissions and site content

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


INDEXES = {
    "users": (("idx_users_role", ["role"]),),
    "user_audit_logs": (
        ("idx_user_audit_logs_user_id", ["user_id"]),
        ("idx_user_audit_logs_action", ["action"]),
        ("idx_user_audit_logs_created_at", ["created_at"]),
    ),
    "submissions": (
        ("idx_submissions_status", ["status"]),
        ("idx_submissions_created_at", ["created_at"]),
        ("idx_submissions_locale", ["locale"]),
    ),
    "blog_posts": (
        ("idx_blog_posts_category", ["category"]),
        ("idx_blog_posts_published_at", ["published_at"]),
    ),
    "faqs": (("idx_faqs_category_order", ["category", "order"]),),
    "notices": (
        ("idx_notices_type", ["type"]),
        ("idx_notices_published_at", ["published_at"]),
    ),
    "gazettes": (("idx_gazettes_published_at", ["published_at"]),),
    "commission_members": (("idx_commission_members_role_type", ["role_type"]),),
    "commission_officials": (("idx_commission_officials_category_order", ["category", "order"]),),
    "commission_terms": (("idx_commission_terms_order", ["order"]),),
    "contact_info": (("idx_contact_info_type_order", ["type", "order"]),),
    "gallery_items": (("idx_gallery_items_category", ["category"]),),
}


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=False), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("updated_at", sa.DateTime(timezone=False), nullable=False, server_default=sa.func.current_timestamp()),
    ]


def _editors() -> list[sa.Column]:
    return [
        sa.Column("created_by", sa.String(320), nullable=True),
        sa.Column("updated_by", sa.String(320), nullable=True),
    ]


def _active() -> sa.Column:
    return sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true())


def _tables() -> list[tuple[str, list]]:
    return [
        (
            "users",
            [
                sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
                sa.Column("email", sa.String(320), nullable=False),
                sa.Column("name", sa.String(128), nullable=True),
                sa.Column("password_hash", sa.String(255), nullable=False),
                sa.Column("role", sa.String(32), nullable=False, server_default="VIEWER"),
                _active(),
                sa.Column("last_login_at", sa.DateTime(timezone=False), nullable=True),
                *_timestamps(),
                *_editors(),
                sa.UniqueConstraint("email", name="uq_users_email"),
            ],
        ),
        (
            "user_audit_logs",
            [
                sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
                sa.Column("user_id", sa.Integer(), nullable=False),
                sa.Column("action", sa.String(128), nullable=False),
                sa.Column("details", sa.Text(), nullable=True),
                sa.Column("ip_address", sa.String(64), nullable=True),
                sa.Column("user_agent", sa.String(512), nullable=True),
                sa.Column("request_id", sa.String(64), nullable=True),
                sa.Column("created_at", sa.DateTime(timezone=False), nullable=False, server_default=sa.func.current_timestamp()),
                sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
            ],
        ),
        (
            "password_reset_tokens",
            [
                sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
                sa.Column("user_id", sa.Integer(), nullable=False),
                sa.Column("token", sa.String(128), nullable=False),
                sa.Column("expires_at", sa.DateTime(timezone=False), nullable=False),
                sa.Column("used", sa.Boolean(), nullable=False, server_default=sa.false()),
                sa.Column("created_at", sa.DateTime(timezone=False), nullable=False, server_default=sa.func.current_timestamp()),
                sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
                sa.UniqueConstraint("token", name="uq_password_reset_tokens_token"),
            ],
        ),
        (
            "submissions",
            [
                sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
                sa.Column("name", sa.String(120), nullable=True),
                sa.Column("contact", sa.String(32), nullable=True),
                sa.Column("email", sa.String(320), nullable=True),
                sa.Column("district", sa.String(128), nullable=True),
                sa.Column("seat_name", sa.String(128), nullable=True),
                sa.Column("message", sa.Text(), nullable=False),
                sa.Column("ip_hash", sa.String(64), nullable=False),
                sa.Column("locale", sa.String(8), nullable=False, server_default="bn"),
                sa.Column("status", sa.String(16), nullable=False, server_default="PENDING"),
                sa.Column("source", sa.String(32), nullable=False, server_default="web"),
                sa.Column("attachment_url", sa.String(1024), nullable=True),
                sa.Column("attachment_key", sa.String(1024), nullable=True),
                sa.Column("attachment_name", sa.String(255), nullable=True),
                sa.Column("attachment_size", sa.Integer(), nullable=True),
                sa.Column("attachment_type", sa.String(128), nullable=True),
                *_timestamps(),
            ],
        ),
        (
            "blog_posts",
            [
                sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
                sa.Column("slug", sa.String(255), nullable=False),
                sa.Column("title_en", sa.String(500), nullable=False),
                sa.Column("title_bn", sa.String(500), nullable=False),
                sa.Column("excerpt_en", sa.Text(), nullable=False),
                sa.Column("excerpt_bn", sa.Text(), nullable=False),
                sa.Column("content_en", sa.Text(), nullable=False),
                sa.Column("content_bn", sa.Text(), nullable=False),
                sa.Column("author_en", sa.String(255), nullable=False),
                sa.Column("author_bn", sa.String(255), nullable=False),
                sa.Column("category", sa.String(64), nullable=False, server_default="general"),
                sa.Column("image", sa.String(1024), nullable=False),
                sa.Column("tags", sa.JSON(), nullable=False),
                sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
                sa.Column("read_time", sa.Integer(), nullable=False, server_default="5"),
                _active(),
                sa.Column("published_at", sa.DateTime(timezone=False), nullable=False, server_default=sa.func.current_timestamp()),
                *_timestamps(),
                *_editors(),
                sa.UniqueConstraint("slug", name="uq_blog_posts_slug"),
            ],
        ),
        (
            "faqs",
            [
                sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
                sa.Column("question_en", sa.Text(), nullable=False),
                sa.Column("question_bn", sa.Text(), nullable=False),
                sa.Column("answer_en", sa.Text(), nullable=False),
                sa.Column("answer_bn", sa.Text(), nullable=False),
                sa.Column("category", sa.String(64), nullable=False, server_default="general"),
                sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
                _active(),
                *_timestamps(),
                *_editors(),
            ],
        ),
        (
            "notices",
            [
                sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
                sa.Column("title_en", sa.String(500), nullable=False),
                sa.Column("title_bn", sa.String(500), nullable=False),
                sa.Column("content_en", sa.Text(), nullable=False),
                sa.Column("content_bn", sa.Text(), nullable=False),
                sa.Column("type", sa.String(32), nullable=False, server_default="INFORMATION"),
                sa.Column("priority", sa.String(16), nullable=False, server_default="MEDIUM"),
                sa.Column("category", sa.String(64), nullable=False, server_default="general"),
                sa.Column("published_at", sa.DateTime(timezone=False), nullable=False, server_default=sa.func.current_timestamp()),
                sa.Column("expires_at", sa.DateTime(timezone=False), nullable=True),
                _active(),
                sa.Column("is_pinned", sa.Boolean(), nullable=False, server_default=sa.false()),
                sa.Column("attachments", sa.JSON(), nullable=False),
                *_timestamps(),
                *_editors(),
            ],
        ),
        (
            "gazettes",
            [
                sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
                sa.Column("title_en", sa.String(500), nullable=False),
                sa.Column("title_bn", sa.String(500), nullable=False),
                sa.Column("gazette_number", sa.String(128), nullable=False),
                sa.Column("category", sa.String(64), nullable=False, server_default="general"),
                sa.Column("priority", sa.String(16), nullable=False, server_default="MEDIUM"),
                sa.Column("published_at", sa.DateTime(timezone=False), nullable=False, server_default=sa.func.current_timestamp()),
                sa.Column("download_url", sa.String(1024), nullable=False),
                sa.Column("description", sa.Text(), nullable=True),
                _active(),
                *_timestamps(),
                *_editors(),
                sa.UniqueConstraint("gazette_number", name="uq_gazettes_gazette_number"),
            ],
        ),
        (
            "commission_members",
            [
                sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
                sa.Column("serial_no", sa.Integer(), nullable=False, server_default="1"),
                sa.Column("role_type", sa.String(32), nullable=False, server_default="commission_member"),
                sa.Column("name_en", sa.String(255), nullable=False),
                sa.Column("name_bn", sa.String(255), nullable=False),
                sa.Column("designation_en", sa.String(255), nullable=False),
                sa.Column("designation_bn", sa.String(255), nullable=False),
                sa.Column("department_en", sa.String(255), nullable=True),
                sa.Column("department_bn", sa.String(255), nullable=True),
                sa.Column("description_en", sa.Text(), nullable=True),
                sa.Column("description_bn", sa.Text(), nullable=True),
                sa.Column("image", sa.String(1024), nullable=True),
                sa.Column("email", sa.String(320), nullable=True),
                sa.Column("phone", sa.String(64), nullable=True),
                _active(),
                *_timestamps(),
                *_editors(),
                sa.UniqueConstraint("serial_no", "role_type", name="uq_commission_members_serial_role"),
            ],
        ),
        (
            "commission_officials",
            [
                sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
                sa.Column("name_en", sa.String(255), nullable=False),
                sa.Column("name_bn", sa.String(255), nullable=False),
                sa.Column("position_en", sa.String(255), nullable=False),
                sa.Column("position_bn", sa.String(255), nullable=False),
                sa.Column("department_en", sa.String(255), nullable=False),
                sa.Column("department_bn", sa.String(255), nullable=False),
                sa.Column("description_en", sa.Text(), nullable=True),
                sa.Column("description_bn", sa.Text(), nullable=True),
                sa.Column("experience_en", sa.Text(), nullable=True),
                sa.Column("experience_bn", sa.Text(), nullable=True),
                sa.Column("qualification_en", sa.Text(), nullable=True),
                sa.Column("qualification_bn", sa.Text(), nullable=True),
                sa.Column("email", sa.String(320), nullable=True),
                sa.Column("phone", sa.String(64), nullable=True),
                sa.Column("image", sa.String(1024), nullable=True),
                sa.Column("category", sa.String(64), nullable=False, server_default="SECRETARIAT"),
                sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
                _active(),
                *_timestamps(),
                *_editors(),
            ],
        ),
        (
            "commission_terms",
            [
                sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
                sa.Column("title_en", sa.String(500), nullable=False),
                sa.Column("title_bn", sa.String(500), nullable=False),
                sa.Column("description_en", sa.Text(), nullable=False),
                sa.Column("description_bn", sa.Text(), nullable=False),
                sa.Column("category", sa.String(64), nullable=False, server_default="general"),
                sa.Column("section", sa.String(64), nullable=False),
                sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
                sa.Column("effective_from", sa.DateTime(timezone=False), nullable=False),
                sa.Column("effective_to", sa.DateTime(timezone=False), nullable=True),
                _active(),
                *_timestamps(),
                *_editors(),
            ],
        ),
        (
            "contact_info",
            [
                sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
                sa.Column("type", sa.String(32), nullable=False, server_default="OFFICE"),
                sa.Column("name_en", sa.String(255), nullable=False),
                sa.Column("name_bn", sa.String(255), nullable=False),
                sa.Column("description_en", sa.Text(), nullable=True),
                sa.Column("description_bn", sa.Text(), nullable=True),
                sa.Column("address_en", sa.Text(), nullable=True),
                sa.Column("address_bn", sa.Text(), nullable=True),
                sa.Column("hours_en", sa.String(255), nullable=True),
                sa.Column("hours_bn", sa.String(255), nullable=True),
                sa.Column("phone", sa.String(64), nullable=True),
                sa.Column("email", sa.String(320), nullable=True),
                sa.Column("website", sa.String(1024), nullable=True),
                sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
                _active(),
                *_timestamps(),
                *_editors(),
            ],
        ),
        (
            "gallery_items",
            [
                sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
                sa.Column("title_en", sa.String(500), nullable=False),
                sa.Column("title_bn", sa.String(500), nullable=False),
                sa.Column("description_en", sa.Text(), nullable=True),
                sa.Column("description_bn", sa.Text(), nullable=True),
                sa.Column("image_url", sa.String(1024), nullable=False),
                sa.Column("image_key", sa.String(1024), nullable=True),
                sa.Column("category", sa.String(64), nullable=False, server_default="general"),
                sa.Column("tags", sa.JSON(), nullable=False),
                sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
                sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
                _active(),
                sa.Column("published_at", sa.DateTime(timezone=False), nullable=False, server_default=sa.func.current_timestamp()),
                *_timestamps(),
                *_editors(),
            ],
        ),
        (
            "sliders",
            [
                sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
                sa.Column("title_en", sa.String(500), nullable=False),
                sa.Column("title_bn", sa.String(500), nullable=False),
                sa.Column("description_en", sa.Text(), nullable=False),
                sa.Column("description_bn", sa.Text(), nullable=False),
                sa.Column("button_text_en", sa.String(128), nullable=True),
                sa.Column("button_text_bn", sa.String(128), nullable=True),
                sa.Column("category_en", sa.String(128), nullable=True),
                sa.Column("category_bn", sa.String(128), nullable=True),
                sa.Column("image", sa.String(1024), nullable=False),
                sa.Column("link", sa.String(1024), nullable=False),
                sa.Column("date", sa.DateTime(timezone=False), nullable=True),
                sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
                sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
                _active(),
                *_timestamps(),
                *_editors(),
            ],
        ),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    insp = inspect(bind)
    existing_tables = set(insp.get_table_names())

    def _has_index(table: str, name: str) -> bool:
        try:
            return any(ix.get("name") == name for ix in inspect(op.get_bind()).get_indexes(table))
        except sa.exc.NoSuchTableError:
            return False

    for table, columns in _tables():
        if table not in existing_tables:
            op.create_table(table, *columns)
            existing_tables.add(table)
        for idx_name, cols in INDEXES.get(table, ()):
            if not _has_index(table, idx_name):
                op.create_index(idx_name, table, cols)


def downgrade() -> None:
    for table, _ in reversed(_tables()):
        for idx_name, _cols in INDEXES.get(table, ()):
            op.drop_index(idx_name, table_name=table)
        op.drop_table(table)
