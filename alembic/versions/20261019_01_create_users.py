"""Create users table."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20261019_01"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("password", sa.String(length=128), nullable=False),
        sa.Column("level", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("login", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("recommend", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("level BETWEEN 1 AND 3", name="ck_users_level_range"),
        sa.CheckConstraint("login >= 0", name="ck_users_login_non_negative"),
        sa.CheckConstraint("recommend >= 0", name="ck_users_recommend_non_negative"),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_index("ix_users_level", "users", ["level"])


def downgrade() -> None:
    op.drop_index("ix_users_level", table_name="users")
    op.drop_table("users")
