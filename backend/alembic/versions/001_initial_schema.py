"""Initial schema: users, profiles, evaluations

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa


revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

user_role = sa.Enum("FREE", "PREMIUM", "SUPERADMIN", name="userrole")
evaluation_type = sa.Enum("INITIAL", "ADVANCED", name="evaluationtype")


def upgrade() -> None:
    # FastAPI-Users columns plus timestamps
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("hashed_password", sa.String(length=1024), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_superuser", sa.Boolean(), nullable=False),
        sa.Column("is_verified", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "profiles",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("role", user_role, nullable=False, server_default="FREE"),
        sa.Column("first_name", sa.String(length=120), nullable=True),
        sa.Column("last_name", sa.String(length=120), nullable=True),
        sa.Column("company", sa.String(length=200), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_profiles_user_id", "profiles", ["user_id"], unique=True)

    op.create_table(
        "evaluations",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("type", evaluation_type, nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("answers", sa.Text(), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("access_code", sa.String(length=32), nullable=True),
        sa.Column("guest_email", sa.String(length=320), nullable=True),
        sa.Column("profile_id", sa.String(length=36), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "(guest_email IS NOT NULL AND profile_id IS NULL) OR "
            "(guest_email IS NULL AND profile_id IS NOT NULL)",
            name="ck_evaluations_single_owner",
        ),
    )
    op.create_index("ix_evaluations_access_code", "evaluations", ["access_code"], unique=True)
    op.create_index("ix_evaluations_guest_email", "evaluations", ["guest_email"])
    op.create_index("ix_evaluations_profile_id", "evaluations", ["profile_id"])
    op.create_index("ix_evaluations_created_at", "evaluations", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_evaluations_created_at", table_name="evaluations")
    op.drop_index("ix_evaluations_profile_id", table_name="evaluations")
    op.drop_index("ix_evaluations_guest_email", table_name="evaluations")
    op.drop_index("ix_evaluations_access_code", table_name="evaluations")
    op.drop_table("evaluations")
    op.drop_index("ix_profiles_user_id", table_name="profiles")
    op.drop_table("profiles")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_id", table_name="users")
    op.drop_table("users")
    evaluation_type.drop(op.get_bind(), checkfirst=True)
    user_role.drop(op.get_bind(), checkfirst=True)
