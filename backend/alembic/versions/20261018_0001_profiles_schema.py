"""profiles schema

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa


revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("avatar", sa.String(length=512)),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "profiles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("company", sa.String(length=255)),
        sa.Column("website", sa.String(length=512)),
        sa.Column("location", sa.String(length=255)),
        sa.Column("bio", sa.Text()),
        sa.Column("status", sa.String(length=255)),
        sa.Column("githubusername", sa.String(length=255)),
        sa.Column("skills", sa.JSON(), server_default=sa.text("'[]'")),
        sa.Column("social", sa.JSON(), server_default=sa.text("'{}'")),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_profiles_user_id", "profiles", ["user_id"], unique=True)

    for table in ("experiences", "education"):
        if table == "experiences":
            entry_columns = [
                sa.Column("title", sa.String(length=255), nullable=False),
                sa.Column("company", sa.String(length=255), nullable=False),
                sa.Column("location", sa.String(length=255)),
            ]
        else:
            entry_columns = [
                sa.Column("school", sa.String(length=255), nullable=False),
                sa.Column("degree", sa.String(length=255), nullable=False),
                sa.Column("fieldofstudy", sa.String(length=255), nullable=False),
            ]
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column(
                "profile_id",
                sa.Integer(),
                sa.ForeignKey("profiles.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
            *entry_columns,
            sa.Column("from_date", sa.Date(), nullable=False),
            sa.Column("to_date", sa.Date()),
            sa.Column("current", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("description", sa.Text()),
        )
        op.create_index(f"ix_{table}_profile_id", table, ["profile_id"])


def downgrade() -> None:
    op.drop_index("ix_education_profile_id", table_name="education")
    op.drop_table("education")
    op.drop_index("ix_experiences_profile_id", table_name="experiences")
    op.drop_table("experiences")
    op.drop_index("ix_profiles_user_id", table_name="profiles")
    op.drop_table("profiles")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_id", table_name="users")
    op.drop_table("users")
