"""init_schema

Revision ID: 4f2a9c1e7b30
Revises: 
Create Date: 2026-10-19 10:02:11.418230

"""
from alembic import op
import sqlalchemy as sa



revision = '4f2a9c1e7b30'
down_revision = None
branch_labels = None
depends_on = None


priority_enum = sa.Enum("IMPORTANT", "URGENT", "VERY_URGENT", name="priority")


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("email_address", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("avatar", sa.String(), nullable=False, server_default=""),
        sa.Column("date_joined", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_profile_update", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_username", "user", ["username"], unique=True)
    op.create_index("ix_user_email_address", "user", ["email_address"], unique=True)

    op.create_table(
        "task",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("priority", priority_enum, nullable=False, server_default="IMPORTANT"),
        sa.Column("deadline", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("date_created", sa.DateTime(timezone=True), nullable=False),
        sa.Column("date_updated", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["user.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_task_owner_id", "task", ["owner_id"])
    op.create_index("ix_task_is_deleted", "task", ["is_deleted"])
    op.create_index("ix_task_date_created", "task", ["date_created"])


def downgrade() -> None:
    op.drop_index("ix_task_date_created", table_name="task")
    op.drop_index("ix_task_is_deleted", table_name="task")
    op.drop_index("ix_task_owner_id", table_name="task")
    op.drop_table("task")
    priority_enum.drop(op.get_bind(), checkfirst=True)

    op.drop_index("ix_user_email_address", table_name="user")
    op.drop_index("ix_user_username", table_name="user")
    op.drop_table("user")
