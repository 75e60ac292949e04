"""create review workflow tables

Revision ID: 3c1f7a9d2b40
Revises:
Create Date: 2026-10-19 16:40:12.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '3c1f7a9d2b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    op.create_table(
        "projects",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("student_name", sa.String(length=256), nullable=False),
        sa.Column("student_email", sa.String(length=320), nullable=False),
        sa.Column("roll_number", sa.String(length=64), nullable=False),
        sa.Column("branch", sa.String(length=128), nullable=False),
        sa.Column("year", sa.String(length=32), nullable=False),
        sa.Column("contact_number", sa.String(length=32), nullable=True),
        sa.Column("submitted_by", sa.String(length=128), nullable=True),
        sa.Column("is_team_project", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("team_size", sa.Integer(), nullable=True),
        sa.Column("team_members", sa.Text(), nullable=True),
        sa.Column("project_title", sa.String(length=256), nullable=False),
        sa.Column("category", sa.String(length=64), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("expected_outcomes", sa.Text(), nullable=True),
        sa.Column("duration", sa.String(length=64), nullable=False),
        sa.Column(
            "required_resources",
            postgresql.JSONB,
            server_default=sa.text("'[]'::jsonb"),
            nullable=False,
        ),
        sa.Column("other_resources", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=32), server_default="pending", nullable=False),
        sa.Column("faculty_comments", sa.Text(), nullable=True),
        sa.Column("reviewed_by", sa.String(length=128), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint(
            "status IN ('pending','under_review','approved','rejected','completed')",
            name="ck_projects_status",
        ),
    )
    op.create_index("ix_projects_student_email", "projects", ["student_email"])
    op.create_index("ix_projects_submitted_by", "projects", ["submitted_by"])
    op.create_index("ix_projects_status_created", "projects", ["status", "created_at"])

    op.create_table(
        "activity_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("actor_id", sa.String(length=128), nullable=True),
        sa.Column("action", sa.String(length=96), nullable=False),
        sa.Column("entity_type", sa.String(length=32), nullable=False),
        sa.Column("entity_id", sa.String(length=64), nullable=True),
        sa.Column(
            "details",
            postgresql.JSONB,
            server_default=sa.text("'{}'::jsonb"),
            nullable=False,
        ),
        sa.Column("payload_hash", sa.String(length=128), nullable=False),
        sa.Column("request_id", sa.String(length=128), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_activity_entity", "activity_logs", ["entity_type", "entity_id"])
    op.create_index("ix_activity_action", "activity_logs", ["action"])
    op.create_index("ix_activity_created", "activity_logs", ["created_at"])

    op.create_table(
        "notifications",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("title", sa.String(length=256), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("link", sa.String(length=512), nullable=True),
        sa.Column("read", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_notifications_user_read", "notifications", ["user_id", "read"])


def downgrade():
    op.drop_index("ix_notifications_user_read", table_name="notifications")
    op.drop_table("notifications")

    op.drop_index("ix_activity_created", table_name="activity_logs")
    op.drop_index("ix_activity_action", table_name="activity_logs")
    op.drop_index("ix_activity_entity", table_name="activity_logs")
    op.drop_table("activity_logs")

    op.drop_index("ix_projects_status_created", table_name="projects")
    op.drop_index("ix_projects_submitted_by", table_name="projects")
    op.drop_index("ix_projects_student_email", table_name="projects")
    op.drop_table("projects")
