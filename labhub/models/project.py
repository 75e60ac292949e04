# labhub/models/project.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Boolean, CheckConstraint, DateTime, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from labhub.db.base import Base, JsonType
from labhub.models.enums import ProjectStatus


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Submitter
    student_name: Mapped[str] = mapped_column(String(256), nullable=False)
    student_email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    roll_number: Mapped[str] = mapped_column(String(64), nullable=False)
    branch: Mapped[str] = mapped_column(String(128), nullable=False)
    year: Mapped[str] = mapped_column(String(32), nullable=False)
    contact_number: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    submitted_by: Mapped[Optional[str]] = mapped_column(String(128), nullable=True, index=True)

    # Team
    is_team_project: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    team_size: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    team_members: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Proposal
    project_title: Mapped[str] = mapped_column(String(256), nullable=False)
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    expected_outcomes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    duration: Mapped[str] = mapped_column(String(64), nullable=False)
    required_resources: Mapped[List[str]] = mapped_column(JsonType, nullable=False, default=list)
    other_resources: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Review state (written only by the workflow engine)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default=ProjectStatus.pending.value)
    faculty_comments: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reviewed_by: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Optimistic concurrency token, bumped by every conditional write
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_now)

    __table_args__ = (
        Index("ix_projects_status_created", "status", "created_at"),
        CheckConstraint(
            "status IN ('pending','under_review','approved','rejected','completed')",
            name="ck_projects_status",
        ),
    )
