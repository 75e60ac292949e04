# labhub/services/projects_repository.py
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, desc, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from labhub.core.errors import ConflictError, NotFoundError, PersistenceError
from labhub.models.enums import ProjectStatus
from labhub.models.project import Project
from labhub.services.project_validator import ValidProject

logger = logging.getLogger(__name__)

# Columns a conditional write may touch.
WRITABLE_FIELDS = frozenset(
    {"status", "faculty_comments", "reviewed_by", "reviewed_at", "updated_at"}
)


class ProjectRepository:
    # ---------------------------
    # READS
    # ---------------------------

    def read_project(self, db: Session, project_id: uuid.UUID) -> Project:
        try:
            p = db.execute(select(Project).where(Project.id == project_id)).scalar_one_or_none()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("[projects] read failed id=%s: %s", project_id, exc)
            raise PersistenceError() from exc
        if not p:
            raise NotFoundError("Project not found.")
        return p

    def list_projects(
        self,
        db: Session,
        *,
        status: Optional[str] = None,
        submitted_by: Optional[str] = None,
        student_email: Optional[str] = None,
        limit: int = 200,
    ) -> List[Project]:
        stmt = select(Project)
        if status:
            stmt = stmt.where(Project.status == status)
        if submitted_by:
            stmt = stmt.where(Project.submitted_by == submitted_by)
        if student_email:
            stmt = stmt.where(Project.student_email == student_email)

        stmt = stmt.order_by(desc(Project.created_at)).limit(limit)
        try:
            return list(db.execute(stmt).scalars().all())
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("[projects] list failed: %s", exc)
            raise PersistenceError() from exc

    # ---------------------------
    # MUTATIONS
    # ---------------------------

    def create_project(self, db: Session, *, valid: ValidProject, submitted_by: Optional[str]) -> Project:
        p = Project(
            student_name=valid.student_name,
            student_email=valid.student_email,
            roll_number=valid.roll_number,
            branch=valid.branch,
            year=valid.year,
            contact_number=valid.contact_number,
            submitted_by=submitted_by,
            is_team_project=valid.is_team_project,
            team_size=valid.team_size,
            team_members=valid.team_members,
            project_title=valid.project_title,
            category=valid.category,
            description=valid.description,
            expected_outcomes=valid.expected_outcomes,
            duration=valid.duration,
            required_resources=list(valid.required_resources),
            other_resources=valid.other_resources,
            status=ProjectStatus.pending.value,
            version=1,
        )
        try:
            db.add(p)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("[projects] create failed: %s", exc)
            raise PersistenceError() from exc
        db.refresh(p)
        return p

    def write_project_conditional(
        self,
        db: Session,
        project_id: uuid.UUID,
        expected_version: int,
        patch: Dict[str, Any],
        *,
        expected_status: Optional[str] = None,
    ) -> Project:
        """
        Single UPDATE guarded by the version (and status, when given) that
        was read. Zero matched rows means someone else won the race.
        """
        unknown = set(patch) - WRITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unsupported project fields in patch: {sorted(unknown)}")

        stmt = (
            update(Project)
            .where(Project.id == project_id, Project.version == expected_version)
            .values(**patch, version=expected_version + 1)
            .execution_options(synchronize_session=False)
        )
        if expected_status is not None:
            stmt = stmt.where(Project.status == expected_status)

        try:
            result = db.execute(stmt)
            if result.rowcount != 1:
                db.rollback()
                exists = db.execute(select(Project.id).where(Project.id == project_id)).first()
                if not exists:
                    raise NotFoundError("Project not found.")
                raise ConflictError()
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("[projects] conditional write failed id=%s: %s", project_id, exc)
            raise PersistenceError() from exc

        try:
            p = db.get(Project, project_id, populate_existing=True)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("[projects] re-read after write failed id=%s: %s", project_id, exc)
            raise PersistenceError() from exc
        if p is None:
            raise NotFoundError("Project not found.")
        return p

    def delete_project(self, db: Session, project_id: uuid.UUID) -> None:
        try:
            result = db.execute(delete(Project).where(Project.id == project_id))
            if result.rowcount != 1:
                db.rollback()
                raise NotFoundError("Project not found.")
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("[projects] delete failed id=%s: %s", project_id, exc)
            raise PersistenceError() from exc
