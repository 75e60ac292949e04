# labhub/services/projects_service.py
from __future__ import annotations

import logging
import uuid
from typing import Any, List, Mapping, Optional, Union

from sqlalchemy.orm import Session

from labhub.core.errors import AuthorizationError, NotFoundError, ValidationError
from labhub.models.enums import EntityType, ProjectStatus
from labhub.models.project import Project
from labhub.policies.permissions import (
    Actor,
    can_delete_project,
    can_submit_project,
    can_view_all_projects,
)
from labhub.schemas.projects import ProjectDraft
from labhub.services.audit_service import AuditRecorder
from labhub.services.mail_service import MailSender
from labhub.services.project_validator import validate_draft
from labhub.services.projects_repository import ProjectRepository
from labhub.services.review_workflow import AuditAction

logger = logging.getLogger(__name__)


class ProjectsService:
    def __init__(
        self,
        repository: Optional[ProjectRepository] = None,
        auditor: Optional[AuditRecorder] = None,
        mailer: Optional[MailSender] = None,
    ):
        self.repository = repository or ProjectRepository()
        self.auditor = auditor or AuditRecorder()
        self.mailer = mailer

    def submit(
        self,
        db: Session,
        *,
        actor: Actor,
        draft: Union[ProjectDraft, Mapping[str, Any]],
        request_id: Optional[str] = None,
    ) -> Project:
        if not can_submit_project(actor):
            raise AuthorizationError()

        valid = validate_draft(draft)
        if isinstance(valid, ValidationError):
            raise valid

        p = self.repository.create_project(db, valid=valid, submitted_by=actor.id)
        logger.info("[projects] submitted project=%s by actor=%s", p.id, actor.id)

        self.auditor.record(
            db,
            actor_id=actor.id,
            action=AuditAction.PROJECT_SUBMITTED,
            entity_type=EntityType.PROJECT.value,
            entity_id=str(p.id),
            details={
                "title": p.project_title,
                "category": p.category,
                "isTeamProject": p.is_team_project,
                "requiredResources": list(p.required_resources or []),
            },
            request_id=request_id,
        )

        mailer = self.mailer or MailSender()
        mailer.send_submission_confirmation(
            name=p.student_name, email=p.student_email, project_title=p.project_title
        )
        return p

    def get_visible(self, db: Session, *, actor: Actor, project_id: uuid.UUID) -> Project:
        p = self.repository.read_project(db, project_id)
        if not can_view_all_projects(actor) and p.submitted_by != actor.id:
            # do not reveal that someone else's project exists
            raise NotFoundError("Project not found.")
        return p

    def list_visible(
        self,
        db: Session,
        *,
        actor: Actor,
        status: Optional[str] = None,
        submitter: Optional[str] = None,
        limit: int = 200,
    ) -> List[Project]:
        if status is not None and status not in {s.value for s in ProjectStatus}:
            raise ValidationError("status", "Unknown status filter.")

        if can_view_all_projects(actor):
            return self.repository.list_projects(
                db, status=status, student_email=submitter, limit=limit
            )
        # students only ever see their own submissions
        return self.repository.list_projects(
            db, status=status, submitted_by=actor.id, limit=limit
        )

    def delete(
        self,
        db: Session,
        *,
        actor: Actor,
        project_id: uuid.UUID,
        request_id: Optional[str] = None,
    ) -> None:
        if not can_delete_project(actor):
            raise AuthorizationError()

        p = self.repository.read_project(db, project_id)
        snapshot = {"title": p.project_title, "status": p.status, "version": p.version}
        self.repository.delete_project(db, project_id)
        logger.info("[projects] deleted project=%s by actor=%s", project_id, actor.id)

        self.auditor.record(
            db,
            actor_id=actor.id,
            action=AuditAction.PROJECT_DELETED,
            entity_type=EntityType.PROJECT.value,
            entity_id=str(project_id),
            details=snapshot,
            request_id=request_id,
        )
