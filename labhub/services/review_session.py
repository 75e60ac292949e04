# labhub/services/review_session.py
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy.orm import Session

from labhub.core.errors import AuthorizationError, ConflictError, ReviewError, ValidationError
from labhub.models.enums import EntityType
from labhub.models.project import Project
from labhub.policies.permissions import Actor, is_view_only
from labhub.services import review_workflow
from labhub.services.audit_service import AuditRecorder
from labhub.services.notification_service import NotificationDispatcher
from labhub.services.projects_repository import ProjectRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewOutcome:
    project: Optional[Project] = None
    error: Optional[ReviewError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ReviewSessionCoordinator:
    """
    The one entry point for a reviewer's status change.

    refuse view_only -> validate request -> decide transition -> conditional write
    -> audit -> notify. Audit and notification run only after the write has
    committed, exactly once per successful transition, and their failures
    never reach the caller.
    """

    def __init__(
        self,
        repository: Optional[ProjectRepository] = None,
        auditor: Optional[AuditRecorder] = None,
        dispatcher: Optional[NotificationDispatcher] = None,
    ):
        self.repository = repository or ProjectRepository()
        self.auditor = auditor or AuditRecorder()
        self.dispatcher = dispatcher or NotificationDispatcher()

    def review(
        self,
        db: Session,
        *,
        project_id: Union[uuid.UUID, str],
        actor: Optional[Actor],
        requested_status: Optional[str],
        comments: Optional[str] = None,
        expected_version: Optional[int] = None,
        request_id: Optional[str] = None,
    ) -> ReviewOutcome:
        # view_only is refused before any other check
        if actor is None or is_view_only(actor):
            return ReviewOutcome(error=AuthorizationError())

        # request shape
        try:
            pid = project_id if isinstance(project_id, uuid.UUID) else uuid.UUID(str(project_id))
        except ValueError:
            return ReviewOutcome(error=ValidationError("projectId", "projectId must be UUID."))
        if not requested_status or not str(requested_status).strip():
            return ReviewOutcome(error=ValidationError("status", "status is required."))

        try:
            project = self.repository.read_project(db, pid)
            # the write is conditioned on exactly what was read here
            read_version = project.version
            if expected_version is not None and expected_version != read_version:
                raise ConflictError()

            decision = review_workflow.transition(project, actor, requested_status, comments)
            if not decision.ok:
                return ReviewOutcome(error=decision.error)

            updated = self.repository.write_project_conditional(
                db,
                pid,
                read_version,
                decision.patch,
                expected_status=decision.previous_status,
            )
        except ReviewError as err:
            if err.retryable:
                logger.warning("[review] %s on project=%s actor=%s", err.code, pid, actor.id)
            return ReviewOutcome(error=err)

        logger.info(
            "[review] project=%s %s -> %s by actor=%s",
            pid,
            decision.previous_status,
            decision.new_status,
            actor.id,
        )

        try:
            self.auditor.record(
                db,
                actor_id=actor.id,
                action=decision.action,
                entity_type=EntityType.PROJECT.value,
                entity_id=str(pid),
                details={
                    "from": decision.previous_status,
                    "to": decision.new_status,
                    "comments": decision.patch.get("faculty_comments"),
                    "version": read_version + 1,
                    "actorRole": actor.role,
                },
                request_id=request_id,
            )
        except Exception:
            logger.exception("[review] audit failed for project=%s", pid)

        try:
            self.dispatcher.notify_on_transition(
                db, updated, decision.previous_status, decision.new_status
            )
        except Exception:
            logger.exception("[review] notification dispatch failed for project=%s", pid)

        return ReviewOutcome(project=updated)
