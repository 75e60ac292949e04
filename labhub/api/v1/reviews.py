# labhub/api/v1/reviews.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from labhub.api.v1.common import _iso, parse_uuid, project_resp, to_http
from labhub.core.auth_deps import get_current_actor
from labhub.core.errors import AuthorizationError, ReviewError
from labhub.db.session import get_db
from labhub.models.enums import EntityType
from labhub.policies.permissions import Actor, can_view_all_projects
from labhub.schemas.audit import AuditLogListResponse
from labhub.schemas.projects import ProjectResponse, ReviewRequest
from labhub.services.audit_service import AuditRecorder
from labhub.services.projects_service import ProjectsService
from labhub.services.review_session import ReviewSessionCoordinator

router = APIRouter(prefix="/projects")


@router.post("/{projectId}/review", response_model=ProjectResponse)
def review_project(
    request: Request,
    projectId: str,
    body: ReviewRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    outcome = ReviewSessionCoordinator().review(
        db,
        project_id=projectId,
        actor=actor,
        requested_status=body.status,
        comments=body.comments,
        expected_version=body.expectedVersion,
        request_id=getattr(request.state, "request_id", None),
    )
    if not outcome.ok:
        raise to_http(outcome.error)
    return project_resp(outcome.project)


@router.get("/{projectId}/audit", response_model=AuditLogListResponse)
def project_audit_trail(
    projectId: str,
    limit: int = Query(default=200, ge=1, le=2000),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    pid = parse_uuid(projectId)
    try:
        # visibility follows the project itself
        ProjectsService().get_visible(db, actor=actor, project_id=pid)
    except ReviewError as e:
        raise to_http(e)
    if not can_view_all_projects(actor):
        # submitters see their project, not the reviewer trail
        raise to_http(AuthorizationError())

    rows = AuditRecorder().list_for_entity(
        db, entity_type=EntityType.PROJECT.value, entity_id=str(pid), limit=limit
    )
    return {
        "entityType": EntityType.PROJECT.value,
        "entityId": str(pid),
        "records": [
            {
                "id": str(r.id),
                "createdAtIso": _iso(r.created_at),
                "requestId": r.request_id,
                "actorId": r.actor_id,
                "action": r.action,
                "entityType": r.entity_type,
                "entityId": r.entity_id,
                "payloadHash": r.payload_hash,
                "details": r.details or {},
            }
            for r in rows
        ],
    }
