# labhub/api/v1/projects.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.orm import Session

from labhub.api.v1.common import parse_uuid, project_resp, to_http
from labhub.core.auth_deps import get_current_actor
from labhub.core.config import get_settings
from labhub.core.errors import ReviewError
from labhub.db.session import get_db
from labhub.policies.permissions import Actor
from labhub.schemas.projects import ProjectDraft, ProjectListResponse, ProjectResponse
from labhub.services.projects_service import ProjectsService

router = APIRouter(prefix="/projects")


@router.post("", response_model=ProjectResponse, status_code=201)
def submit_project(
    request: Request,
    body: ProjectDraft,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    try:
        p = ProjectsService().submit(
            db,
            actor=actor,
            draft=body,
            request_id=getattr(request.state, "request_id", None),
        )
    except ReviewError as e:
        raise to_http(e)
    return project_resp(p)


@router.get("", response_model=ProjectListResponse)
def list_projects(
    status: Optional[str] = Query(default=None),
    submitter: Optional[str] = Query(default=None, description="Filter by student email"),
    limit: Optional[int] = Query(default=None, ge=1, le=2000),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    try:
        rows = ProjectsService().list_visible(
            db,
            actor=actor,
            status=status,
            submitter=submitter,
            limit=limit or get_settings().project_list_limit,
        )
    except ReviewError as e:
        raise to_http(e)
    return {"status": status, "projects": [project_resp(p) for p in rows]}


@router.get("/{projectId}", response_model=ProjectResponse)
def get_project(
    projectId: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    pid = parse_uuid(projectId)
    try:
        p = ProjectsService().get_visible(db, actor=actor, project_id=pid)
    except ReviewError as e:
        raise to_http(e)
    return project_resp(p)


@router.delete("/{projectId}", status_code=204)
def delete_project(
    request: Request,
    projectId: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    pid = parse_uuid(projectId)
    try:
        ProjectsService().delete(
            db,
            actor=actor,
            project_id=pid,
            request_id=getattr(request.state, "request_id", None),
        )
    except ReviewError as e:
        raise to_http(e)
    return Response(status_code=204)
