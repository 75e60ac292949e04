from __future__ import annotations

import uuid

from fastapi import HTTPException

from labhub.core.errors import ReviewError
from labhub.models.project import Project


def _iso(dt):
    return dt.isoformat() if dt else None


def to_http(err: ReviewError) -> HTTPException:
    return HTTPException(status_code=err.http_status, detail=err.to_dict())


def parse_uuid(raw: str, name: str = "projectId") -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except (ValueError, TypeError):
        raise HTTPException(status_code=400, detail=f"{name} must be UUID.")


def project_resp(p: Project) -> dict:
    return {
        "projectId": str(p.id),
        "status": p.status,
        "version": p.version,
        "studentName": p.student_name,
        "studentEmail": p.student_email,
        "rollNumber": p.roll_number,
        "branch": p.branch,
        "year": p.year,
        "contactNumber": p.contact_number,
        "submittedBy": p.submitted_by,
        "isTeamProject": bool(p.is_team_project),
        "teamSize": p.team_size,
        "teamMembers": p.team_members,
        "projectTitle": p.project_title,
        "category": p.category,
        "description": p.description,
        "expectedOutcomes": p.expected_outcomes,
        "duration": p.duration,
        "requiredResources": list(p.required_resources or []),
        "otherResources": p.other_resources,
        "facultyComments": p.faculty_comments,
        "reviewedBy": p.reviewed_by,
        "reviewedAtIso": _iso(p.reviewed_at),
        "createdAtIso": _iso(p.created_at),
        "updatedAtIso": _iso(p.updated_at),
    }
