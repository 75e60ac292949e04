# labhub/schemas/projects.py
from __future__ import annotations

from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from labhub.models.enums import ProjectStatus


# -----------------------
# Submission draft
# -----------------------


class ProjectDraft(BaseModel):
    """
    Raw submission as typed by the student.

    Deliberately loose: every rule lives in services.project_validator so that
    errors come back in a fixed order with the failing field.
    """

    model_config = ConfigDict(extra="forbid")

    student_name: Optional[str] = None
    student_email: Optional[str] = None
    roll_number: Optional[str] = None
    branch: Optional[str] = None
    year: Optional[str] = None
    contact_number: Optional[str] = None

    is_team_project: bool = False
    team_size: Optional[Any] = None
    team_members: Optional[str] = None

    project_title: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    expected_outcomes: Optional[str] = None
    duration: Optional[str] = None
    required_resources: List[str] = Field(default_factory=list)
    other_resources: Optional[str] = None

    @field_validator(
        "student_name",
        "student_email",
        "roll_number",
        "branch",
        "year",
        "contact_number",
        "team_members",
        "project_title",
        "category",
        "description",
        "expected_outcomes",
        "duration",
        "other_resources",
        mode="before",
    )
    @classmethod
    def _numbers_as_text(cls, v: Any) -> Any:
        # forms send year / roll number / contact as numbers
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


# -----------------------
# Request/Response models
# -----------------------


class ReviewRequest(BaseModel):
    status: str = Field(..., min_length=1, max_length=32)
    comments: Optional[str] = Field(default=None, max_length=10000)
    expectedVersion: Optional[int] = Field(default=None, ge=1)


class ProjectResponse(BaseModel):
    projectId: str
    status: ProjectStatus
    version: int

    studentName: str
    studentEmail: str
    rollNumber: str
    branch: str
    year: str
    contactNumber: Optional[str] = None
    submittedBy: Optional[str] = None

    isTeamProject: bool
    teamSize: Optional[int] = None
    teamMembers: Optional[str] = None

    projectTitle: str
    category: str
    description: str
    expectedOutcomes: Optional[str] = None
    duration: str
    requiredResources: List[str]
    otherResources: Optional[str] = None

    facultyComments: Optional[str] = None
    reviewedBy: Optional[str] = None
    reviewedAtIso: Optional[str] = None
    createdAtIso: str
    updatedAtIso: str


class ProjectListResponse(BaseModel):
    status: Optional[ProjectStatus] = None
    projects: List[ProjectResponse]
