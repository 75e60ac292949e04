# labhub/services/project_validator.py
"""Structural validation of a project submission. Pure: no DB, no network."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple, Union

import pydantic
from email_validator import EmailNotValidError, validate_email

from labhub.core.errors import ValidationError
from labhub.models.enums import OTHER_RESOURCE, ProjectCategory
from labhub.schemas.projects import ProjectDraft

# Checked in this order; first missing one is reported.
REQUIRED_FIELDS: Tuple[str, ...] = (
    "student_name",
    "student_email",
    "roll_number",
    "branch",
    "year",
    "project_title",
    "description",
    "duration",
    "category",
)

CATEGORIES = frozenset(c.value for c in ProjectCategory)


@dataclass(frozen=True)
class ValidProject:
    student_name: str
    student_email: str
    roll_number: str
    branch: str
    year: str
    contact_number: Optional[str]

    is_team_project: bool
    team_size: Optional[int]
    team_members: Optional[str]

    project_title: str
    category: str
    description: str
    expected_outcomes: Optional[str]
    duration: str
    required_resources: Tuple[str, ...]
    other_resources: Optional[str]


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _coerce(draft: Union[ProjectDraft, Mapping[str, Any]]) -> Union[ProjectDraft, ValidationError]:
    if isinstance(draft, ProjectDraft):
        return draft
    try:
        return ProjectDraft.model_validate(dict(draft))
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        loc = ".".join(str(p) for p in first.get("loc", ())) or None
        return ValidationError(loc, first.get("msg", "Invalid submission."))


def validate_draft(draft: Union[ProjectDraft, Mapping[str, Any]]) -> Union[ValidProject, ValidationError]:
    """
    Returns a ValidProject, or the first ValidationError in this order:
      1. required fields present and non-empty
      2. email well-formed
      3. category known
      4. team fields consistent with is_team_project
      5. resources unique; "Other" needs other_resources
    """
    d = _coerce(draft)
    if isinstance(d, ValidationError):
        return d

    # 1
    for name in REQUIRED_FIELDS:
        if _clean(getattr(d, name)) is None:
            return ValidationError(name, f"{name} is required.")

    # 2
    try:
        email = validate_email(_clean(d.student_email), check_deliverability=False).normalized
    except EmailNotValidError as exc:
        return ValidationError("student_email", f"student_email is not a valid address: {exc}")

    # 3
    category = _clean(d.category)
    if category not in CATEGORIES:
        return ValidationError("category", f"category must be one of: {', '.join(sorted(CATEGORIES))}.")

    # 4
    team_members = _clean(d.team_members)
    if d.is_team_project:
        size = d.team_size
        if isinstance(size, bool) or not isinstance(size, int) or size < 2:
            return ValidationError("team_size", "team_size must be an integer of at least 2 for team projects.")
        if team_members is None:
            return ValidationError("team_members", "team_members is required for team projects.")
        team_size: Optional[int] = size
    else:
        if d.team_size not in (None, ""):
            return ValidationError("team_size", "team_size must be empty for individual projects.")
        if team_members is not None:
            return ValidationError("team_members", "team_members must be empty for individual projects.")
        team_size = None
        team_members = None

    # 5
    resources = tuple(r.strip() for r in d.required_resources)
    if len(set(resources)) != len(resources):
        return ValidationError("required_resources", "required_resources must not contain duplicates.")
    other = _clean(d.other_resources)
    if OTHER_RESOURCE in resources and other is None:
        return ValidationError("other_resources", "other_resources is required when 'Other' is selected.")

    return ValidProject(
        student_name=_clean(d.student_name),
        student_email=email,
        roll_number=_clean(d.roll_number),
        branch=_clean(d.branch),
        year=_clean(d.year),
        contact_number=_clean(d.contact_number),
        is_team_project=bool(d.is_team_project),
        team_size=team_size,
        team_members=team_members,
        project_title=_clean(d.project_title),
        category=category,
        description=_clean(d.description),
        expected_outcomes=_clean(d.expected_outcomes),
        duration=_clean(d.duration),
        required_resources=resources,
        other_resources=other,
    )
