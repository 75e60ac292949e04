import pytest

from labhub.core.errors import ValidationError
from labhub.schemas.projects import ProjectDraft
from labhub.services.project_validator import ValidProject, validate_draft
from labhub.services.projects_repository import ProjectRepository
from labhub.tests.conftest import draft_payload


def _field(result):
    assert isinstance(result, ValidationError), result
    return result.field


def test_well_formed_individual_draft():
    result = validate_draft(draft_payload())
    assert isinstance(result, ValidProject)
    assert result.team_size is None
    assert result.team_members is None
    assert result.required_resources == ("Raspberry Pi 5", "2D LiDAR")


def test_team_fields_survive_validation(db, student, submit):
    draft = draft_payload(is_team_project=True, team_size=3, team_members="A, B, C")
    valid = validate_draft(draft)
    assert isinstance(valid, ValidProject)

    p = submit(student, is_team_project=True, team_size=3, team_members="A, B, C")
    db.expire_all()
    assert p.is_team_project is True
    assert p.team_size == 3
    assert p.team_members == "A, B, C"


def test_team_fields_read_back_identical(db, student, submit):
    p = submit(student, is_team_project=True, team_size=4, team_members="Asha, Ravi, Meera, Kabir")
    db.expire_all()

    stored = ProjectRepository().read_project(db, p.id)
    assert stored.is_team_project is True
    assert stored.team_size == 4
    assert stored.team_members == "Asha, Ravi, Meera, Kabir"

    solo = submit(student, project_title="Gesture glove")
    db.expire_all()
    stored = ProjectRepository().read_project(db, solo.id)
    assert stored.is_team_project is False
    assert stored.team_size is None
    assert stored.team_members is None


def test_numeric_text_fields_keep_check_order():
    assert _field(validate_draft(draft_payload(student_name="", year=3))) == "student_name"

    result = validate_draft(draft_payload(year=3, roll_number=221030))
    assert isinstance(result, ValidProject)
    assert result.year == "3"
    assert result.roll_number == "221030"


def test_team_size_on_individual_project_fails():
    draft = draft_payload(is_team_project=False, team_size=3, team_members="A, B, C")
    assert _field(validate_draft(draft)) == "team_size"


def test_first_failure_wins_in_fixed_order():
    # everything wrong at once: the first required field is reported
    draft = draft_payload(
        student_name="  ",
        student_email="not-an-email",
        category="Basket weaving",
        is_team_project=True,
        team_size=1,
    )
    assert _field(validate_draft(draft)) == "student_name"

    draft["student_name"] = "Asha"
    assert _field(validate_draft(draft)) == "student_email"

    draft["student_email"] = "asha@juitsolan.in"
    assert _field(validate_draft(draft)) == "category"

    draft["category"] = "Drones"
    assert _field(validate_draft(draft)) == "team_size"


@pytest.mark.parametrize(
    "missing",
    ["roll_number", "branch", "year", "project_title", "description", "duration", "category"],
)
def test_required_fields(missing):
    assert _field(validate_draft(draft_payload(**{missing: ""}))) == missing


@pytest.mark.parametrize(
    "size, members, field",
    [
        (None, "A, B", "team_size"),
        (1, "A", "team_size"),
        (True, "A, B", "team_size"),
        ("3", "A, B, C", "team_size"),
        (2, "   ", "team_members"),
    ],
)
def test_team_rules(size, members, field):
    draft = draft_payload(is_team_project=True, team_size=size, team_members=members)
    assert _field(validate_draft(draft)) == field


def test_team_members_on_individual_project_fails():
    assert _field(validate_draft(draft_payload(team_members="Bob"))) == "team_members"


def test_duplicate_resources_fail():
    draft = draft_payload(required_resources=["Jetson Orin", "Jetson Orin"])
    assert _field(validate_draft(draft)) == "required_resources"


def test_other_resource_requires_description():
    draft = draft_payload(required_resources=["Other"], other_resources="")
    assert _field(validate_draft(draft)) == "other_resources"

    draft["other_resources"] = "Soldering station"
    assert isinstance(validate_draft(draft), ValidProject)


def test_unknown_field_is_reported():
    result = validate_draft({**draft_payload(), "status": "approved"})
    assert _field(result) == "status"


def test_accepts_pydantic_draft():
    assert isinstance(validate_draft(ProjectDraft(**draft_payload())), ValidProject)
