import pytest

from labhub.core.errors import AuthorizationError, NotFoundError, ValidationError
from labhub.services.audit_service import AuditRecorder
from labhub.services.mail_service import SUBMISSION_SUBJECT
from labhub.services.projects_service import ProjectsService
from labhub.services.review_workflow import AuditAction
from labhub.tests.conftest import draft_payload, make_actor


def test_submit_creates_pending_project_audits_and_confirms(db, student, mailer):
    p = ProjectsService(mailer=mailer).submit(db, actor=student, draft=draft_payload())

    assert p.status == "pending"
    assert p.version == 1
    assert p.submitted_by == student.id
    assert p.reviewed_by is None and p.reviewed_at is None
    assert p.created_at is not None and p.updated_at is not None

    trail = AuditRecorder().list_for_entity(db, entity_type="project", entity_id=str(p.id))
    assert [e.action for e in trail] == [AuditAction.PROJECT_SUBMITTED]

    assert mailer.sent[0]["subject"] == SUBMISSION_SUBJECT
    assert mailer.sent[0]["to"] == ["asha.verma@juitsolan.in"]
    assert "Line-following rover" in mailer.sent[0]["body"]


def test_invalid_submission_is_rejected_before_storage(db, student, mailer):
    svc = ProjectsService(mailer=mailer)
    with pytest.raises(ValidationError) as exc:
        svc.submit(db, actor=student, draft=draft_payload(student_email="asha@"))
    assert exc.value.field == "student_email"
    assert svc.list_visible(db, actor=make_actor("r", "super_admin")) == []
    assert mailer.sent == []


def test_view_only_cannot_submit(db, viewer, mailer):
    with pytest.raises(AuthorizationError):
        ProjectsService(mailer=mailer).submit(db, actor=viewer, draft=draft_payload())


def test_visibility(db, student, submit):
    mine = submit(student)
    other_student = make_actor("student-2", "student")
    submit(other_student, student_email="ravi@juitsolan.in")
    svc = ProjectsService()

    assert [p.id for p in svc.list_visible(db, actor=student)] == [mine.id]
    assert len(svc.list_visible(db, actor=make_actor("v", "view_only"))) == 2
    assert len(svc.list_visible(db, actor=make_actor("f", "faculty"), submitter="ravi@juitsolan.in")) == 1

    with pytest.raises(NotFoundError):
        svc.get_visible(db, actor=other_student, project_id=mine.id)
    assert svc.get_visible(db, actor=student, project_id=mine.id).id == mine.id

    with pytest.raises(ValidationError):
        svc.list_visible(db, actor=student, status="archived")


def test_delete_requires_delete_capability(db, student, approver, submit):
    p = submit(student)
    svc = ProjectsService()
    with pytest.raises(AuthorizationError):
        svc.delete(db, actor=approver, project_id=p.id)

    deleter = make_actor("admin-2", "admin", can_delete=True)
    svc.delete(db, actor=deleter, project_id=p.id)

    with pytest.raises(NotFoundError):
        svc.get_visible(db, actor=deleter, project_id=p.id)
    trail = AuditRecorder().list_for_entity(db, entity_type="project", entity_id=str(p.id))
    assert [e.action for e in trail] == [AuditAction.PROJECT_SUBMITTED, AuditAction.PROJECT_DELETED]
    assert trail[-1].details["title"] == "Line-following rover"
