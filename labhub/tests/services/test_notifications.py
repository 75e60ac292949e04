import uuid
from types import SimpleNamespace
from unittest import mock

import pytest
from sqlalchemy.exc import OperationalError

from labhub.core.errors import NotFoundError
from labhub.services.notification_service import NotificationDispatcher, should_notify


@pytest.mark.parametrize(
    "previous, new, expected",
    [
        ("pending", "under_review", False),
        ("under_review", "approved", True),
        ("pending", "rejected", True),
        ("approved", "completed", True),
        ("approved", "approved", False),
        ("completed", "completed", False),
        ("completed", "pending", False),
        ("rejected", "under_review", False),
    ],
)
def test_should_notify(previous, new, expected):
    assert should_notify(previous, new) is expected


def _project(**kw):
    base = dict(
        id=uuid.uuid4(),
        project_title="Gesture-controlled arm",
        faculty_comments="Solid plan",
        submitted_by="student-9",
        student_email="kiran@juitsolan.in",
    )
    base.update(kw)
    return SimpleNamespace(**base)


def test_notify_on_transition_addresses_submitter(db, mailer):
    svc = NotificationDispatcher(mailer=mailer)
    p = _project()

    assert svc.notify_on_transition(db, p, "pending", "under_review") is None

    n = svc.notify_on_transition(db, p, "under_review", "rejected")
    assert n.user_id == "student-9"
    assert n.title == "Project rejected"
    assert "Gesture-controlled arm" in n.message
    assert "Solid plan" in n.message
    assert n.read is False
    assert mailer.sent[0]["to"] == ["kiran@juitsolan.in"]


def test_falls_back_to_email_when_no_account(db, mailer):
    n = NotificationDispatcher(mailer=mailer).notify_on_transition(
        db, _project(submitted_by=None), "approved", "completed"
    )
    assert n.user_id == "kiran@juitsolan.in"
    assert "Solid plan" not in n.message


def test_create_is_retried_on_storage_errors(db, mailer):
    svc = NotificationDispatcher(mailer=mailer, retry_attempts=3)
    real_commit = db.commit
    calls = {"n": 0}

    def flaky_commit():
        calls["n"] += 1
        if calls["n"] == 1:
            raise OperationalError("INSERT INTO notifications", {}, Exception("timeout"))
        return real_commit()

    with mock.patch.object(db, "commit", side_effect=flaky_commit):
        n = svc.create_notification(db, user_id="u1", title="t", message="m")
    assert n is not None
    assert calls["n"] == 2
    assert svc.unread_count(db, user_id="u1") == 1


def test_create_gives_up_after_retries(db, mailer):
    svc = NotificationDispatcher(mailer=mailer, retry_attempts=2)
    boom = OperationalError("INSERT INTO notifications", {}, Exception("down"))
    with mock.patch.object(db, "commit", side_effect=boom):
        assert svc.create_notification(db, user_id="u1", title="t", message="m") is None
    assert svc.list_for_user(db, user_id="u1") == []


def test_explicit_retry_count_is_respected(db, mailer):
    assert NotificationDispatcher(mailer=mailer).retry_attempts == 3

    svc = NotificationDispatcher(mailer=mailer, retry_attempts=0)
    assert svc.retry_attempts == 0
    assert svc.create_notification(db, user_id="u1", title="t", message="m") is None
    assert svc.list_for_user(db, user_id="u1") == []


def test_owner_operations_are_scoped(db, mailer):
    svc = NotificationDispatcher(mailer=mailer)
    mine = svc.create_notification(db, user_id="alice", title="a", message="1")
    svc.create_notification(db, user_id="alice", title="b", message="2")
    theirs = svc.create_notification(db, user_id="bob", title="c", message="3")

    assert svc.unread_count(db, user_id="alice") == 2

    with pytest.raises(NotFoundError):
        svc.mark_read(db, user_id="alice", notification_id=theirs.id)
    with pytest.raises(NotFoundError):
        svc.delete(db, user_id="alice", notification_id=theirs.id)

    assert svc.mark_read(db, user_id="alice", notification_id=mine.id).read is True
    assert svc.unread_count(db, user_id="alice") == 1

    assert svc.mark_all_read(db, user_id="alice") == 1
    assert svc.unread_count(db, user_id="alice") == 0
    assert svc.unread_count(db, user_id="bob") == 1

    svc.delete(db, user_id="alice", notification_id=mine.id)
    assert [n.title for n in svc.list_for_user(db, user_id="alice")] == ["b"]
