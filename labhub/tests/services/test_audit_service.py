import logging
from unittest import mock

import pytest
from sqlalchemy.exc import OperationalError

from labhub.core.hashing import payload_hash
from labhub.models.audit_log import AppendOnlyError
from labhub.services.audit_service import AuditRecorder


def test_record_and_list_in_order(db):
    rec = AuditRecorder()
    details = {"to": "under_review", "from": "pending"}
    first = rec.record(
        db,
        actor_id="admin-1",
        action="PROJECT_UNDER_REVIEW",
        entity_type="project",
        entity_id="p-1",
        details=details,
        request_id="RID-1",
    )
    rec.record(
        db,
        actor_id=None,
        action="PROJECT_COMPLETED",
        entity_type="project",
        entity_id="p-1",
        details={"to": "completed"},
    )
    rec.record(db, actor_id="x", action="PROJECT_SUBMITTED", entity_type="project", entity_id="p-2", details={})

    assert first.payload_hash == payload_hash({"from": "pending", "to": "under_review"})
    assert first.request_id == "RID-1"

    rows = rec.list_for_entity(db, entity_type="project", entity_id="p-1")
    assert [r.action for r in rows] == ["PROJECT_UNDER_REVIEW", "PROJECT_COMPLETED"]
    assert rows[1].actor_id is None


def test_failed_insert_is_logged_not_raised(db, caplog):
    boom = OperationalError("INSERT INTO activity_logs", {}, Exception("disk full"))
    with caplog.at_level(logging.ERROR, logger="labhub.services.audit_service"):
        with mock.patch.object(db, "commit", side_effect=boom):
            row = AuditRecorder().record(
                db,
                actor_id="admin-1",
                action="PROJECT_APPROVED",
                entity_type="project",
                entity_id="p-9",
                details={"to": "approved"},
            )
    assert row is None
    assert AuditRecorder().list_for_entity(db, entity_type="project", entity_id="p-9") == []
    assert any("PROJECT_APPROVED" in r.getMessage() for r in caplog.records)


def test_entries_cannot_be_changed_or_removed(db):
    rec = AuditRecorder()
    row = rec.record(
        db,
        actor_id="admin-1",
        action="PROJECT_REJECTED",
        entity_type="project",
        entity_id="p-3",
        details={"to": "rejected", "comments": "Too costly"},
    )

    row.details = {"to": "approved"}
    with pytest.raises(AppendOnlyError):
        db.flush()
    db.rollback()

    db.delete(db.get(type(row), row.id))
    with pytest.raises(AppendOnlyError):
        db.flush()
    db.rollback()

    rows = rec.list_for_entity(db, entity_type="project", entity_id="p-3")
    assert len(rows) == 1
    assert rows[0].details == {"to": "rejected", "comments": "Too costly"}
