# labhub/services/notification_service.py
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import desc, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from labhub.core.config import get_settings
from labhub.core.errors import NotFoundError, PersistenceError
from labhub.models.enums import ProjectStatus
from labhub.models.notification import Notification
from labhub.models.project import Project
from labhub.services.mail_service import MailSender

logger = logging.getLogger(__name__)

# Statuses the submitter hears about.
NOTIFY_STATUSES = frozenset(
    {
        ProjectStatus.approved.value,
        ProjectStatus.rejected.value,
        ProjectStatus.completed.value,
    }
)

_TITLES: Dict[str, str] = {
    ProjectStatus.approved.value: "Project approved",
    ProjectStatus.rejected.value: "Project rejected",
    ProjectStatus.completed.value: "Project completed",
}


def should_notify(previous_status: Optional[str], new_status: Optional[str]) -> bool:
    return new_status in NOTIFY_STATUSES and new_status != previous_status


def build_message(project: Project, new_status: str) -> Dict[str, Any]:
    title = _TITLES[new_status]
    verb = {
        ProjectStatus.approved.value: "has been approved",
        ProjectStatus.rejected.value: "has been rejected",
        ProjectStatus.completed.value: "has been marked as completed",
    }[new_status]
    message = f'Your project "{project.project_title}" {verb}.'
    if new_status != ProjectStatus.completed.value and project.faculty_comments:
        message += f" Faculty comments: {project.faculty_comments}"
    return {
        "title": title,
        "message": message,
        "link": f"/projects/{project.id}",
    }


class NotificationDispatcher:
    def __init__(self, mailer: Optional[MailSender] = None, retry_attempts: Optional[int] = None):
        self.mailer = mailer
        if retry_attempts is None:
            retry_attempts = get_settings().notification_retry_attempts
        self.retry_attempts = retry_attempts

    def _mailer(self) -> MailSender:
        if self.mailer is None:
            self.mailer = MailSender()
        return self.mailer

    def create_notification(
        self,
        db: Session,
        *,
        user_id: str,
        title: str,
        message: str,
        link: Optional[str] = None,
    ) -> Optional[Notification]:
        """
        At-least-once insert: retried on storage errors. A retry after an
        ambiguous commit may produce a duplicate, which readers tolerate.
        """
        for attempt in range(1, self.retry_attempts + 1):
            row = Notification(user_id=user_id, title=title, message=message, link=link, read=False)
            try:
                db.add(row)
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                logger.warning(
                    "[notifications] insert attempt %s/%s failed for user=%s: %s",
                    attempt,
                    self.retry_attempts,
                    user_id,
                    exc,
                )
                continue
            db.refresh(row)
            return row

        logger.error("[notifications] giving up on %r for user=%s", title, user_id)
        return None

    def notify_on_transition(
        self,
        db: Session,
        project: Project,
        previous_status: Optional[str],
        new_status: Optional[str],
    ) -> Optional[Notification]:
        """Zero or one notification to the submitter; lateral moves stay silent."""
        if not should_notify(previous_status, new_status):
            return None

        recipient = project.submitted_by or project.student_email
        payload = build_message(project, new_status)
        row = self.create_notification(db, user_id=recipient, **payload)

        self._mailer().send(payload["title"], payload["message"], [project.student_email])
        return row

    # ---------------------------
    # OWNER OPERATIONS
    # ---------------------------

    def list_for_user(self, db: Session, *, user_id: str, limit: int = 50) -> List[Notification]:
        stmt = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(desc(Notification.created_at))
            .limit(limit)
        )
        return list(db.execute(stmt).scalars().all())

    def unread_count(self, db: Session, *, user_id: str) -> int:
        return db.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.read.is_(False),
            )
        ).scalar_one()

    def _owned(self, db: Session, *, user_id: str, notification_id: uuid.UUID) -> Notification:
        row = db.execute(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
        ).scalar_one_or_none()
        if not row:
            # other users' notifications are indistinguishable from missing ones
            raise NotFoundError("Notification not found.")
        return row

    def mark_read(self, db: Session, *, user_id: str, notification_id: uuid.UUID) -> Notification:
        row = self._owned(db, user_id=user_id, notification_id=notification_id)
        if row.read:
            return row
        row.read = True
        self._commit(db)
        db.refresh(row)
        return row

    def mark_all_read(self, db: Session, *, user_id: str) -> int:
        result = db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.read.is_(False))
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
        self._commit(db)
        return result.rowcount or 0

    def delete(self, db: Session, *, user_id: str, notification_id: uuid.UUID) -> None:
        row = self._owned(db, user_id=user_id, notification_id=notification_id)
        db.delete(row)
        self._commit(db)

    def _commit(self, db: Session) -> None:
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("[notifications] write failed: %s", exc)
            raise PersistenceError() from exc
