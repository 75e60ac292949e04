from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import DateTime, Index, String, Uuid, event
from sqlalchemy.orm import Mapped, mapped_column

from labhub.db.base import Base, JsonType


class AuditLogEntry(Base):
    """
    Activity trail record.
    - Append-only (never UPDATE, never DELETE)
    - actor_id is null for system actions
    - payload_hash is sha256 over the canonical JSON of details
    """
    __tablename__ = "activity_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    actor_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    action: Mapped[str] = mapped_column(String(96), nullable=False)

    entity_type: Mapped[str] = mapped_column(String(32), nullable=False)
    entity_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    details: Mapped[Dict[str, Any]] = mapped_column(JsonType, nullable=False, default=dict)
    payload_hash: Mapped[str] = mapped_column(String(128), nullable=False)

    request_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        Index("ix_activity_entity", "entity_type", "entity_id"),
        Index("ix_activity_action", "action"),
        Index("ix_activity_created", "created_at"),
    )


class AppendOnlyError(RuntimeError):
    pass


@event.listens_for(AuditLogEntry, "before_update")
def _reject_update(mapper, connection, target):
    raise AppendOnlyError("activity_logs is append-only (UPDATE rejected).")


@event.listens_for(AuditLogEntry, "before_delete")
def _reject_delete(mapper, connection, target):
    raise AppendOnlyError("activity_logs is append-only (DELETE rejected).")
