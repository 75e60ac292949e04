from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import asc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from labhub.core.hashing import payload_hash
from labhub.models.audit_log import AuditLogEntry

logger = logging.getLogger(__name__)


class AuditRecorder:
    def record(
        self,
        db: Session,
        *,
        actor_id: Optional[str],
        action: str,
        entity_type: str,
        entity_id: Optional[str],
        details: Dict[str, Any],
        request_id: Optional[str] = None,
    ) -> Optional[AuditLogEntry]:
        """
        Append-only audit insert, best effort.

        A failed insert never undoes the business change it describes; it is
        rolled back and logged instead, since the trail now has a gap.
        """
        row = AuditLogEntry(
            actor_id=actor_id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            details=details,
            payload_hash=payload_hash(details),
            request_id=request_id,
        )
        try:
            db.add(row)
            db.commit()
            db.refresh(row)
        except SQLAlchemyError:
            db.rollback()
            logger.exception(
                "[audit] failed to record %s for %s %s (actor=%s, request_id=%s)",
                action,
                entity_type,
                entity_id,
                actor_id,
                request_id,
            )
            return None
        return row

    def list_for_entity(
        self,
        db: Session,
        *,
        entity_type: str,
        entity_id: str,
        limit: int = 200,
    ) -> List[AuditLogEntry]:
        stmt = (
            select(AuditLogEntry)
            .where(
                AuditLogEntry.entity_type == entity_type,
                AuditLogEntry.entity_id == entity_id,
            )
            .order_by(asc(AuditLogEntry.created_at))
            .limit(limit)
        )
        return list(db.execute(stmt).scalars().all())
