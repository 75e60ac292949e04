from __future__ import annotations
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class AuditLogEntryResponse(BaseModel):
    id: str
    createdAtIso: str
    requestId: Optional[str] = None

    actorId: Optional[str] = None
    action: str
    entityType: str
    entityId: Optional[str] = None

    payloadHash: str
    details: Dict[str, Any] = Field(default_factory=dict)


class AuditLogListResponse(BaseModel):
    entityType: str
    entityId: str
    records: List[AuditLogEntryResponse]
