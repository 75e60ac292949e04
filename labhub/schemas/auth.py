from __future__ import annotations
from typing import Optional
from pydantic import BaseModel


class CapabilitiesResponse(BaseModel):
    approve: bool
    reject: bool
    edit: bool
    delete: bool


class MeResponse(BaseModel):
    actorId: str
    role: str
    email: Optional[str] = None
    displayName: Optional[str] = None
    capabilities: CapabilitiesResponse
