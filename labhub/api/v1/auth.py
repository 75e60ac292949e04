from fastapi import APIRouter, Depends

from labhub.core.auth_deps import get_current_actor
from labhub.policies.permissions import Actor, capabilities
from labhub.schemas.auth import MeResponse

router = APIRouter(prefix="/auth")


@router.get("/me", response_model=MeResponse)
async def me(actor: Actor = Depends(get_current_actor)):
    caps = capabilities(actor)
    return {
        "actorId": actor.id,
        "role": actor.role,
        "email": actor.email,
        "displayName": actor.display_name,
        "capabilities": {
            "approve": caps.approve,
            "reject": caps.reject,
            "edit": caps.edit,
            "delete": caps.delete,
        },
    }
