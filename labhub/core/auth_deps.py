# labhub/core/auth_deps.py
from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from labhub.core.security import decode_token
from labhub.policies.permissions import Actor, PermissionBag

bearer = HTTPBearer(auto_error=True)


def get_current_actor(
    request: Request,
    creds: HTTPAuthorizationCredentials = Depends(bearer),
) -> Actor:
    """
    Resolves the actor from a token issued by the identity provider.

    Guarantees:
    - JWT is valid
    - sub (actor id) and role are present
    - permissions claim, when present, is reduced to the three known flags
    """

    try:
        payload = decode_token(creds.credentials)
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token.")

    actor_id = payload.get("sub")
    role = payload.get("role")
    if not actor_id or not role:
        raise HTTPException(status_code=401, detail="Token missing required claims.")

    raw_perms = payload.get("permissions")
    actor = Actor(
        id=str(actor_id),
        role=str(role).lower(),
        permissions=PermissionBag.from_claims(raw_perms if isinstance(raw_perms, dict) else None),
        email=payload.get("email"),
        display_name=payload.get("name"),
    )

    # Make actor available to downstream middleware / handlers
    request.state.actor = actor

    return actor
