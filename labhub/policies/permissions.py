# labhub/policies/permissions.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional

from labhub.models.enums import ActorRole


@dataclass(frozen=True)
class PermissionBag:
    can_approve: bool = False
    can_edit: bool = False
    can_delete: bool = False

    @classmethod
    def from_claims(cls, raw: Optional[Dict[str, object]]) -> "PermissionBag":
        raw = raw or {}
        return cls(
            can_approve=raw.get("can_approve") is True,
            can_edit=raw.get("can_edit") is True,
            can_delete=raw.get("can_delete") is True,
        )


@dataclass(frozen=True)
class Actor:
    """Resolved identity handed to us by the auth layer. Never authenticated here."""

    id: str
    role: str
    permissions: PermissionBag = field(default_factory=PermissionBag)
    email: Optional[str] = None
    display_name: Optional[str] = None


# --- Capability names ---
CAP_APPROVE = "approve"
CAP_REJECT = "reject"
CAP_EDIT = "edit"
CAP_DELETE = "delete"

ALL_CAPABILITIES: FrozenSet[str] = frozenset({CAP_APPROVE, CAP_REJECT, CAP_EDIT, CAP_DELETE})

# Roles whose grants do not depend on the explicit bag.
ROLE_GRANTS: Dict[str, FrozenSet[str]] = {
    ActorRole.SUPER_ADMIN.value: ALL_CAPABILITIES,
}

# Roles denied every mutating capability, whatever the bag says.
DENY_ALL_ROLES: FrozenSet[str] = frozenset({ActorRole.VIEW_ONLY.value})

# Roles that may browse every submission (read surface only).
REVIEWER_ROLES: FrozenSet[str] = frozenset(
    {
        ActorRole.SUPER_ADMIN.value,
        ActorRole.ADMIN.value,
        ActorRole.FACULTY.value,
        ActorRole.VIEW_ONLY.value,
    }
)


@dataclass(frozen=True)
class Capabilities:
    approve: bool = False
    reject: bool = False
    edit: bool = False
    delete: bool = False

    def names(self) -> FrozenSet[str]:
        return frozenset(
            name
            for name, granted in (
                (CAP_APPROVE, self.approve),
                (CAP_REJECT, self.reject),
                (CAP_EDIT, self.edit),
                (CAP_DELETE, self.delete),
            )
            if granted
        )

    def any(self) -> bool:
        return bool(self.names())


NO_CAPABILITIES = Capabilities()


def capabilities(actor: Optional[Actor]) -> Capabilities:
    """
    Pure, total mapping of an actor to its capability set.

    - no actor / no role      -> nothing
    - view_only               -> nothing (explicit deny beats the bag)
    - role listed in ROLE_GRANTS -> that grant, plus whatever the bag adds
    - everyone else           -> the bag alone
    """
    if actor is None or not actor.role:
        return NO_CAPABILITIES

    role = str(actor.role).lower()
    if role in DENY_ALL_ROLES:
        return NO_CAPABILITIES

    granted = set(ROLE_GRANTS.get(role, frozenset()))
    bag = actor.permissions or PermissionBag()
    if bag.can_approve:
        granted.update({CAP_APPROVE, CAP_REJECT})
    if bag.can_edit:
        granted.add(CAP_EDIT)
    if bag.can_delete:
        granted.add(CAP_DELETE)

    return Capabilities(
        approve=CAP_APPROVE in granted,
        reject=CAP_REJECT in granted,
        edit=CAP_EDIT in granted,
        delete=CAP_DELETE in granted,
    )


def is_view_only(actor: Optional[Actor]) -> bool:
    return actor is not None and str(actor.role).lower() in DENY_ALL_ROLES


def can_view_all_projects(actor: Optional[Actor]) -> bool:
    if actor is None:
        return False
    return str(actor.role).lower() in REVIEWER_ROLES or capabilities(actor).any()


def can_submit_project(actor: Optional[Actor]) -> bool:
    return actor is not None and bool(actor.role) and not is_view_only(actor)


def can_delete_project(actor: Optional[Actor]) -> bool:
    return capabilities(actor).delete
