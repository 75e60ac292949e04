# labhub/services/review_workflow.py
"""
Project review state machine.

pending -> under_review -> {approved, rejected} -> completed is the normal
path, but reviewers may correct any status into any other. The rules for
every (source, target) pair live in TRANSITION_RULES so the whole graph can
be listed and checked in one place.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Optional, Tuple

from labhub.core.errors import (
    AuthorizationError,
    MissingCommentsError,
    ReviewError,
    ValidationError,
)
from labhub.models.enums import ProjectStatus
from labhub.policies.permissions import (
    CAP_APPROVE,
    CAP_EDIT,
    CAP_REJECT,
    Actor,
    capabilities,
    is_view_only,
)

PENDING = ProjectStatus.pending.value
UNDER_REVIEW = ProjectStatus.under_review.value
APPROVED = ProjectStatus.approved.value
REJECTED = ProjectStatus.rejected.value
COMPLETED = ProjectStatus.completed.value

STATUSES: Tuple[str, ...] = tuple(s.value for s in ProjectStatus)
INITIAL_STATUS = PENDING
TERMINAL_STATUSES: FrozenSet[str] = frozenset({COMPLETED})
DECISION_STATUSES: FrozenSet[str] = frozenset({APPROVED, REJECTED})


class AuditAction:
    PROJECT_SUBMITTED = "PROJECT_SUBMITTED"
    PROJECT_DELETED = "PROJECT_DELETED"

    # Review transitions, keyed by target status
    PROJECT_RESET = "PROJECT_RESET"
    PROJECT_UNDER_REVIEW = "PROJECT_UNDER_REVIEW"
    PROJECT_APPROVED = "PROJECT_APPROVED"
    PROJECT_REJECTED = "PROJECT_REJECTED"
    PROJECT_COMPLETED = "PROJECT_COMPLETED"


TRANSITION_ACTIONS: Dict[str, str] = {
    PENDING: AuditAction.PROJECT_RESET,
    UNDER_REVIEW: AuditAction.PROJECT_UNDER_REVIEW,
    APPROVED: AuditAction.PROJECT_APPROVED,
    REJECTED: AuditAction.PROJECT_REJECTED,
    COMPLETED: AuditAction.PROJECT_COMPLETED,
}


@dataclass(frozen=True)
class TransitionRule:
    # actor must hold every capability in all_of ...
    all_of: FrozenSet[str] = frozenset()
    # ... and at least one of any_of (when non-empty)
    any_of: FrozenSet[str] = frozenset()
    comments_required: bool = False

    def permits(self, granted: FrozenSet[str]) -> bool:
        if not self.all_of <= granted:
            return False
        return not self.any_of or bool(self.any_of & granted)


def _rule_for(source: str, target: str) -> TransitionRule:
    if target == APPROVED:
        rule = TransitionRule(all_of=frozenset({CAP_APPROVE}), comments_required=True)
    elif target == REJECTED:
        rule = TransitionRule(all_of=frozenset({CAP_REJECT}), comments_required=True)
    else:
        # opening a review, resetting, or marking done
        rule = TransitionRule(any_of=frozenset({CAP_APPROVE, CAP_EDIT}))

    if source in TERMINAL_STATUSES and target not in TERMINAL_STATUSES:
        # leaving completed is a correction
        rule = TransitionRule(
            all_of=rule.all_of | {CAP_EDIT},
            any_of=frozenset(),
            comments_required=rule.comments_required,
        )
    return rule


TRANSITION_RULES: Dict[Tuple[str, str], TransitionRule] = {
    (source, target): _rule_for(source, target) for source in STATUSES for target in STATUSES
}


@dataclass(frozen=True)
class TransitionResult:
    previous_status: Optional[str]
    new_status: Optional[str]
    patch: Dict[str, Any] = field(default_factory=dict)
    action: Optional[str] = None
    error: Optional[ReviewError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _fail(previous: Optional[str], err: ReviewError) -> TransitionResult:
    return TransitionResult(previous_status=previous, new_status=None, error=err)


def authorize_transition(actor: Optional[Actor], source: str, target: str) -> Optional[ReviewError]:
    """Capability gate only. Returns the error, or None when permitted."""
    if actor is None or is_view_only(actor):
        return AuthorizationError()
    rule = TRANSITION_RULES.get((source, target))
    if rule is None:
        return ValidationError("status", f"Unknown status transition {source!r} -> {target!r}.")
    if not rule.permits(capabilities(actor).names()):
        return AuthorizationError()
    return None


def transition(
    project: Any,
    actor: Optional[Actor],
    requested_status: str,
    comments: Optional[str],
    now: Optional[datetime] = None,
) -> TransitionResult:
    """
    Decide a status change without touching storage.

    Checks, in order: view_only actor, known target status, capability gate,
    comment gate. On success the result carries the complete field patch;
    nothing is applied until the caller writes it.
    """
    previous = getattr(project, "status", None)

    if actor is None or is_view_only(actor):
        return _fail(previous, AuthorizationError())

    target = (requested_status or "").strip().lower()
    if target not in STATUSES:
        return _fail(previous, ValidationError("status", f"status must be one of: {', '.join(STATUSES)}."))

    err = authorize_transition(actor, previous, target)
    if err is not None:
        return _fail(previous, err)

    text = (comments or "").strip()
    if TRANSITION_RULES[(previous, target)].comments_required and not text:
        return _fail(previous, MissingCommentsError())

    now = now or datetime.now(timezone.utc)
    patch: Dict[str, Any] = {
        "status": target,
        "updated_at": now,
    }
    if target == INITIAL_STATUS:
        patch["reviewed_by"] = None
        patch["reviewed_at"] = None
    else:
        patch["reviewed_by"] = actor.id
        patch["reviewed_at"] = now
    if text:
        patch["faculty_comments"] = text

    return TransitionResult(
        previous_status=previous,
        new_status=target,
        patch=patch,
        action=TRANSITION_ACTIONS[target],
    )
