# labhub/core/errors.py
from __future__ import annotations

from typing import Optional


class ReviewError(Exception):
    """
    Base of every expected failure surfaced to callers.

    The workflow engine and the validator *return* these; the persistence
    adapter raises them; the review coordinator turns either into a single
    outcome. Routers translate them to HTTP responses via http_status.
    """

    code: str = "review_error"
    http_status: int = 400
    retryable: bool = False

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "retryable": self.retryable}


class ValidationError(ReviewError):
    """Malformed submission or request. Carries the failing field."""

    code = "validation_error"
    http_status = 422

    def __init__(self, field: Optional[str], message: str):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        d = super().to_dict()
        d["field"] = self.field
        return d


class AuthorizationError(ReviewError):
    code = "not_permitted"
    http_status = 403

    def __init__(self, message: str = "Not permitted."):
        # Never say which capability was missing.
        super().__init__(message)


class MissingCommentsError(ReviewError):
    code = "missing_comments"
    http_status = 422

    def __init__(self, message: str = "Comments are required to approve or reject a project."):
        super().__init__(message)


class ConflictError(ReviewError):
    code = "conflict"
    http_status = 409
    retryable = True

    def __init__(self, message: str = "Project was modified concurrently; re-read and retry."):
        super().__init__(message)


class NotFoundError(ReviewError):
    code = "not_found"
    http_status = 404

    def __init__(self, message: str = "Not found."):
        super().__init__(message)


class PersistenceError(ReviewError):
    code = "persistence_unavailable"
    http_status = 503
    retryable = True

    def __init__(self, message: str = "Storage is temporarily unavailable."):
        super().__init__(message)
