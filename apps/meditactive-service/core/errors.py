"""
Error kinds raised by the member synchronization engine.

Catalog reference problems are not errors: they travel back as
`schemas.SkippedReference` warnings. Everything here aborts the enclosing
transaction and reaches the caller with its kind intact.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from core.utils.settings import diagnostic_errors_enabled


class SyncError(Exception):
    kind = "sync_error"
    message = "Member synchronization failed"

    def __init__(self, detail: Optional[str] = None, **context: Any):
        self.detail = detail
        self.context = context
        super().__init__(detail or self.message)


class NotFoundError(SyncError):
    kind = "not_found"
    message = "Member not found"

    def __init__(self, member_id: Any, detail: Optional[str] = None):
        self.member_id = member_id
        super().__init__(detail or f"No member found with ID: {member_id}", member_id=member_id)


class DuplicateIdentityError(SyncError):
    kind = "duplicate_identity"
    message = "Email already exists"

    def __init__(self, email: str, detail: Optional[str] = None):
        self.email = email
        super().__init__(detail or f"The email {email!r} is already in use by another member", email=email)


class InvalidRangeError(SyncError):
    """A session whose end does not come after its start.

    The materializer corrects such ranges before writing, so seeing this is
    a bug rather than a recoverable condition.
    """
    kind = "invalid_range"
    message = "Session end date must be after start date"


class TransactionFailureError(SyncError):
    kind = "transaction_failure"
    message = "The operation could not be completed and was rolled back"


def render_error(exc: Exception, include_detail: Optional[bool] = None) -> Dict[str, Any]:
    """Render an engine error into a transport-neutral payload.

    Internal detail and the error context (member id, email) are only
    included when diagnostic errors are enabled (or ``include_detail`` forces
    it); unknown exceptions render as a transaction failure.
    """
    if include_detail is None:
        include_detail = diagnostic_errors_enabled()
    if isinstance(exc, SyncError):
        kind, message, detail = exc.kind, exc.message, exc.detail
    else:
        kind, message, detail = TransactionFailureError.kind, TransactionFailureError.message, str(exc)
    payload: Dict[str, Any] = {"status": "error", "kind": kind, "message": message}
    if include_detail and detail:
        payload["detail"] = detail
        context = getattr(exc, "context", None)
        if context:
            payload["context"] = dict(context)
        cause = exc.__cause__
        if cause is not None:
            payload["cause"] = f"{type(cause).__name__}: {cause}"
    return payload
