"""
Domain-split Pydantic schemas.

Re-exports every schema so callers can write `schemas.MemberCreate` and so on.
"""

# Import order: define base/simple types first to satisfy forward refs
from .catalog import Goal, SessionType
from .sessions import ScheduledSession, SessionSpec, SessionSpecInput, coerce_session_spec
from .members import (
    MemberBase,
    MemberCreate,
    MemberUpdate,
    Member,
    MemberAggregate,
    CreateMemberCommand,
    UpdateMemberCommand,
    SkippedReference,
    MemberSyncResult,
)

__all__ = [
    # catalog
    "Goal",
    "SessionType",
    # sessions
    "ScheduledSession",
    "SessionSpec",
    "SessionSpecInput",
    "coerce_session_spec",
    # members
    "MemberBase",
    "MemberCreate",
    "MemberUpdate",
    "Member",
    "MemberAggregate",
    "CreateMemberCommand",
    "UpdateMemberCommand",
    "SkippedReference",
    "MemberSyncResult",
]
