"""
Domain-split SQLAlchemy models.

Exposes `Base`, `now_utc`, and all ORM classes from one place so callers can
write `models.Member`, `models.Goal`, and so on.
"""

from .base import Base, now_utc  # re-export

# Domain models
from .members import Member, MemberGoal
from .catalog import Goal, SessionType
from .sessions import ScheduledSession, MemberSession

__all__ = [
    # base
    "Base",
    "now_utc",
    # root + goal link
    "Member",
    "MemberGoal",
    # catalog
    "Goal",
    "SessionType",
    # owned sessions + link
    "ScheduledSession",
    "MemberSession",
]
