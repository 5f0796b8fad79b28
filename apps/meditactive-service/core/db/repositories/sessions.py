"""
Session repository functions.

Sessions are owned children of members: they are inserted together with a
member link and deleted as soon as their last link disappears, within the
same transaction that removed it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Set

from sqlalchemy.orm import Session

from core.db import models
from core.db.repositories import member_goals as repo_member_goals
from core.errors import InvalidRangeError

logger = logging.getLogger(__name__)


@dataclass
class ReapResult:
    unlinked_session_ids: List[int] = field(default_factory=list)
    deleted_session_ids: List[int] = field(default_factory=list)
    removed_goal_links: int = 0


def get_session(db: Session, session_id: int):
    return db.query(models.ScheduledSession).filter(models.ScheduledSession.id == session_id).first()


def get_member_sessions(db: Session, member_id: int) -> List[models.ScheduledSession]:
    return (
        db.query(models.ScheduledSession)
        .join(models.MemberSession, models.MemberSession.session_id == models.ScheduledSession.id)
        .filter(models.MemberSession.member_id == member_id)
        .order_by(models.ScheduledSession.id)
        .all()
    )


def get_linked_session_ids(db: Session, member_id: int) -> List[int]:
    rows = (
        db.query(models.MemberSession.session_id)
        .filter(models.MemberSession.member_id == member_id)
        .all()
    )
    return [row.session_id for row in rows]


def create_session(db: Session, session_type_id: int, start_date: datetime, end_date: datetime) -> models.ScheduledSession:
    if end_date <= start_date:
        raise InvalidRangeError(
            f"Refusing to store session ending {end_date.isoformat()} before start {start_date.isoformat()}"
        )
    db_session = models.ScheduledSession(
        session_type_id=session_type_id,
        start_date=start_date,
        end_date=end_date,
    )
    db.add(db_session)
    db.flush()
    return db_session


def link_session(db: Session, member_id: int, session_id: int) -> models.MemberSession:
    link = models.MemberSession(member_id=member_id, session_id=session_id)
    db.add(link)
    db.flush()
    return link


def _still_linked(db: Session, session_ids: List[int]) -> Set[int]:
    if not session_ids:
        return set()
    rows = (
        db.query(models.MemberSession.session_id)
        .filter(models.MemberSession.session_id.in_(session_ids))
        .distinct()
        .all()
    )
    return {row.session_id for row in rows}


def clear_session_links(db: Session, member_id: int) -> ReapResult:
    """Remove the member's session links and delete sessions left unreferenced.

    A session still linked to any other member survives; one whose last link
    was just removed is deleted before this returns.
    """
    linked_ids = get_linked_session_ids(db, member_id)
    (
        db.query(models.MemberSession)
        .filter(models.MemberSession.member_id == member_id)
        .delete(synchronize_session="fetch")
    )

    remaining = _still_linked(db, linked_ids)
    orphan_ids = [session_id for session_id in linked_ids if session_id not in remaining]
    if orphan_ids:
        (
            db.query(models.ScheduledSession)
            .filter(models.ScheduledSession.id.in_(orphan_ids))
            .delete(synchronize_session="fetch")
        )
    db.flush()
    if orphan_ids:
        logger.debug("member %s orphaned sessions deleted: %s", member_id, orphan_ids)
    return ReapResult(unlinked_session_ids=linked_ids, deleted_session_ids=orphan_ids)


def clear_member_relations(db: Session, member_id: int) -> ReapResult:
    """Remove every dependent row of a member ahead of deleting the member itself.

    Goal links have no orphan handling: goals are catalog rows and never
    deleted here.
    """
    result = clear_session_links(db, member_id)
    result.removed_goal_links = repo_member_goals.clear_goal_links(db, member_id)
    db.flush()
    return result


def count_orphan_sessions(db: Session) -> int:
    return (
        db.query(models.ScheduledSession)
        .outerjoin(models.MemberSession, models.MemberSession.session_id == models.ScheduledSession.id)
        .filter(models.MemberSession.session_id.is_(None))
        .count()
    )
