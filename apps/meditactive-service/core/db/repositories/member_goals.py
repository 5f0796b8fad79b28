"""
Member goal link repository.

Goal links are always replaced as a whole set: existing links for the member
are deleted and the resolved goals re-inserted inside the caller's
transaction.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from sqlalchemy.orm import Session

from core.db import models
from core.db.repositories import catalog as repo_catalog
from core.db.repositories.catalog import CatalogRef

logger = logging.getLogger(__name__)


@dataclass
class GoalReplacement:
    goal_ids: List[int] = field(default_factory=list)
    skipped: List[CatalogRef] = field(default_factory=list)


def get_member_goals(db: Session, member_id: int) -> List[models.Goal]:
    return (
        db.query(models.Goal)
        .join(models.MemberGoal, models.MemberGoal.goal_id == models.Goal.id)
        .filter(models.MemberGoal.member_id == member_id)
        .order_by(models.Goal.id)
        .all()
    )


def clear_goal_links(db: Session, member_id: int) -> int:
    return (
        db.query(models.MemberGoal)
        .filter(models.MemberGoal.member_id == member_id)
        .delete(synchronize_session="fetch")
    )


def replace_goals(db: Session, member_id: int, goal_refs: Iterable[CatalogRef]) -> GoalReplacement:
    """Make the member's goal links exactly the resolvable subset of ``goal_refs``.

    Unresolvable references are skipped and reported; an empty list clears
    every link. Repeated references to the same goal yield one link.
    """
    resolution = repo_catalog.resolve_goals(db, goal_refs)
    for ref in resolution.skipped:
        logger.warning("Skipping unknown goal reference %r for member %s", ref, member_id)

    removed = clear_goal_links(db, member_id)
    for goal in resolution.resolved:
        db.add(models.MemberGoal(member_id=member_id, goal_id=goal.id))
    db.flush()

    goal_ids = [goal.id for goal in resolution.resolved]
    logger.debug("member %s goal links replaced: removed=%s inserted=%s", member_id, removed, goal_ids)
    return GoalReplacement(goal_ids=goal_ids, skipped=list(resolution.skipped))
