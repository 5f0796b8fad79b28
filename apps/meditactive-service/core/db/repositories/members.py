"""
Member repository functions.

CRUD on the member root table. Email uniqueness is checked before writing so
collisions surface as `DuplicateIdentityError` instead of a raw constraint
violation; the unique index still guards concurrent writers at commit.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.db import models, schemas
from core.errors import DuplicateIdentityError, NotFoundError

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def get_member(db: Session, member_id: int) -> Optional[models.Member]:
    return db.query(models.Member).filter(models.Member.id == member_id).first()


def get_member_by_email(db: Session, email: str) -> Optional[models.Member]:
    return db.query(models.Member).filter(models.Member.email == email).first()


def require_member(db: Session, member_id: int) -> models.Member:
    db_member = get_member(db, member_id)
    if db_member is None:
        raise NotFoundError(member_id)
    return db_member


def get_members(db: Session, skip: int = 0, limit: int = 10):
    limit = min(max(int(limit), 1), MAX_PAGE_SIZE)
    skip = max(0, int(skip))
    return (
        db.query(models.Member)
        .order_by(models.Member.id)
        .offset(skip)
        .limit(limit)
        .all()
    )


def count_members(db: Session) -> int:
    return db.query(models.Member).count()


def _flush_member(db: Session, email: str) -> None:
    try:
        db.flush()
    except IntegrityError as exc:
        # Lost a race with another writer between the check and the insert
        if _is_email_conflict(exc):
            raise DuplicateIdentityError(email) from exc
        raise


def _is_email_conflict(exc: IntegrityError) -> bool:
    """Whether an IntegrityError came from the member email unique index."""
    text = str(getattr(exc, "orig", exc)).lower()
    return "email" in text or "members_email" in text


def create_member(db: Session, member: schemas.MemberCreate) -> models.Member:
    if get_member_by_email(db, member.email) is not None:
        raise DuplicateIdentityError(member.email)
    db_member = models.Member(
        first_name=member.first_name,
        last_name=member.last_name,
        email=member.email,
        goal=member.goal,
    )
    db.add(db_member)
    _flush_member(db, member.email)
    logger.debug("member row inserted id=%s", db_member.id)
    return db_member


def update_member(db: Session, member_id: int, member: schemas.MemberUpdate) -> models.Member:
    db_member = require_member(db, member_id)
    update_data = member.model_dump(exclude_unset=True)
    new_email = update_data.get("email")
    if new_email is not None and new_email != db_member.email:
        other = get_member_by_email(db, new_email)
        if other is not None and other.id != db_member.id:
            raise DuplicateIdentityError(new_email)
    for key, value in update_data.items():
        setattr(db_member, key, value)
    if update_data:
        _flush_member(db, db_member.email)
    return db_member


def delete_member(db: Session, member_id: int) -> None:
    """Delete the member row.

    Link rows must already be gone (see `sessions.clear_session_links` and
    `member_goals.clear_goal_links`); the foreign keys reject anything else.
    """
    db_member = require_member(db, member_id)
    db.delete(db_member)
    db.flush()
