"""
Catalog repository functions.

Read-only access to goals and session types, plus best-effort reference
resolution: a reference is either a numeric id or a display name, and a
reference that matches nothing is reported back instead of raising.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Iterable, List, Optional, TypeVar, Union

from sqlalchemy.orm import Session

from core.db import models

CatalogRef = Union[int, str]
T = TypeVar("T")


@dataclass
class CatalogResolution(Generic[T]):
    """Rows that resolved plus the references that did not."""
    resolved: List[T] = field(default_factory=list)
    skipped: List[CatalogRef] = field(default_factory=list)


def parse_positive_int(ref: CatalogRef) -> Optional[int]:
    """Return ``ref`` as a positive int when it is one (or a string of one)."""
    if isinstance(ref, bool):
        return None
    if isinstance(ref, int):
        return ref if ref > 0 else None
    if isinstance(ref, str):
        text = ref.strip()
        if text.isdigit():
            value = int(text)
            return value if value > 0 else None
    return None


def get_goal(db: Session, goal_id: int) -> Optional[models.Goal]:
    return db.query(models.Goal).filter(models.Goal.id == goal_id).first()


def get_goal_by_title(db: Session, title: str) -> Optional[models.Goal]:
    return db.query(models.Goal).filter(models.Goal.title == title).first()


def get_goals(db: Session) -> List[models.Goal]:
    return db.query(models.Goal).order_by(models.Goal.id).all()


def get_session_type(db: Session, session_type_id: int) -> Optional[models.SessionType]:
    return db.query(models.SessionType).filter(models.SessionType.id == session_type_id).first()


def get_session_type_by_name(db: Session, name: str) -> Optional[models.SessionType]:
    return db.query(models.SessionType).filter(models.SessionType.name == name).first()


def get_session_types(db: Session) -> List[models.SessionType]:
    return db.query(models.SessionType).order_by(models.SessionType.id).all()


def _resolve(db: Session, ref: CatalogRef, by_id, by_name):
    numeric = parse_positive_int(ref)
    if numeric is not None:
        row = by_id(db, numeric)
        if row is not None:
            return row
    if isinstance(ref, (int, str)) and not isinstance(ref, bool):
        # Numeric refs that missed by id still get a display-name lookup
        return by_name(db, str(ref))
    return None


def resolve_goal(db: Session, ref: CatalogRef) -> Optional[models.Goal]:
    return _resolve(db, ref, get_goal, get_goal_by_title)


def resolve_session_type(db: Session, ref: CatalogRef) -> Optional[models.SessionType]:
    return _resolve(db, ref, get_session_type, get_session_type_by_name)


def resolve_goals(db: Session, refs: Iterable[CatalogRef]) -> CatalogResolution[models.Goal]:
    """Resolve goal references, de-duplicating rows by id in input order."""
    result: CatalogResolution[models.Goal] = CatalogResolution()
    seen = set()
    for ref in refs:
        goal = resolve_goal(db, ref)
        if goal is None:
            result.skipped.append(ref)
            continue
        if goal.id in seen:
            continue
        seen.add(goal.id)
        result.resolved.append(goal)
    return result
