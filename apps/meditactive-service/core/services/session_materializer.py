"""
Session materializer: turns session specs into stored, linked sessions.

Each spec names a session type (by id or name) and may carry explicit start
and end dates. Missing or unparseable dates are filled from the current time
and the session type's duration, and an end that does not come after the
start is replaced by ``start + duration`` so stored rows always satisfy
``end_date > start_date``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from core.db import models, schemas
from core.db.models import now_utc
from core.db.repositories import catalog as repo_catalog
from core.db.repositories import sessions as repo_sessions
from core.db.repositories.catalog import CatalogRef

logger = logging.getLogger(__name__)


@dataclass
class MaterializedSessions:
    sessions: List[models.ScheduledSession] = field(default_factory=list)
    skipped: List[CatalogRef] = field(default_factory=list)


def parse_timestamp(value) -> Optional[datetime]:
    """Parse an explicit timestamp into an aware UTC datetime, or None.

    Accepts datetimes, dates (midnight UTC) and whatever ISO-8601 string
    ``datetime.fromisoformat`` reads on 3.11+, including a trailing ``Z``.
    Naive values are taken to be UTC.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text[-1] in "zZ":
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def plan_window(session_type: models.SessionType, spec: schemas.SessionSpec, now: datetime) -> Tuple[datetime, datetime]:
    duration = timedelta(minutes=session_type.duration_minutes)
    start = parse_timestamp(spec.start_date)
    if start is None:
        if spec.start_date is not None:
            logger.warning("Ignoring unparseable session start date %r", spec.start_date)
        start = now
    end = parse_timestamp(spec.end_date)
    if end is None:
        if spec.end_date is not None:
            logger.warning("Ignoring unparseable session end date %r", spec.end_date)
        end = start + duration
    if end <= start:
        logger.warning(
            "Session end %s does not follow start %s; using %s minute default",
            end.isoformat(), start.isoformat(), session_type.duration_minutes,
        )
        end = start + duration
    return start, end


def materialize_sessions(
    db: Session,
    member_id: int,
    specs: Iterable[schemas.SessionSpecInput],
    *,
    now: Optional[datetime] = None,
) -> MaterializedSessions:
    """Create one session plus member link per resolvable spec.

    Purely additive; callers replacing a member's sessions clear the old
    links first (`sessions.clear_session_links`).
    """
    now = parse_timestamp(now) if now is not None else now_utc()
    result = MaterializedSessions()
    for item in specs:
        spec = schemas.coerce_session_spec(item)
        session_type = repo_catalog.resolve_session_type(db, spec.session_type_id)
        if session_type is None:
            logger.warning(
                "Skipping unknown session type reference %r for member %s", spec.session_type_id, member_id
            )
            result.skipped.append(spec.session_type_id)
            continue
        start, end = plan_window(session_type, spec, now)
        db_session = repo_sessions.create_session(db, session_type.id, start, end)
        repo_sessions.link_session(db, member_id, db_session.id)
        result.sessions.append(db_session)
    return result
