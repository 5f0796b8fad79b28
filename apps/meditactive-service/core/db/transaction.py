"""
Transaction coordinator for aggregate mutations.

Runs a unit of work against one session and one database transaction:
commit when the work returns, roll back everything when any step raises.
Lower-layer database faults are reported as `TransactionFailureError`;
engine errors keep their kind.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from core.errors import SyncError, TransactionFailureError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _default_factory() -> sessionmaker:
    from core.db import database  # resolved lazily so tests can rebind SessionLocal
    return database.SessionLocal


@contextmanager
def aggregate_transaction(session_factory: Optional[sessionmaker] = None, *, label: str = "aggregate mutation") -> Iterator[Session]:
    factory = session_factory or _default_factory()
    db = factory()
    try:
        with db.begin():
            yield db
        logger.debug("%s committed", label)
    except SyncError as exc:
        logger.warning("%s rolled back: %s", label, exc.kind)
        raise
    except SQLAlchemyError as exc:
        logger.error("%s rolled back after database error", label, exc_info=True)
        raise TransactionFailureError(str(exc)) from exc
    except Exception:
        logger.error("%s rolled back after unexpected error", label, exc_info=True)
        raise
    finally:
        db.close()


def run_aggregate_mutation(
    fn: Callable[[Session], T],
    *,
    session_factory: Optional[sessionmaker] = None,
    label: str = "aggregate mutation",
) -> T:
    """Invoke ``fn`` with a transactional session; commit on return, roll back on error."""
    with aggregate_transaction(session_factory, label=label) as db:
        return fn(db)
