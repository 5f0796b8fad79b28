"""
Member aggregate service: create, update and delete a member together with
its goal links and sessions, each as one atomic transaction.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.orm import Session, sessionmaker

from core.db import models, schemas
from core.db.repositories import catalog as repo_catalog
from core.db.repositories import member_goals as repo_member_goals
from core.db.repositories import members as repo_members
from core.db.repositories import sessions as repo_sessions
from core.db.transaction import run_aggregate_mutation
from core.errors import NotFoundError
from core.services.session_materializer import materialize_sessions

logger = logging.getLogger(__name__)


def load_aggregate(db: Session, db_member: models.Member) -> schemas.MemberAggregate:
    """Read a member back with its linked goals and sessions."""
    member = schemas.Member.model_validate(db_member, from_attributes=True)
    return schemas.MemberAggregate(
        **member.model_dump(),
        goals=[schemas.Goal.model_validate(g) for g in repo_member_goals.get_member_goals(db, db_member.id)],
        sessions=[schemas.ScheduledSession.model_validate(s) for s in repo_sessions.get_member_sessions(db, db_member.id)],
    )


class MemberSyncService:
    """Coordinates member mutations across the member, link and session tables."""

    def __init__(self, session_factory: Optional[sessionmaker] = None, clock: Optional[Callable[[], datetime]] = None):
        self.session_factory = session_factory
        self.clock = clock

    def _factory(self) -> sessionmaker:
        if self.session_factory is not None:
            return self.session_factory
        from core.db import database
        return database.SessionLocal

    def _now(self) -> Optional[datetime]:
        return self.clock() if self.clock else None

    def _replace_goals(self, db: Session, member_id: int, goal_refs, warnings: List[schemas.SkippedReference]):
        replacement = repo_member_goals.replace_goals(db, member_id, goal_refs)
        warnings.extend(schemas.SkippedReference(kind='goal', ref=ref) for ref in replacement.skipped)

    def _add_sessions(self, db: Session, member_id: int, session_specs, warnings: List[schemas.SkippedReference]):
        materialized = materialize_sessions(db, member_id, session_specs, now=self._now())
        warnings.extend(schemas.SkippedReference(kind='session_type', ref=ref) for ref in materialized.skipped)

    def create_member(self, command: schemas.CreateMemberCommand) -> schemas.MemberSyncResult:
        """Insert a member, link its goals and materialize its sessions."""
        def _create(db: Session) -> schemas.MemberSyncResult:
            warnings: List[schemas.SkippedReference] = []
            db_member = repo_members.create_member(db, command.member)
            self._replace_goals(db, db_member.id, command.goal_refs, warnings)
            self._add_sessions(db, db_member.id, command.session_specs, warnings)
            return schemas.MemberSyncResult(member=load_aggregate(db, db_member), warnings=warnings)

        result = run_aggregate_mutation(_create, session_factory=self._factory(), label="create member")
        logger.info(
            "member %s created with %s goals, %s sessions, %s skipped references",
            result.member.id, len(result.member.goals), len(result.member.sessions), len(result.warnings),
        )
        return result

    def update_member(self, member_id: int, command: schemas.UpdateMemberCommand) -> schemas.MemberSyncResult:
        """Apply a sparse update; relation fields are fully replaced only when supplied."""
        def _update(db: Session) -> schemas.MemberSyncResult:
            warnings: List[schemas.SkippedReference] = []
            db_member = repo_members.require_member(db, member_id)
            repo_members.update_member(db, member_id, command.fields)
            if command.replaces_goals:
                self._replace_goals(db, member_id, command.goal_refs, warnings)
            if command.replaces_sessions:
                repo_sessions.clear_session_links(db, member_id)
                self._add_sessions(db, member_id, command.session_specs, warnings)
            return schemas.MemberSyncResult(member=load_aggregate(db, db_member), warnings=warnings)

        result = run_aggregate_mutation(_update, session_factory=self._factory(), label="update member")
        logger.info(
            "member %s updated (goals replaced=%s, sessions replaced=%s)",
            member_id, command.replaces_goals, command.replaces_sessions,
        )
        return result

    def delete_member(self, member_id: int) -> None:
        """Delete a member after removing its links and any sessions left orphaned."""
        def _delete(db: Session) -> repo_sessions.ReapResult:
            repo_members.require_member(db, member_id)
            reaped = repo_sessions.clear_member_relations(db, member_id)
            repo_members.delete_member(db, member_id)
            return reaped

        reaped = run_aggregate_mutation(_delete, session_factory=self._factory(), label="delete member")
        logger.info(
            "member %s deleted; %s sessions unlinked, %s deleted",
            member_id, len(reaped.unlinked_session_ids), len(reaped.deleted_session_ids),
        )

    def get_member(self, member_id: int) -> schemas.MemberAggregate:
        with self._factory()() as db:
            db_member = repo_members.get_member(db, member_id)
            if db_member is None:
                raise NotFoundError(member_id)
            return load_aggregate(db, db_member)

    def list_members(self, skip: int = 0, limit: int = 10) -> List[schemas.Member]:
        with self._factory()() as db:
            return [schemas.Member.model_validate(m) for m in repo_members.get_members(db, skip, limit)]

    def list_goals(self) -> List[schemas.Goal]:
        with self._factory()() as db:
            return [schemas.Goal.model_validate(g) for g in repo_catalog.get_goals(db)]

    def list_session_types(self) -> List[schemas.SessionType]:
        with self._factory()() as db:
            return [schemas.SessionType.model_validate(t) for t in repo_catalog.get_session_types(db)]
