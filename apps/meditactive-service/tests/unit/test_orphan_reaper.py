from datetime import datetime, timedelta, timezone

import pytest

from core.db import models
from core.db.repositories import member_goals as repo_member_goals
from core.db.repositories import sessions as repo_sessions
from core.errors import InvalidRangeError

from tests.helpers import make_member

START = datetime(2026, 1, 10, 7, 0, tzinfo=timezone.utc)


def _session(db, catalog, member_ids):
    s = repo_sessions.create_session(db, catalog.session_types["1 hour"], START, START + timedelta(hours=1))
    for member_id in member_ids:
        repo_sessions.link_session(db, member_id, s.id)
    db.commit()
    return s


def test_clear_session_links_deletes_exclusive_sessions(db, catalog):
    member = make_member(db, "solo@example.com")
    s1 = _session(db, catalog, [member.id])
    s2 = _session(db, catalog, [member.id])

    result = repo_sessions.clear_session_links(db, member.id)
    db.commit()

    assert sorted(result.unlinked_session_ids) == sorted([s1.id, s2.id])
    assert sorted(result.deleted_session_ids) == sorted([s1.id, s2.id])
    assert db.query(models.ScheduledSession).count() == 0
    assert db.query(models.MemberSession).count() == 0


def test_shared_session_survives_until_last_link(db, catalog):
    a = make_member(db, "a@example.com")
    b = make_member(db, "b@example.com")
    shared = _session(db, catalog, [a.id, b.id])

    first = repo_sessions.clear_session_links(db, a.id)
    db.commit()
    assert first.unlinked_session_ids == [shared.id]
    assert first.deleted_session_ids == []
    assert repo_sessions.get_session(db, shared.id) is not None
    assert [s.id for s in repo_sessions.get_member_sessions(db, b.id)] == [shared.id]

    second = repo_sessions.clear_session_links(db, b.id)
    db.commit()
    assert second.deleted_session_ids == [shared.id]
    assert repo_sessions.get_session(db, shared.id) is None
    assert repo_sessions.count_orphan_sessions(db) == 0


def test_clear_session_links_without_sessions(db, catalog):
    member = make_member(db, "empty@example.com")
    result = repo_sessions.clear_session_links(db, member.id)
    assert result.unlinked_session_ids == []
    assert result.deleted_session_ids == []


def test_clear_member_relations_removes_goal_links_too(db, catalog):
    member = make_member(db, "all@example.com")
    repo_member_goals.replace_goals(db, member.id, ["Weight Loss", "Endurance"])
    _session(db, catalog, [member.id])

    result = repo_sessions.clear_member_relations(db, member.id)
    db.commit()

    assert result.removed_goal_links == 2
    assert len(result.deleted_session_ids) == 1
    assert db.query(models.MemberGoal).count() == 0
    # catalog rows are never touched
    assert db.query(models.Goal).count() == 5


def test_create_session_rejects_inverted_range(db, catalog):
    with pytest.raises(InvalidRangeError):
        repo_sessions.create_session(db, catalog.session_types["1 hour"], START, START)
    with pytest.raises(InvalidRangeError):
        repo_sessions.create_session(db, catalog.session_types["1 hour"], START, START - timedelta(minutes=1))
