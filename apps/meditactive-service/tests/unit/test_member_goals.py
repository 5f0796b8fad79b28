from core.db import models
from core.db.repositories import member_goals as repo_member_goals

from tests.helpers import make_member


def _titles(db, member_id):
    return [g.title for g in repo_member_goals.get_member_goals(db, member_id)]


def test_replace_goals_resolves_titles_and_ids(db, catalog):
    member = make_member(db, "g@example.com")
    result = repo_member_goals.replace_goals(db, member.id, ["Weight Loss", catalog.goals["Endurance"]])
    db.commit()
    assert result.skipped == []
    assert sorted(result.goal_ids) == sorted([catalog.goals["Weight Loss"], catalog.goals["Endurance"]])
    assert _titles(db, member.id) == ["Weight Loss", "Endurance"]


def test_replace_goals_is_full_replace(db, catalog):
    member = make_member(db, "r@example.com")
    repo_member_goals.replace_goals(db, member.id, ["Weight Loss", "Maintenance"])
    repo_member_goals.replace_goals(db, member.id, ["Flexibility"])
    db.commit()
    assert _titles(db, member.id) == ["Flexibility"]


def test_replace_goals_empty_list_clears(db, catalog):
    member = make_member(db, "e@example.com")
    repo_member_goals.replace_goals(db, member.id, ["Weight Loss"])
    db.commit()
    repo_member_goals.replace_goals(db, member.id, [])
    db.commit()
    assert _titles(db, member.id) == []


def test_replace_goals_twice_is_idempotent(db, catalog):
    member = make_member(db, "i@example.com")
    refs = ["Muscle Gain", "Weight Loss"]
    repo_member_goals.replace_goals(db, member.id, refs)
    db.commit()
    once = _titles(db, member.id)
    repo_member_goals.replace_goals(db, member.id, refs)
    db.commit()
    assert _titles(db, member.id) == once
    assert db.query(models.MemberGoal).filter_by(member_id=member.id).count() == 2


def test_replace_goals_skips_unknown_and_dedupes(db, catalog, caplog):
    member = make_member(db, "s@example.com")
    with caplog.at_level("WARNING", logger="core.db.repositories.member_goals"):
        result = repo_member_goals.replace_goals(db, member.id, ["Weight Loss", "Yoga", "Weight Loss", 777])
    db.commit()
    assert result.skipped == ["Yoga", 777]
    assert _titles(db, member.id) == ["Weight Loss"]
    assert any("Yoga" in r.getMessage() for r in caplog.records)


def test_replace_goals_leaves_other_members_alone(db, catalog):
    a = make_member(db, "a@example.com")
    b = make_member(db, "b@example.com")
    repo_member_goals.replace_goals(db, a.id, ["Weight Loss"])
    repo_member_goals.replace_goals(db, b.id, ["Maintenance"])
    repo_member_goals.replace_goals(db, a.id, [])
    db.commit()
    assert _titles(db, a.id) == []
    assert _titles(db, b.id) == ["Maintenance"]
