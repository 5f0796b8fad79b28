from core.db import models, schemas
from core.db.repositories import members as repo_members


def count_rows(session_factory, model) -> int:
    with session_factory() as s:
        return s.query(model).count()


def make_member(db, email: str, first_name: str = "Ada", last_name: str = "Lovelace", goal=None) -> models.Member:
    member = repo_members.create_member(
        db, schemas.MemberCreate(first_name=first_name, last_name=last_name, email=email, goal=goal)
    )
    db.commit()
    return member
