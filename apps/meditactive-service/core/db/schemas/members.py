from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .catalog import Goal
from .sessions import ScheduledSession, SessionSpecInput


class MemberBase(BaseModel):
    first_name: str
    last_name: str
    email: str
    goal: str | None = None


class MemberCreate(MemberBase):
    pass


class MemberUpdate(BaseModel):
    """Sparse member update.

    Only fields the caller actually set are applied (``exclude_unset``), so an
    omitted field is left alone while ``goal=None`` clears the legacy goal.
    """
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    goal: str | None = None

    @model_validator(mode='after')
    def _required_fields_not_nulled(self):
        for name in ('first_name', 'last_name', 'email'):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be cleared")
        return self


class Member(MemberBase):
    id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
    model_config = ConfigDict(from_attributes=True)


class MemberAggregate(Member):
    goals: list[Goal] = Field(default_factory=list)
    sessions: list[ScheduledSession] = Field(default_factory=list)


class CreateMemberCommand(BaseModel):
    member: MemberCreate
    goal_refs: list[int | str] = Field(default_factory=list)
    session_specs: list[SessionSpecInput] = Field(default_factory=list)


class UpdateMemberCommand(BaseModel):
    """Update command; relation fields are replaced only when supplied.

    ``goal_refs=[]`` clears every goal link, while leaving ``goal_refs`` out
    (or passing None) keeps the existing links. Same for ``session_specs``.
    """
    fields: MemberUpdate = Field(default_factory=MemberUpdate)
    goal_refs: list[int | str] | None = None
    session_specs: list[SessionSpecInput] | None = None

    @property
    def replaces_goals(self) -> bool:
        return self.goal_refs is not None

    @property
    def replaces_sessions(self) -> bool:
        return self.session_specs is not None


class SkippedReference(BaseModel):
    kind: Literal['goal', 'session_type']
    ref: int | str
    reason: str = 'not_found'


class MemberSyncResult(BaseModel):
    member: MemberAggregate
    warnings: list[SkippedReference] = Field(default_factory=list)
