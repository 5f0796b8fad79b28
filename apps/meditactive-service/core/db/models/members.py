from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from .base import Base, now_utc


class Member(Base):
    __tablename__ = 'members'
    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    # Legacy free-text goal, independent of the member_goals relation
    goal = Column(String(100), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)


class MemberGoal(Base):
    __tablename__ = 'member_goals'
    member_id = Column(Integer, ForeignKey('members.id'), primary_key=True)
    goal_id = Column(Integer, ForeignKey('goals.id'), primary_key=True)

    __table_args__ = (
        Index('idx_member_goals_goal_id', 'goal_id'),
    )
