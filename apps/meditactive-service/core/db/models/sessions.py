from sqlalchemy import Column, Integer, DateTime, ForeignKey, Index, CheckConstraint
from .base import Base


class ScheduledSession(Base):
    __tablename__ = 'sessions'
    id = Column(Integer, primary_key=True, autoincrement=True)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    session_type_id = Column(Integer, ForeignKey('session_types.id'), nullable=False)

    __table_args__ = (
        Index('idx_sessions_session_type_id', 'session_type_id'),
        CheckConstraint('end_date > start_date', name='ck_sessions_end_after_start'),
    )


class MemberSession(Base):
    __tablename__ = 'member_sessions'
    member_id = Column(Integer, ForeignKey('members.id'), primary_key=True)
    session_id = Column(Integer, ForeignKey('sessions.id'), primary_key=True)

    __table_args__ = (
        Index('idx_member_sessions_session_id', 'session_id'),
    )
