from sqlalchemy import Column, Integer, String, Text, CheckConstraint
from .base import Base


class Goal(Base):
    __tablename__ = 'goals'
    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(100), nullable=False, unique=True)


class SessionType(Base):
    __tablename__ = 'session_types'
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True)
    duration_minutes = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint('duration_minutes > 0', name='ck_session_types_duration_positive'),
    )
