from datetime import datetime, timezone
from typing import Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ScheduledSession(BaseModel):
    id: int
    start_date: datetime
    end_date: datetime
    session_type_id: int
    model_config = ConfigDict(from_attributes=True)

    @field_validator('start_date', 'end_date')
    @classmethod
    def _normalize_tz(cls, value: datetime) -> datetime:
        return _as_utc(value)


class SessionSpec(BaseModel):
    """Explicit session request: a session-type reference plus optional dates.

    Dates are kept as given (``datetime`` or string); unparseable values fall
    back to computed defaults when the session is materialized.
    """
    session_type_id: int | str = Field(validation_alias=AliasChoices('session_type_id', 'sessionTypeId'))
    start_date: datetime | str | None = Field(default=None, validation_alias=AliasChoices('start_date', 'startDate'))
    end_date: datetime | str | None = Field(default=None, validation_alias=AliasChoices('end_date', 'endDate'))


# A bare session-type reference (id or name) or an explicit spec
SessionSpecInput = Union[int, str, SessionSpec]


def coerce_session_spec(item: SessionSpecInput) -> SessionSpec:
    if isinstance(item, SessionSpec):
        return item
    return SessionSpec(session_type_id=item)
