from pydantic import BaseModel, ConfigDict


class Goal(BaseModel):
    id: int
    title: str
    model_config = ConfigDict(from_attributes=True)


class SessionType(BaseModel):
    id: int
    name: str
    duration_minutes: int
    description: str | None = None
    model_config = ConfigDict(from_attributes=True)
