"""Session schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class SessionRename(BaseModel):
    """Rename a session."""

    name: str | None = None


class SessionResponse(BaseModel):
    """Session listing entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    created_at: datetime
