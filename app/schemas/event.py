import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.db.base import as_utc


class EventRequest(BaseModel):
    title: str = Field(min_length=3, max_length=255)
    description: str | None = None
    start_date: datetime
    end_date: datetime | None = None
    location: str | None = None
    organizer: str | None = Field(default=None, max_length=255)
    category: str = Field(min_length=1, max_length=100)
    max_participants: int | None = Field(default=None, ge=1)
    is_public: bool = True

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date is not None and as_utc(self.end_date) < as_utc(self.start_date):
            raise ValueError("end_date must not be before start_date")
        return self


class EventResponse(BaseModel):
    id: uuid.UUID
    title: str
    description: str | None
    start_date: datetime
    end_date: datetime | None
    location: str | None
    organizer: str | None
    category: str
    max_participants: int | None
    current_participants: int
    is_public: bool
    created_by: uuid.UUID
    creator_name: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
