import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.announcement import AnnouncementCategory, AnnouncementStatus
from app.models.complaint import Priority


class AnnouncementRequest(BaseModel):
    title: str = Field(min_length=3, max_length=255)
    content: str = Field(min_length=10)
    category: AnnouncementCategory = AnnouncementCategory.INFO
    priority: Priority = Priority.NORMAL
    scheduled_at: datetime | None = None
    draft: bool = False


class AnnouncementResponse(BaseModel):
    id: uuid.UUID
    title: str
    content: str
    category: AnnouncementCategory
    priority: Priority
    status: AnnouncementStatus
    author_id: uuid.UUID
    author_name: str | None = None
    scheduled_at: datetime | None
    published_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
