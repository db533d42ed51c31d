import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.complaint import ComplaintStatus, Priority


class Attachment(BaseModel):
    filename: str
    original_name: str
    path: str
    size: int


# multipart 폼 값을 앞뒤 공백 제거 후 검증 (공백만 있는 값은 누락과 동일)
class ComplaintCreate(BaseModel):
    title: str = Field(min_length=5, max_length=255)
    description: str = Field(min_length=10)
    category: str = Field(min_length=1, max_length=100)
    location: str | None = None
    priority: Priority = Priority.NORMAL

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("location")
    @classmethod
    def blank_location(cls, v: str | None) -> str | None:
        return v or None


class ComplaintResponse(BaseModel):
    id: uuid.UUID
    title: str
    description: str
    category: str
    status: ComplaintStatus
    priority: Priority
    user_id: uuid.UUID
    user_name: str | None = None
    assigned_to: uuid.UUID | None
    assigned_name: str | None = None
    location: str | None
    attachments: list[Attachment]
    response: str | None
    rating: int | None
    feedback: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# status 값 검증은 라우터/서비스에서 (잘못된 값 -> "Invalid status")
class StatusUpdateRequest(BaseModel):
    status: str
    response: str | None = None
    assigned_to: uuid.UUID | None = None


class RateRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    feedback: str | None = Field(default=None, max_length=2000)
