import uuid

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ContactRequest(BaseModel):
    name: str = Field(min_length=2, max_length=255)
    position: str = Field(min_length=1, max_length=255)
    department: str = Field(min_length=1, max_length=255)
    phone: str | None = Field(default=None, max_length=30)
    email: EmailStr | None = None
    whatsapp: str | None = Field(default=None, max_length=30)
    office_hours: str | None = Field(default=None, max_length=255)
    photo: str | None = Field(default=None, max_length=500)
    is_public: bool = True


class ContactResponse(BaseModel):
    id: uuid.UUID
    name: str
    position: str
    department: str
    phone: str | None
    email: str | None
    whatsapp: str | None
    office_hours: str | None
    photo: str | None
    is_public: bool

    model_config = ConfigDict(from_attributes=True)
