import uuid
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.models.user import Role


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=64)
    full_name: str = Field(min_length=2, max_length=255)
    phone: str | None = Field(default=None, max_length=20)
    address: str | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

class RefreshRequest(BaseModel):
    refresh_token: str | None = None

# 요청에 붙는 인증 정보 (GET /auth/me 응답)
class CurrentUser(BaseModel):
    id: uuid.UUID
    email: EmailStr
    role: Role
    full_name: str

    model_config = ConfigDict(from_attributes=True)

class AuthResponse(BaseModel):
    message: str
    user: CurrentUser
    access_token: str
    refresh_token: str
    token_type: str = "bearer"

class AccessTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
