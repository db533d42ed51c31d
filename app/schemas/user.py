from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.models.user import Role


# 🔹 super_admin role 변경 요청용
class RoleUpdate(BaseModel):
    role: Role


# 🔹 super_admin 계정 활성/비활성 요청용
class ActiveUpdate(BaseModel):
    is_active: bool


class ProfileUpdate(BaseModel):
    full_name: str = Field(min_length=2, max_length=255)
    phone: str | None = Field(default=None, max_length=20)
    address: str | None = None


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=64)


# 🔹 유저 응답용 (password_hash 제외)
class UserResponse(BaseModel):
    id: UUID
    email: EmailStr
    full_name: str
    role: Role
    is_active: bool
    phone: str | None
    address: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)  # SQLAlchemy → Pydantic 변환
