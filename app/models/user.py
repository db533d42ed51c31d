"""
user.py

사용자(User) 및 권한(Role) 모델 정의 파일.

이 파일은 주민(warga)과 마을 행정 담당자의 기본 정보와
권한(Role), 활성 상태(is_active), 인증 관련 정보를 관리한다.

모든 인증, 권한, 민원, 관리자 기능의 기준이 되는 핵심 모델이다.

"""

import uuid
import datetime
from enum import Enum

from sqlalchemy import String, Boolean, DateTime, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, enum_column, utcnow



"""
사용자 권한(Role) 정의

- WARGA        : 일반 주민 (가입 시 기본값, 최소 권한)
- OPERATOR     : 행정 실무자 (민원 담당자로 배정 가능)
- ADMIN        : 관리자 (콘텐츠 관리, 민원 처리)
- SUPER_ADMIN  : 최고 관리자 (권한 변경, 계정 활성/비활성)

"""

class Role(str, Enum):
    WARGA = "warga"
    OPERATOR = "operator"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


# 권한 집합 (Role Gate / 민원 담당자 검증에서 사용)
ADMIN_ROLES = frozenset({Role.ADMIN, Role.SUPER_ADMIN})
STAFF_ROLES = frozenset({Role.OPERATOR, Role.ADMIN, Role.SUPER_ADMIN})



"""
사용자(User) 모델

- email 은 고유 식별자 (소문자로 정규화하여 저장)
- password_hash 만 저장, 평문 비밀번호는 저장/반환하지 않음
- role을 통해 접근 권한 제어
- is_active=False 인 계정은 로그인/토큰 사용 불가 (Soft Delete 대용)

"""

class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Role] = mapped_column(enum_column(Role, "user_role"), nullable=False, default=Role.WARGA)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
