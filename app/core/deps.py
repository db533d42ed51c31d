from typing import Generator
import logging
import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session
from sqlalchemy import select

from app.core.security import TokenKind, decode_token
from app.db.session import SessionLocal
from app.models.user import ADMIN_ROLES, Role, User

logger = logging.getLogger(__name__)

# Swagger Authorize에서 "Bearer 토큰" 입력받는 스키마
bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    cred: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if cred is None or not cred.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # 서명/만료/토큰 종류 오류는 403
    try:
        payload = decode_token(cred.credentials, TokenKind.ACCESS)
        user_id = uuid.UUID(payload["sub"])
    except (JWTError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid token",
        )

    # 토큰이 유효해도 계정이 없거나 비활성화되었으면 401
    user = db.scalar(select(User).where(User.id == user_id))
    if not user or not user.is_active:
        logger.info("Rejected token for missing or inactive user %s", user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


# 허용된 role 집합에 속하는지만 판단 (인증은 get_current_user가 먼저 수행)
def require_roles(*roles: Role):
    allowed = frozenset(roles)

    def _checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user is None or current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user
    return _checker

get_current_admin = require_roles(*ADMIN_ROLES)
get_current_superadmin = require_roles(Role.SUPER_ADMIN)
