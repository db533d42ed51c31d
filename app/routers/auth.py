"""
auth.py

인증(Authentication) API 모음.

이 파일은 회원 가입, 로그인, 토큰 재발급, 본인 정보 조회와 같이
사용자 인증 흐름 전반을 담당한다.
JWT 기반 인증 방식을 사용하며, Access Token + Refresh Token 구조를 따른다.

주요 기능:
- 회원 가입 (기본 권한 warga) 및 즉시 토큰 발급
- 로그인 및 토큰 발급
- Refresh Token 기반 Access Token 재발급
- 현재 로그인 사용자 정보 조회

설계 원칙:
- Access Token은 Authorization Header로 전달
- Refresh Token은 요청 바디로 전달, access 재발급에만 사용
- 없는 이메일 / 틀린 비밀번호는 같은 메시지로 응답 (계정 존재 여부 노출 방지)
- 비밀번호는 해시만 저장하고 응답에 포함하지 않음

관련 파일:
- app.core.security        : 비밀번호 해시 / JWT 생성·검증
- app.core.deps            : 인증 의존성(get_current_user)
- app.models.user          : User / Role 모델
- app.schemas.auth         : 인증 관련 요청/응답

"""

import logging
import uuid
from jose import JWTError
from fastapi import APIRouter, Depends, HTTPException, status

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy import select

from app.core.deps import get_db, get_current_user
from app.core.security import (
    TokenKind,
    get_password_hash,
    verify_password,
    create_access_token,
    create_refresh_token,
    decode_token,
)

from app.models.user import User, Role
from app.schemas.auth import (
    RegisterRequest, LoginRequest, RefreshRequest,
    CurrentUser, AuthResponse, AccessTokenResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(user: User, message: str) -> AuthResponse:
    return AuthResponse(
        message=message,
        user=CurrentUser.model_validate(user),
        access_token=create_access_token(user),
        refresh_token=create_refresh_token(user),
    )

"""
회원 가입 API

- 이메일(소문자 정규화) 기준으로 신규 회원 가입
- 이미 등록된 이메일이면 가입 불가
- 가입 시 기본 권한은 WARGA
- 가입 즉시 access / refresh 토큰 발급

"""

@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
def register(data: RegisterRequest, db: Session = Depends(get_db)):

    exists = db.scalar(select(User.id).where(User.email == data.email))
    if exists:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )

    try:
        user = User(
            email=data.email,
            password_hash=get_password_hash(data.password),
            full_name=data.full_name,
            phone=data.phone,
            address=data.address,
            role=Role.WARGA,
            is_active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)

    # 동시에 같은 이메일로 가입한 경우 unique 제약에서 걸림
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Email already registered")
    except Exception as e:
        db.rollback()
        logger.exception("Registration failed")
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return _auth_response(user, "User registered successfully")


"""
로그인 API

- 이메일 / 비밀번호 인증
- 없는 이메일, 틀린 비밀번호 모두 "Invalid credentials"
- 비밀번호가 맞더라도 비활성 계정은 로그인 불가

"""

@router.post("/login", response_model=AuthResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):

    user = db.scalar(select(User).where(User.email == data.email))

    if not user or not verify_password(data.password, user.password_hash):
        logger.warning("Failed login attempt for %s", data.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account is deactivated")

    return _auth_response(user, "Login successful")

"""
Access Token 재발급 API

- 바디의 refresh_token 검증 (refresh 전용 시크릿)
- 토큰이 없으면 401, 위조/만료면 403
- 사용자가 없거나 비활성이면 401
- 새 access token 만 반환 (refresh token은 재발급하지 않음)

"""

@router.post("/refresh", response_model=AccessTokenResponse)
def refresh(data: RefreshRequest | None = None, db: Session = Depends(get_db)):
    # 바디 자체가 없어도 "토큰 없음"과 같은 401
    if data is None or not data.refresh_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Refresh token required")

    try:
        payload = decode_token(data.refresh_token, TokenKind.REFRESH)
        user_uuid = uuid.UUID(payload["sub"])
    except (JWTError, ValueError):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid refresh token")

    user = db.scalar(select(User).where(User.id == user_uuid))
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    return AccessTokenResponse(access_token=create_access_token(user))


# 현재 로그인 사용자 정보
@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    return {"user": CurrentUser.model_validate(current_user)}
