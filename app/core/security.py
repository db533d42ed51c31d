"""
security.py

비밀번호 해싱 및 JWT 토큰 생성/검증을 담당하는 보안 유틸리티 모음.

이 파일은 인증(auth) 로직에서 사용하는
저수준(low-level) 보안 기능만을 제공하며,
라우터나 비즈니스 로직은 포함하지 않는다.

주요 기능:
- 비밀번호 해싱 및 검증 (bcrypt)
- JWT Access Token 생성 (user id + email + role)
- JWT Refresh Token 생성 (user id 만)
- 토큰 종류별(access / refresh) 디코딩 및 검증

설계 원칙:
- Access Token과 Refresh Token은 서로 다른 시크릿으로 서명
  (refresh 시크릿이 유출돼도 access 토큰은 위조 불가)
- Refresh Token은 리소스 접근 권한이 없고, access 재발급에만 사용
- 토큰 생성 로직을 공통 함수로 통합하여 중복 제거
- 서버에 토큰을 저장하지 않음 (stateless, 별도 폐기 목록 없음)
- 시간 기반(exp) 만료는 UTC 기준으로 처리

관련 파일:
- app.core.config        : JWT 시크릿 키 및 만료 설정
- app.core.deps          : 토큰을 실제로 검증하는 인증 의존성
- app.routers.auth       : 회원가입 / 로그인 / 재발급 API

"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Optional

from jose import jwt, JWTError
from passlib.context import CryptContext

from app.core.config import settings
from app.models.user import User


# bcrypt 기반 비밀번호 해싱 컨텍스트
# deprecated="auto"로 향후 알고리즘 교체 가능하도록 설정

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


def _secret_for(kind: TokenKind) -> str:
    if kind is TokenKind.ACCESS:
        return settings.SECRET_KEY
    return settings.REFRESH_SECRET_KEY


"""
비밀번호 해싱 함수

- 평문 비밀번호를 bcrypt 해시로 변환
- DB에는 해시 값만 저장

"""

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


"""
비밀번호 검증 함수

- 사용자가 입력한 평문 비밀번호와
  DB에 저장된 해시 값을 비교
- 해시 형식이 깨져 있으면 예외 대신 False

"""

def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


"""
JWT 토큰 생성 내부 공통 함수

- subject(sub): 사용자 식별자(user_id)
- type: access 또는 refresh (다른 종류 토큰의 오용 방지)
- exp: 만료 시각 (UTC timestamp)
- extra: access 토큰의 email / role 등 추가 클레임

"""

def _create_token(*, subject: str, kind: TokenKind, expires_delta: timedelta,
                  extra: Optional[dict] = None) -> str:
    expire = datetime.now(timezone.utc) + expires_delta
    payload = {
        "sub": subject,
        "type": kind.value,
        "exp": int(expire.timestamp()),
    }
    if extra:
        payload.update(extra)
    return jwt.encode(payload, _secret_for(kind), algorithm=settings.ALGORITHM)


"""
Access Token 생성 함수

- API 요청 인증에 사용 (Authorization: Bearer)
- 짧은 만료 시간 (기본 1시간)
- 클라이언트 표시용으로 email / role 포함
  (권한 판단은 항상 DB의 최신 role 기준)

"""

def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    return _create_token(
        subject=str(user.id),
        kind=TokenKind.ACCESS,
        expires_delta=expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        extra={"email": user.email, "role": user.role.value},
    )


"""
Refresh Token 생성 함수

- Access Token 재발급에만 사용
- 긴 만료 시간 (기본 7일)
- subject 외의 클레임은 담지 않음

"""

def create_refresh_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    return _create_token(
        subject=str(user.id),
        kind=TokenKind.REFRESH,
        expires_delta=expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )


"""
토큰 디코딩 및 검증 함수

- kind에 맞는 시크릿으로 서명 검증
- 만료 시 ExpiredSignatureError, 그 외 위조/형식 오류는 JWTError
- type 클레임이 kind와 다르면 JWTError
- subject(sub)가 없으면 JWTError

"""

def decode_token(token: str, kind: TokenKind) -> dict[str, Any]:
    payload = jwt.decode(token, _secret_for(kind), algorithms=[settings.ALGORITHM])
    if payload.get("type") != kind.value:
        raise JWTError(f"Not an {kind.value} token")
    if not payload.get("sub"):
        raise JWTError("Missing subject")
    return payload
