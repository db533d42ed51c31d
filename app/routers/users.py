"""
users.py

사용자 관리 / 본인 정보 수정 API 모음.

주요 기능:
- 전체 사용자 목록 조회 (admin / super_admin, search / role 필터)
- 본인 프로필 수정 (이름, 전화번호, 주소)
- 본인 비밀번호 변경
- 사용자 권한(role) 변경 (super_admin)
- 사용자 활성/비활성 전환 (super_admin)

설계 원칙:
- 응답에는 password_hash를 절대 포함하지 않음 (UserResponse)
- super_admin 본인의 권한 변경 / 비활성화는 금지
  (마지막 super_admin 이 스스로 잠기는 상황 방지)
- 비활성화된 사용자는 다음 요청부터 인증 게이트에서 401

관련 파일:
- app.core.deps      : get_current_user / get_current_admin / get_current_superadmin
- app.schemas.user   : 요청/응답 스키마

"""

import logging
import uuid
from fastapi import APIRouter, Depends, HTTPException, Query, status

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_user, get_current_admin, get_current_superadmin
from app.core.security import get_password_hash, verify_password
from app.models.user import Role, User
from app.schemas.user import ActiveUpdate, ChangePasswordRequest, ProfileUpdate, RoleUpdate, UserResponse
from app.services.query import apply_filters, clamp_page, contains_any, equals, paginate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

USERS_PAGE_SIZE = 20


@router.get("")
def list_users(
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    search: str | None = None,
    role: Role | None = None,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    page, limit = clamp_page(page, limit, default_limit=USERS_PAGE_SIZE)
    stmt = apply_filters(
        select(User),
        contains_any([User.full_name, User.email], search),
        equals(User.role, role),
    ).order_by(desc(User.created_at))

    rows, pagination = paginate(db, stmt, page, limit)
    return {
        "users": [UserResponse.model_validate(u) for u in rows],
        "pagination": pagination,
    }


@router.put("/profile")
def update_profile(
    data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    current_user.full_name = data.full_name
    current_user.phone = data.phone
    current_user.address = data.address

    try:
        db.commit()
        db.refresh(current_user)
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {"message": "Profile updated successfully", "user": UserResponse.model_validate(current_user)}


"""
비밀번호 변경 API

- 현재 비밀번호 확인 (틀리면 400)
- 새 비밀번호는 현재 비밀번호와 달라야 함

"""
@router.put("/password")
def change_password(
    data: ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not verify_password(data.current_password, current_user.password_hash):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect")

    if verify_password(data.new_password, current_user.password_hash):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="New password must be different")

    try:
        current_user.password_hash = get_password_hash(data.new_password)
        db.commit()
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {"message": "Password changed successfully"}


@router.patch("/{user_id}/role")
def set_role(
    user_id: uuid.UUID,
    data: RoleUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_superadmin),
):
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    # 자기 자신 권한 변경 금지
    if user.id == current_admin.id:
        raise HTTPException(status_code=400, detail="Cannot change your own role")

    if user.role == data.role:
        raise HTTPException(status_code=400, detail=f"User already {user.role.value}")

    before = user.role
    try:
        user.role = data.role
        db.commit()
        db.refresh(user)
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    logger.info("User %s role changed %s -> %s by %s", user.id, before.value, user.role.value, current_admin.id)
    return {
        "message": "User role updated successfully",
        "user": {"id": str(user.id), "full_name": user.full_name, "role": user.role.value},
    }


@router.patch("/{user_id}/active")
def set_active(
    user_id: uuid.UUID,
    data: ActiveUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_superadmin),
):
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    if user.id == current_admin.id and not data.is_active:
        raise HTTPException(status_code=400, detail="Cannot deactivate yourself")

    try:
        user.is_active = data.is_active
        db.commit()
        db.refresh(user)
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    logger.info("User %s is_active=%s set by %s", user.id, user.is_active, current_admin.id)
    return {
        "message": "User activated" if user.is_active else "User deactivated",
        "user": {"id": str(user.id), "full_name": user.full_name, "is_active": user.is_active},
    }
