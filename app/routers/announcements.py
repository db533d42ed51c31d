"""
announcements.py

공지사항(Announcement) API 모음.

주요 기능:
- 공개 공지 목록 / 단건 조회 (로그인 불필요)
- 관리자용 전체 공지 조회 (draft / scheduled 포함)
- 공지 작성 / 수정 / 삭제 (admin / super_admin)
- 예약 시간이 지난 공지 게시 처리

설계 원칙:
- 공개 API는 published 이면서 예약 시간이 지난 공지만 반환
- 상태(draft / scheduled / published) 결정은 service 계층에 위임

관련 파일:
- app.services.announcements : 공개 조건 / 상태 결정 / 예약 게시
- app.schemas.announcement   : 요청/응답 스키마

"""

import uuid
from fastapi import APIRouter, Depends, HTTPException, Query, status

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_admin
from app.models.announcement import Announcement, AnnouncementCategory, AnnouncementStatus
from app.models.user import User
from app.schemas.announcement import AnnouncementRequest, AnnouncementResponse
from app.services.announcements import (
    apply_status,
    get_public_announcement,
    publicly_visible,
    publish_due_announcements,
)
from app.services.query import apply_filters, clamp_page, contains_any, equals, paginate, priority_rank

router = APIRouter(prefix="/announcements", tags=["announcements"])

# 공개 공지 목록 (category / search 필터)
@router.get("")
def list_announcements(
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    category: AnnouncementCategory | None = None,
    search: str | None = None,
    db: Session = Depends(get_db),
):
    page, limit = clamp_page(page, limit)
    stmt = apply_filters(
        select(Announcement),
        publicly_visible(),
        equals(Announcement.category, category),
        contains_any([Announcement.title, Announcement.content], search),
    ).order_by(desc(priority_rank(Announcement.priority)), desc(Announcement.created_at))

    rows, pagination = paginate(db, stmt, page, limit)
    return {
        "announcements": [AnnouncementResponse.model_validate(a) for a in rows],
        "pagination": pagination,
    }

# 관리자용 전체 공지 목록 (status 필터)
@router.get("/all")
def list_all_announcements(
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    status_filter: AnnouncementStatus | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    page, limit = clamp_page(page, limit)
    stmt = apply_filters(
        select(Announcement),
        equals(Announcement.status, status_filter),
    ).order_by(desc(Announcement.created_at))

    rows, pagination = paginate(db, stmt, page, limit)
    return {
        "announcements": [AnnouncementResponse.model_validate(a) for a in rows],
        "pagination": pagination,
    }

# 예약 시간이 지난 scheduled 공지를 published 로 전환
@router.post("/publish-due")
def publish_due(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    try:
        count = publish_due_announcements(db)
        db.commit()
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")
    return {"message": "Scheduled announcements published", "published": count}


@router.get("/{announcement_id}")
def get_announcement(announcement_id: uuid.UUID, db: Session = Depends(get_db)):
    announcement = get_public_announcement(db, announcement_id)
    if not announcement:
        raise HTTPException(status_code=404, detail="Announcement not found")
    return {"announcement": AnnouncementResponse.model_validate(announcement)}


"""
공지 작성 API (admin / super_admin)

- draft=true 이면 draft
- scheduled_at 이 미래면 scheduled, 아니면 바로 published

"""
@router.post("", status_code=status.HTTP_201_CREATED)
def create_announcement(
    data: AnnouncementRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    announcement = Announcement(
        title=data.title,
        content=data.content,
        category=data.category,
        priority=data.priority,
        author_id=current_admin.id,
    )
    apply_status(announcement, scheduled_at=data.scheduled_at, draft=data.draft)

    try:
        db.add(announcement)
        db.commit()
        db.refresh(announcement)
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {
        "message": "Announcement created successfully",
        "announcement": AnnouncementResponse.model_validate(announcement),
    }


# 공지 수정 (상태는 작성 때와 같은 규칙으로 다시 결정)
@router.put("/{announcement_id}")
def update_announcement(
    announcement_id: uuid.UUID,
    data: AnnouncementRequest,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    announcement = db.get(Announcement, announcement_id)
    if not announcement:
        raise HTTPException(status_code=404, detail="Announcement not found")

    announcement.title = data.title
    announcement.content = data.content
    announcement.category = data.category
    announcement.priority = data.priority
    apply_status(announcement, scheduled_at=data.scheduled_at, draft=data.draft)

    try:
        db.commit()
        db.refresh(announcement)
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {
        "message": "Announcement updated successfully",
        "announcement": AnnouncementResponse.model_validate(announcement),
    }


@router.delete("/{announcement_id}")
def delete_announcement(
    announcement_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    announcement = db.get(Announcement, announcement_id)
    if not announcement:
        raise HTTPException(status_code=404, detail="Announcement not found")

    try:
        db.delete(announcement)
        db.commit()
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {"message": "Announcement deleted successfully"}
