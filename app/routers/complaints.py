"""
complaints.py

민원(Complaint) API 모음.

주민은 민원을 접수하고 본인 민원의 처리 상황을 확인하며,
처리 완료(resolved)된 민원에 만족도를 평가한다.
관리자는 전체 민원을 조회하고 상태/답변/담당자를 변경한다.

주요 기능:
- 민원 목록 조회 (warga는 본인 민원만)
- 민원 접수 (이미지 첨부 최대 3개)
- 민원 단건 조회
- 민원 상태 변경 (admin / super_admin)
- 민원 만족도 평가 (접수자 본인)

설계 원칙:
- 권한 검증은 의존성(get_current_user / get_current_admin)에서 먼저 수행
- 상태 전이 / 평가 규칙은 service 계층(app.services.complaints)에 위임
- 조건 불충족(본인 아님, 상태 불일치)은 존재하지 않는 민원과 동일하게 404

관련 파일:
- app.services.complaints  : 상태 전이 / 평가 규칙
- app.services.storage     : 첨부 파일 저장
- app.schemas.complaint    : 요청/응답 스키마

"""

import uuid
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_user, get_current_admin
from app.models.complaint import ComplaintStatus, Priority
from app.models.user import User
from app.schemas.complaint import ComplaintCreate, ComplaintResponse, RateRequest, StatusUpdateRequest
from app.services import complaints as complaint_service
from app.services.query import clamp_page, paginate
from app.services.storage import delete_files, save_uploads

router = APIRouter(prefix="/complaints", tags=["complaints"])


"""
민원 목록 조회 API

- warga: 본인이 접수한 민원만
- 그 외 권한: 전체 민원
- status / category 필터, 우선순위 -> 최신순 정렬, 페이지네이션

"""
@router.get("")
def list_complaints(
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    status_filter: ComplaintStatus | None = Query(default=None, alias="status"),
    category: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    page, limit = clamp_page(page, limit)
    stmt = complaint_service.list_complaints_stmt(current_user, status=status_filter, category=category)
    rows, pagination = paginate(db, stmt, page, limit)
    return {
        "complaints": [ComplaintResponse.model_validate(c) for c in rows],
        "pagination": pagination,
    }


"""
민원 접수 API

- multipart/form-data (이미지 파일 필드명: complaints)
- 제목 5자 이상, 내용 10자 이상, 분류 필수 (앞뒤 공백 제거 후 기준)
- 첨부 파일은 DB 저장 전에 디스크에 먼저 저장하고,
  DB 저장이 실패하면 저장한 파일을 지움

"""
@router.post("", status_code=status.HTTP_201_CREATED)
def create_complaint(
    title: str = Form(...),
    description: str = Form(...),
    category: str = Form(...),
    location: str | None = Form(default=None),
    priority: Priority = Form(default=Priority.NORMAL),
    complaints: list[UploadFile] | None = File(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        form = ComplaintCreate(
            title=title, description=description, category=category, location=location, priority=priority
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    uploads = [f for f in (complaints or []) if f.filename]
    if len(uploads) > complaint_service.MAX_ATTACHMENTS:
        raise HTTPException(
            status_code=400,
            detail=f"At most {complaint_service.MAX_ATTACHMENTS} attachments allowed",
        )

    try:
        stored = save_uploads(uploads, "complaints")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        complaint = complaint_service.create_complaint(
            db,
            owner=current_user,
            title=form.title,
            description=form.description,
            category=form.category,
            location=form.location,
            priority=form.priority,
            attachments=[s.as_attachment() for s in stored],
        )
        db.commit()
        db.refresh(complaint)
    except Exception as e:
        db.rollback()
        delete_files(s.path for s in stored)
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {
        "message": "Complaint submitted successfully",
        "complaint": ComplaintResponse.model_validate(complaint),
    }


# 민원 단건 조회 (warga는 본인 민원만)
@router.get("/{complaint_id}")
def get_complaint(
    complaint_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    complaint = complaint_service.get_complaint_for(db, complaint_id, current_user)
    if not complaint:
        raise HTTPException(status_code=404, detail="Complaint not found")
    return {"complaint": ComplaintResponse.model_validate(complaint)}


"""
민원 상태 변경 API (admin / super_admin)

- 목표 상태: in_progress / resolved / rejected
- 종료 상태(resolved / rejected)인 민원은 변경 불가 -> 404
- response(답변), assigned_to(담당자)는 값이 있을 때만 변경

"""
@router.patch("/{complaint_id}/status")
def update_complaint_status(
    complaint_id: uuid.UUID,
    data: StatusUpdateRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    try:
        target = ComplaintStatus(data.status)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid status")

    try:
        complaint = complaint_service.update_status(
            db,
            complaint_id,
            status=target,
            response=data.response,
            assigned_to=data.assigned_to,
        )
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))

    if not complaint:
        db.rollback()
        raise HTTPException(status_code=404, detail="Complaint not found or cannot be updated")

    try:
        db.commit()
        db.refresh(complaint)
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {
        "message": "Complaint status updated successfully",
        "complaint": ComplaintResponse.model_validate(complaint),
    }


"""
민원 만족도 평가 API (접수자 본인)

- resolved 상태이고 아직 평가하지 않은 본인 민원만 가능
- 조건 불충족 시 404 (없음 / 본인 아님 / 상태 불일치 / 이미 평가 구분 없음)

"""
@router.patch("/{complaint_id}/rate")
def rate_complaint(
    complaint_id: uuid.UUID,
    data: RateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        complaint = complaint_service.rate_complaint(
            db,
            complaint_id,
            owner=current_user,
            rating=data.rating,
            feedback=data.feedback,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not complaint:
        db.rollback()
        raise HTTPException(status_code=404, detail="Complaint not found or cannot be rated")

    try:
        db.commit()
        db.refresh(complaint)
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {
        "message": "Rating submitted successfully",
        "complaint": ComplaintResponse.model_validate(complaint),
    }
