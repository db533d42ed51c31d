"""
services/complaints.py

민원(Complaint) 처리 흐름의 비즈니스 로직 모음.

이 파일은 민원의 접수, 조회 범위, 상태 전이, 만족도 평가 규칙을 담당한다.
라우터는 권한(Role Gate) 확인 후 이 파일의 함수를 호출하고
결과에 따라 응답/에러만 처리한다.

상태 전이 규칙:
- 접수(create)             : 로그인한 모든 사용자, status=submitted, 접수자=호출자
- submitted/in_progress -> in_progress | resolved | rejected
                           : admin / super_admin 만 (라우터에서 검증)
- resolved -> 평가(rate)    : 접수자 본인만, rating 미입력 상태에서 한 번만

설계 원칙:
- HTTP / FastAPI 의존성 없음
- 상태 전이와 평가는 "조건부 UPDATE 한 번"으로 처리
  (읽고 나서 쓰는 두 단계가 아니므로 동시 요청에서도 중복 평가 불가)
- 조건 불충족(없음 / 본인 아님 / 상태 불일치)은 모두 None 반환
  -> 라우터에서 404로 통일

관련 파일:
- app.models.complaint    : Complaint / ComplaintStatus / Priority 모델
- app.routers.complaints  : 민원 API
- app.services.query      : 목록 필터 / 페이지네이션

"""

import logging
import uuid

from sqlalchemy import desc, select, update
from sqlalchemy.orm import Session

from app.db.base import utcnow
from app.models.complaint import Complaint, ComplaintStatus, Priority
from app.models.user import Role, STAFF_ROLES, User
from app.services.query import apply_filters, equals, priority_rank

logger = logging.getLogger(__name__)

MAX_ATTACHMENTS = 3

# 전이 가능한 현재 상태 / 목표 상태
OPEN_STATUSES = (ComplaintStatus.SUBMITTED, ComplaintStatus.IN_PROGRESS)
TARGET_STATUSES = frozenset({ComplaintStatus.IN_PROGRESS, ComplaintStatus.RESOLVED, ComplaintStatus.REJECTED})

PRIORITY_RANK = priority_rank(Complaint.priority)


"""
전체 민원 조회 가능 여부

- WARGA      : 본인 민원만
- 그 외 권한 : 전체 민원

"""

def can_view_all_complaints(role: Role) -> bool:
    return role is not Role.WARGA


"""
민원 목록 조회용 SELECT 생성

- 권한에 따라 조회 범위 제한
- status / category 필터 (값이 있을 때만)
- 우선순위 높은 순 -> 최신 접수 순 정렬

"""

def list_complaints_stmt(
    user: User,
    *,
    status: ComplaintStatus | None = None,
    category: str | None = None,
):
    stmt = select(Complaint)
    owner_clause = None if can_view_all_complaints(user.role) else Complaint.user_id == user.id
    stmt = apply_filters(
        stmt,
        owner_clause,
        equals(Complaint.status, status),
        equals(Complaint.category, category),
    )
    return stmt.order_by(desc(PRIORITY_RANK), desc(Complaint.created_at))


"""
민원 단건 조회

- WARGA는 본인 민원이 아니면 None (존재 여부를 노출하지 않음)

"""

def get_complaint_for(db: Session, complaint_id: uuid.UUID, user: User) -> Complaint | None:
    stmt = select(Complaint).where(Complaint.id == complaint_id)
    if not can_view_all_complaints(user.role):
        stmt = stmt.where(Complaint.user_id == user.id)
    return db.scalar(stmt)


"""
민원 접수

- attachments: 이미 저장된 첨부 파일 메타데이터 목록
- 첨부는 최대 3개
- db.commit()은 호출 측(라우터)에서 수행

"""

def create_complaint(
    db: Session,
    *,
    owner: User,
    title: str,
    description: str,
    category: str,
    location: str | None = None,
    priority: Priority = Priority.NORMAL,
    attachments: list[dict] | None = None,
) -> Complaint:
    attachments = attachments or []
    if len(attachments) > MAX_ATTACHMENTS:
        raise ValueError(f"At most {MAX_ATTACHMENTS} attachments allowed")

    complaint = Complaint(
        title=title,
        description=description,
        category=category,
        location=location,
        priority=priority,
        status=ComplaintStatus.SUBMITTED,
        user_id=owner.id,
        attachments=attachments,
    )
    db.add(complaint)
    db.flush()
    logger.info("Complaint %s submitted by %s", complaint.id, owner.id)
    return complaint


"""
담당자 검증

- 존재하고, 활성 상태이고, 행정 권한(operator 이상)인 사용자만 배정 가능

"""

def validate_assignee(db: Session, assignee_id: uuid.UUID) -> User:
    assignee = db.scalar(select(User).where(User.id == assignee_id))
    if not assignee or not assignee.is_active or assignee.role not in STAFF_ROLES:
        raise ValueError("Invalid assignee")
    return assignee


"""
민원 상태 변경

- 목표 상태는 in_progress / resolved / rejected 중 하나 (아니면 ValueError)
- 현재 상태가 submitted / in_progress 인 경우에만 변경 (종료 상태에서는 변경 불가)
- response / assigned_to 는 값이 주어진 경우에만 갱신
- 조건에 맞는 row가 없으면 None

"""

def update_status(
    db: Session,
    complaint_id: uuid.UUID,
    *,
    status: ComplaintStatus,
    response: str | None = None,
    assigned_to: uuid.UUID | None = None,
) -> Complaint | None:
    if status not in TARGET_STATUSES:
        raise ValueError("Invalid status")

    if assigned_to is not None:
        validate_assignee(db, assigned_to)

    values: dict = {"status": status, "updated_at": utcnow()}
    if response is not None:
        values["response"] = response
    if assigned_to is not None:
        values["assigned_to"] = assigned_to

    result = db.execute(
        update(Complaint)
        .where(Complaint.id == complaint_id, Complaint.status.in_(OPEN_STATUSES))
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        return None

    logger.info("Complaint %s moved to %s", complaint_id, status.value)
    return _reload(db, complaint_id)


"""
민원 만족도 평가

- 조건: 접수자 본인 AND status=resolved AND rating 미입력
- 조건 확인과 저장을 UPDATE 한 번으로 처리
- rating / feedback 은 항상 함께 저장 (부분 저장 없음)
- 조건 불충족 시 None

"""

def rate_complaint(
    db: Session,
    complaint_id: uuid.UUID,
    *,
    owner: User,
    rating: int,
    feedback: str | None = None,
) -> Complaint | None:
    if rating < 1 or rating > 5:
        raise ValueError("Rating must be between 1 and 5")

    result = db.execute(
        update(Complaint)
        .where(
            Complaint.id == complaint_id,
            Complaint.user_id == owner.id,
            Complaint.status == ComplaintStatus.RESOLVED,
            Complaint.rating.is_(None),
        )
        .values(rating=rating, feedback=feedback, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        return None

    logger.info("Complaint %s rated %s by owner", complaint_id, rating)
    return _reload(db, complaint_id)


def _reload(db: Session, complaint_id: uuid.UUID) -> Complaint | None:
    complaint = db.get(Complaint, complaint_id)
    if complaint is not None:
        db.refresh(complaint)
    return complaint
