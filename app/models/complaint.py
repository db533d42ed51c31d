"""

complaint.py

민원(Complaint) 모델 정의 파일.

주민이 접수한 민원과 그 처리 상태(status), 담당자 배정,
행정 답변(response), 처리 후 주민 만족도 평가(rating/feedback)를 관리한다.

상태 흐름:
    submitted -> in_progress -> resolved | rejected

설계 원칙:
- user_id(접수자)는 생성 후 변경하지 않음
- rating 은 resolved 상태에서 접수자 본인만, 한 번만 입력
- 첨부 파일은 DB에 메타데이터만 저장 (실제 파일은 UPLOAD_DIR)

"""

import uuid
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, JSON, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, enum_column, utcnow

if TYPE_CHECKING:
    from app.models.user import User


class ComplaintStatus(str, Enum):
    SUBMITTED = "submitted"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    REJECTED = "rejected"


class Priority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class Complaint(Base):
    __tablename__ = "complaints"
    __table_args__ = (
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="ck_complaints_rating_range"),
        Index("ix_complaints_user_id", "user_id"),
        Index("ix_complaints_status", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)

    status: Mapped[ComplaintStatus] = mapped_column(
        enum_column(ComplaintStatus, "complaint_status"), nullable=False, default=ComplaintStatus.SUBMITTED
    )
    priority: Mapped[Priority] = mapped_column(enum_column(Priority, "priority"), nullable=False, default=Priority.NORMAL)

    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    assigned_to: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id"), nullable=True)

    location: Mapped[str | None] = mapped_column(Text, nullable=True)
    # [{filename, original_name, path, size}, ...]
    attachments: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    response: Mapped[str | None] = mapped_column(Text, nullable=True)
    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # 목록 응답의 접수자/담당자 이름
    owner: Mapped["User"] = relationship(foreign_keys=[user_id], lazy="selectin")
    assignee: Mapped[Optional["User"]] = relationship(foreign_keys=[assigned_to], lazy="selectin")

    @property
    def user_name(self) -> str | None:
        return self.owner.full_name if self.owner else None

    @property
    def assigned_name(self) -> str | None:
        return self.assignee.full_name if self.assignee else None
