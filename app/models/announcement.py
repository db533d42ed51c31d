import uuid
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, enum_column, utcnow
from app.models.complaint import Priority

if TYPE_CHECKING:
    from app.models.user import User


class AnnouncementCategory(str, Enum):
    URGENT = "urgent"
    INFO = "info"
    EVENT = "event"


class AnnouncementStatus(str, Enum):
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    PUBLISHED = "published"


class Announcement(Base):
    """마을 공지사항.

    공개 조건: status == published 이고 (scheduled_at 없음 또는 이미 지남)
    """

    __tablename__ = "announcements"
    __table_args__ = (
        Index("ix_announcements_status_scheduled_at", "status", "scheduled_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[AnnouncementCategory] = mapped_column(
        enum_column(AnnouncementCategory, "announcement_category"), nullable=False, default=AnnouncementCategory.INFO
    )
    priority: Mapped[Priority] = mapped_column(enum_column(Priority, "priority"), nullable=False, default=Priority.NORMAL)
    status: Mapped[AnnouncementStatus] = mapped_column(
        enum_column(AnnouncementStatus, "announcement_status"), nullable=False, default=AnnouncementStatus.DRAFT
    )

    author_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)

    scheduled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    author: Mapped["User"] = relationship(foreign_keys=[author_id], lazy="selectin")

    @property
    def author_name(self) -> str | None:
        return self.author.full_name if self.author else None
