"""
services/announcements.py

공지사항(Announcement) 공개 규칙 모음.

- 공개 조건: status=published AND (scheduled_at 없음 OR scheduled_at <= 현재)
- 생성/수정 시 상태 결정:
    draft 요청           -> draft
    미래 scheduled_at    -> scheduled
    그 외                -> published (published_at 최초 1회 기록)
- 예약 시간이 지난 scheduled 공지는 publish_due_announcements 로 published 전환

"""

import logging
from datetime import datetime

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session

from app.db.base import as_utc, utcnow
from app.models.announcement import Announcement, AnnouncementStatus

logger = logging.getLogger(__name__)


def publicly_visible(now: datetime | None = None):
    now = now or utcnow()
    return (
        (Announcement.status == AnnouncementStatus.PUBLISHED)
        & or_(Announcement.scheduled_at.is_(None), Announcement.scheduled_at <= now)
    )


def resolve_status(scheduled_at: datetime | None, draft: bool, now: datetime | None = None) -> AnnouncementStatus:
    if draft:
        return AnnouncementStatus.DRAFT
    now = now or utcnow()
    scheduled_at = as_utc(scheduled_at)
    if scheduled_at is not None and scheduled_at > now:
        return AnnouncementStatus.SCHEDULED
    return AnnouncementStatus.PUBLISHED


def apply_status(announcement: Announcement, *, scheduled_at: datetime | None, draft: bool) -> None:
    now = utcnow()
    announcement.scheduled_at = as_utc(scheduled_at)
    announcement.status = resolve_status(scheduled_at, draft, now)
    if announcement.status is AnnouncementStatus.PUBLISHED and announcement.published_at is None:
        announcement.published_at = now


"""
예약 공지 게시 처리

- scheduled 상태이고 예약 시간이 지난 공지를 published 로 전환
- 전환된 개수 반환
- db.commit()은 호출 측에서 수행

"""

def publish_due_announcements(db: Session, now: datetime | None = None) -> int:
    now = now or utcnow()
    result = db.execute(
        update(Announcement)
        .where(
            Announcement.status == AnnouncementStatus.SCHEDULED,
            Announcement.scheduled_at <= now,
        )
        .values(status=AnnouncementStatus.PUBLISHED, published_at=Announcement.scheduled_at, updated_at=now)
        .execution_options(synchronize_session=False)
    )
    count = result.rowcount or 0
    if count:
        logger.info("Published %d scheduled announcement(s)", count)
    return count


def get_public_announcement(db: Session, announcement_id) -> Announcement | None:
    return db.scalar(
        select(Announcement).where(Announcement.id == announcement_id, publicly_visible())
    )
