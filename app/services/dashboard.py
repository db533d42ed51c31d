"""
services/dashboard.py

관리자 대시보드 집계 쿼리 모음.

- collect_stats     : 주요 건수, 최근 민원 5건, 상태별 민원 수, 분류별 공지 수
- collect_analytics : 기간(7d / 30d / 90d) 내 일별 가입자 / 민원 수, 다운로드 상위 문서

NOTE:
- 일별 집계는 func.date(created_at) 로 그룹핑 (PostgreSQL / SQLite 모두 동작)
- 기간 값이 올바르지 않으면 7d 로 처리

"""

from datetime import datetime, time, timedelta

from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session

from app.db.base import utcnow
from app.models.announcement import Announcement, AnnouncementStatus
from app.models.complaint import Complaint
from app.models.document import Document
from app.models.event import Event
from app.models.user import User

RECENT_COMPLAINTS = 5
TOP_DOWNLOADS = 10

PERIOD_DAYS = {"7d": 7, "30d": 30, "90d": 90}
DEFAULT_PERIOD = "7d"


def _count(db: Session, model, *clauses) -> int:
    stmt = select(func.count()).select_from(model)
    if clauses:
        stmt = stmt.where(*clauses)
    return db.scalar(stmt) or 0


def _value(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def collect_stats(db: Session, now: datetime | None = None) -> dict:
    now = now or utcnow()
    today = datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)

    recent = db.execute(
        select(Complaint, User.full_name)
        .outerjoin(User, Complaint.user_id == User.id)
        .order_by(desc(Complaint.created_at))
        .limit(RECENT_COMPLAINTS)
    ).all()

    by_status = db.execute(
        select(Complaint.status, func.count()).group_by(Complaint.status)
    ).all()

    by_category = db.execute(
        select(Announcement.category, func.count())
        .where(Announcement.status == AnnouncementStatus.PUBLISHED)
        .group_by(Announcement.category)
    ).all()

    return {
        "users": _count(db, User, User.is_active.is_(True)),
        "announcements": _count(db, Announcement, Announcement.status == AnnouncementStatus.PUBLISHED),
        "complaints": _count(db, Complaint),
        "events": _count(db, Event, Event.start_date >= today),
        "documents": _count(db, Document, Document.is_public.is_(True)),
        "recent_complaints": [
            {
                "id": str(c.id),
                "title": c.title,
                "category": c.category,
                "status": c.status.value,
                "priority": c.priority.value,
                "user_name": name,
                "created_at": c.created_at.isoformat(),
            }
            for c, name in recent
        ],
        "complaints_by_status": [{"status": _value(s), "count": n} for s, n in by_status],
        "announcements_by_category": [{"category": _value(c), "count": n} for c, n in by_category],
    }


def _daily_counts(db: Session, column, since: datetime) -> list[dict]:
    day = func.date(column).label("date")
    rows = db.execute(
        select(day, func.count()).where(column >= since).group_by(day).order_by(day)
    ).all()
    return [{"date": str(d), "count": n} for d, n in rows]


def collect_analytics(db: Session, period: str | None = None, now: datetime | None = None) -> dict:
    if period not in PERIOD_DAYS:
        period = DEFAULT_PERIOD
    since = (now or utcnow()) - timedelta(days=PERIOD_DAYS[period])

    downloads = db.execute(
        select(Document.title, Document.download_count)
        .where(Document.is_public.is_(True))
        .order_by(desc(Document.download_count))
        .limit(TOP_DOWNLOADS)
    ).all()

    return {
        "period": period,
        "user_registrations": _daily_counts(db, User.created_at, since),
        "complaint_trends": _daily_counts(db, Complaint.created_at, since),
        "document_downloads": [{"title": t, "download_count": n} for t, n in downloads],
    }
