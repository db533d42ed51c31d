"""
events.py

마을 행사(Event) API 모음.

- 공개 행사 목록 (category / month+year 필터, 시작일 오름차순)
- 행사 등록 / 수정 / 삭제 (admin / super_admin)

"""

import uuid
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException, Query, status

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_admin
from app.db.base import as_utc
from app.models.event import Event
from app.models.user import User
from app.schemas.event import EventRequest, EventResponse
from app.services.query import apply_filters, clamp_page, equals, paginate

router = APIRouter(prefix="/events", tags=["events"])


def month_range(year: int, month: int) -> tuple[datetime, datetime]:
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end


def _apply(event: Event, data: EventRequest) -> None:
    event.title = data.title
    event.description = data.description
    event.start_date = as_utc(data.start_date)
    event.end_date = as_utc(data.end_date)
    event.location = data.location
    event.organizer = data.organizer
    event.category = data.category
    event.max_participants = data.max_participants
    event.is_public = data.is_public


@router.get("")
def list_events(
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    category: str | None = None,
    month: int | None = Query(default=None, ge=1, le=12),
    year: int | None = Query(default=None, ge=1900, le=9999),
    db: Session = Depends(get_db),
):
    page, limit = clamp_page(page, limit)

    # month / year 는 둘 다 있을 때만 적용
    period_clause = None
    if month and year:
        start, end = month_range(year, month)
        period_clause = (Event.start_date >= start) & (Event.start_date < end)

    stmt = apply_filters(
        select(Event),
        Event.is_public.is_(True),
        equals(Event.category, category),
        period_clause,
    ).order_by(Event.start_date.asc())

    rows, pagination = paginate(db, stmt, page, limit)
    return {
        "events": [EventResponse.model_validate(e) for e in rows],
        "pagination": pagination,
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_event(
    data: EventRequest,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    event = Event(created_by=current_admin.id)
    _apply(event, data)

    try:
        db.add(event)
        db.commit()
        db.refresh(event)
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {"message": "Event created successfully", "event": EventResponse.model_validate(event)}


@router.put("/{event_id}")
def update_event(
    event_id: uuid.UUID,
    data: EventRequest,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    event = db.get(Event, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")

    _apply(event, data)
    try:
        db.commit()
        db.refresh(event)
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {"message": "Event updated successfully", "event": EventResponse.model_validate(event)}


@router.delete("/{event_id}")
def delete_event(
    event_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    event = db.get(Event, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")

    try:
        db.delete(event)
        db.commit()
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Database error: {type(e).__name__}")

    return {"message": "Event deleted successfully"}
