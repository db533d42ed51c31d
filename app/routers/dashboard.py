"""
dashboard.py

관리자 대시보드 API (admin / super_admin).

- GET /dashboard/stats     : 전체 현황 요약
- GET /dashboard/analytics : 기간별 추이 (period=7d|30d|90d)

집계 쿼리는 app.services.dashboard 에 위임

"""

from fastapi import APIRouter, Depends

from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_admin
from app.models.user import User
from app.services.dashboard import DEFAULT_PERIOD, collect_analytics, collect_stats

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats")
def stats(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    return collect_stats(db)


@router.get("/analytics")
def analytics(
    period: str = DEFAULT_PERIOD,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_admin),
):
    return collect_analytics(db, period)
