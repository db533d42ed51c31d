"""
services/query.py

목록 API 공통 조회 헬퍼.

SQL 문자열을 직접 이어 붙이지 않고,
SQLAlchemy 표현식으로 필터를 조립하고 페이지네이션 결과를 만든다.

- equals        : 값이 있을 때만 column == value 조건 생성
- contains_any  : 여러 컬럼 중 하나라도 검색어를 포함 (대소문자 무시)
- build_filters : None 조건은 버리고 나머지만 AND로 결합
- paginate      : (rows, {page, limit, total, pages}) 반환

NOTE:
- 모든 검색어는 바인드 파라미터로 전달됨 (SQL injection 방지)

"""

import math
from typing import Any, Iterable, Sequence

from sqlalchemy import Select, and_, case, func, or_, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from app.core.config import settings
from app.models.complaint import Priority


def equals(column, value: Any) -> ColumnElement[bool] | None:
    if value is None or value == "":
        return None
    return column == value


def contains_any(columns: Iterable, text: str | None) -> ColumnElement[bool] | None:
    if not text or not text.strip():
        return None
    pattern = f"%{text.strip()}%"
    return or_(*[col.ilike(pattern) for col in columns])


def build_filters(*clauses: ColumnElement[bool] | None) -> ColumnElement[bool] | None:
    active = [c for c in clauses if c is not None]
    if not active:
        return None
    return and_(*active)


def apply_filters(stmt: Select, *clauses: ColumnElement[bool] | None) -> Select:
    condition = build_filters(*clauses)
    if condition is None:
        return stmt
    return stmt.where(condition)


def clamp_page(page: int | None, limit: int | None, default_limit: int | None = None) -> tuple[int, int]:
    page = max(1, page or 1)
    limit = limit or default_limit or settings.DEFAULT_PAGE_SIZE
    limit = max(1, min(limit, settings.MAX_PAGE_SIZE))
    return page, limit


def paginate(db: Session, stmt: Select, page: int, limit: int) -> tuple[Sequence[Any], dict]:
    total = db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery())) or 0
    rows = db.scalars(stmt.limit(limit).offset((page - 1) * limit)).all()
    return rows, {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if total else 0,
    }


# priority 문자열 정렬이 아니라 high > normal > low 순서
def priority_rank(column):
    return case(
        (column == Priority.HIGH, 3),
        (column == Priority.NORMAL, 2),
        else_=1,
    )
