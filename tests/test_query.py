from app.core.config import settings
from app.models.complaint import Complaint, ComplaintStatus
from app.services.query import build_filters, clamp_page, contains_any, equals, paginate
from sqlalchemy import select
from tests.helpers import create_user_in_db


def test_clamp_page_defaults_and_limits():
    assert clamp_page(None, None) == (1, settings.DEFAULT_PAGE_SIZE)
    assert clamp_page(0, 5) == (1, 5)
    assert clamp_page(2, None, default_limit=12) == (2, 12)
    assert clamp_page(1, 10_000) == (1, settings.MAX_PAGE_SIZE)


def test_empty_filters_are_skipped():
    assert equals(Complaint.category, None) is None
    assert equals(Complaint.category, "") is None
    assert contains_any([Complaint.title], "   ") is None
    assert build_filters(None, None) is None


def test_search_text_is_bound_not_inlined():
    clause = contains_any([Complaint.title, Complaint.description], "x'; DROP TABLE users; --")
    compiled = clause.compile()
    assert "DROP TABLE" not in str(compiled)
    assert "%x'; DROP TABLE users; --%" in compiled.params.values()


def test_paginate_counts_pages(db_session):
    owner = create_user_in_db(db_session)
    for i in range(5):
        db_session.add(Complaint(
            title=f"Keluhan {i}", description="Deskripsi keluhan warga",
            category="umum", status=ComplaintStatus.SUBMITTED, user_id=owner.id, attachments=[],
        ))
    db_session.commit()

    rows, pagination = paginate(db_session, select(Complaint).order_by(Complaint.title), page=2, limit=2)
    assert [c.title for c in rows] == ["Keluhan 2", "Keluhan 3"]
    assert pagination == {"page": 2, "limit": 2, "total": 5, "pages": 3}
