from datetime import timedelta

from app.db.base import utcnow
from app.models.complaint import Complaint, ComplaintStatus
from app.models.document import Document
from app.models.user import Role
from app.services.dashboard import collect_analytics
from tests.helpers import auth_header, create_user_in_db, user_with_token


def _complaint(owner, status=ComplaintStatus.SUBMITTED, **kw):
    return Complaint(
        title=kw.pop("title", "Air PDAM mati"),
        description="Air tidak mengalir sejak pagi",
        category="air",
        status=status,
        user_id=owner.id,
        attachments=[],
        **kw,
    )


def test_stats_requires_admin(client, db_session):
    _, token = user_with_token(client, db_session)
    assert client.get("/dashboard/stats", headers=auth_header(token)).status_code == 403
    assert client.get("/dashboard/stats").status_code == 401


def test_stats_counts(client, db_session):
    admin, token = user_with_token(client, db_session, Role.ADMIN)
    warga = create_user_in_db(db_session)
    create_user_in_db(db_session, is_active=False)
    db_session.add_all([
        _complaint(warga),
        _complaint(warga, ComplaintStatus.RESOLVED),
        _complaint(warga, ComplaintStatus.RESOLVED),
    ])
    db_session.commit()

    r = client.get("/dashboard/stats", headers=auth_header(token))
    assert r.status_code == 200, r.text
    stats = r.json()
    assert stats["users"] == 2
    assert stats["complaints"] == 3
    assert stats["announcements"] == 0
    assert len(stats["recent_complaints"]) == 3
    assert stats["recent_complaints"][0]["user_name"] == warga.full_name
    by_status = {row["status"]: row["count"] for row in stats["complaints_by_status"]}
    assert by_status == {"submitted": 1, "resolved": 2}


def test_analytics_period_and_downloads(client, db_session):
    admin, token = user_with_token(client, db_session, Role.ADMIN)
    now = utcnow()
    db_session.add_all([
        _complaint(admin, created_at=now - timedelta(days=1)),
        _complaint(admin, created_at=now - timedelta(days=20)),
        Document(title="Perdes", category="peraturan", file_path="x.pdf", uploaded_by=admin.id, download_count=7),
        Document(title="Formulir", category="formulir", file_path="y.pdf", uploaded_by=admin.id, download_count=3),
    ])
    db_session.commit()

    week = client.get("/dashboard/analytics", headers=auth_header(token)).json()
    assert week["period"] == "7d"
    assert sum(row["count"] for row in week["complaint_trends"]) == 1
    assert [d["title"] for d in week["document_downloads"]] == ["Perdes", "Formulir"]

    month = client.get("/dashboard/analytics", params={"period": "30d"}, headers=auth_header(token)).json()
    assert sum(row["count"] for row in month["complaint_trends"]) == 2
    assert sum(row["count"] for row in month["user_registrations"]) == 1


def test_analytics_unknown_period_falls_back(db_session):
    assert collect_analytics(db_session, "1y")["period"] == "7d"
