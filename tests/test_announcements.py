from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from app.models.announcement import Announcement, AnnouncementStatus
from app.models.user import Role
from app.services.announcements import publish_due_announcements
from tests.helpers import auth_header, user_with_token


def _post(client, token, **overrides):
    body = {"title": "Kerja bakti", "content": "Kerja bakti hari Minggu pukul 07.00"}
    body.update(overrides)
    return client.post("/announcements", json=body, headers=auth_header(token))


def _iso(dt: datetime) -> str:
    return dt.isoformat()


def test_public_list_hides_draft_and_future(client, db_session):
    author, token = user_with_token(client, db_session, Role.ADMIN)
    future = datetime.now(timezone.utc) + timedelta(days=2)

    published = _post(client, token, title="Sudah terbit")
    assert published.status_code == 201, published.text
    assert published.json()["announcement"]["status"] == "published"
    assert published.json()["announcement"]["published_at"] is not None

    draft = _post(client, token, title="Masih draf", draft=True)
    assert draft.json()["announcement"]["status"] == "draft"

    scheduled = _post(client, token, title="Terjadwal", scheduled_at=_iso(future))
    assert scheduled.json()["announcement"]["status"] == "scheduled"

    public = client.get("/announcements").json()
    assert [a["title"] for a in public["announcements"]] == ["Sudah terbit"]
    assert public["announcements"][0]["author_name"] == author.full_name
    assert public["pagination"]["total"] == 1

    assert client.get(f"/announcements/{draft.json()['announcement']['id']}").status_code == 404
    assert client.get(f"/announcements/{scheduled.json()['announcement']['id']}").status_code == 404
    assert client.get(f"/announcements/{published.json()['announcement']['id']}").status_code == 200


def test_published_row_with_future_schedule_stays_hidden(client, db_session):
    author, _ = user_with_token(client, db_session, Role.ADMIN)
    db_session.add(
        Announcement(
            title="Bocor",
            content="Tidak boleh tampil sebelum waktunya",
            status=AnnouncementStatus.PUBLISHED,
            scheduled_at=datetime.now(timezone.utc) + timedelta(hours=3),
            author_id=author.id,
        )
    )
    db_session.commit()

    assert client.get("/announcements").json()["announcements"] == []


def test_public_list_orders_by_priority_and_filters(client, db_session):
    _, token = user_with_token(client, db_session, Role.ADMIN)
    _post(client, token, title="Info biasa", priority="low")
    _post(client, token, title="Darurat banjir", priority="high", category="urgent")
    _post(client, token, title="Info normal")

    titles = [a["title"] for a in client.get("/announcements").json()["announcements"]]
    assert titles == ["Darurat banjir", "Info normal", "Info biasa"]

    urgent = client.get("/announcements", params={"category": "urgent"}).json()["announcements"]
    assert [a["title"] for a in urgent] == ["Darurat banjir"]

    found = client.get("/announcements", params={"search": "BANJIR"}).json()["announcements"]
    assert [a["title"] for a in found] == ["Darurat banjir"]


def test_admin_sees_all_and_can_filter_by_status(client, db_session):
    _, token = user_with_token(client, db_session, Role.ADMIN)
    _post(client, token, title="Terbit")
    _post(client, token, title="Draf", draft=True)

    everything = client.get("/announcements/all", headers=auth_header(token)).json()
    assert everything["pagination"]["total"] == 2

    drafts = client.get("/announcements/all", params={"status": "draft"}, headers=auth_header(token)).json()
    assert [a["title"] for a in drafts["announcements"]] == ["Draf"]


def test_announcement_management_requires_admin(client, db_session):
    _, warga_token = user_with_token(client, db_session)
    assert _post(client, warga_token).status_code == 403
    assert client.get("/announcements/all", headers=auth_header(warga_token)).status_code == 403
    assert client.post("/announcements", json={"title": "Tanpa", "content": "Tanpa token login"}).status_code == 401


def test_update_and_delete(client, db_session):
    _, token = user_with_token(client, db_session, Role.ADMIN)
    aid = _post(client, token, draft=True).json()["announcement"]["id"]

    r = client.put(
        f"/announcements/{aid}",
        json={"title": "Kerja bakti (revisi)", "content": "Kerja bakti dipindah ke hari Sabtu"},
        headers=auth_header(token),
    )
    assert r.status_code == 200, r.text
    assert r.json()["announcement"]["status"] == "published"
    assert client.get(f"/announcements/{aid}").json()["announcement"]["title"] == "Kerja bakti (revisi)"

    assert client.delete(f"/announcements/{aid}", headers=auth_header(token)).status_code == 200
    assert client.delete(f"/announcements/{aid}", headers=auth_header(token)).status_code == 404


def test_publish_due_promotes_scheduled(client, db_session):
    author, token = user_with_token(client, db_session, Role.ADMIN)
    past = datetime.now(timezone.utc) - timedelta(minutes=5)
    db_session.add(
        Announcement(
            title="Jadwal lewat",
            content="Seharusnya sudah tayang",
            status=AnnouncementStatus.SCHEDULED,
            scheduled_at=past,
            author_id=author.id,
        )
    )
    db_session.commit()
    assert client.get("/announcements").json()["announcements"] == []

    r = client.post("/announcements/publish-due", headers=auth_header(token))
    assert r.status_code == 200, r.text
    assert r.json()["published"] == 1

    public = client.get("/announcements").json()["announcements"]
    assert [a["title"] for a in public] == ["Jadwal lewat"]


def test_publish_due_service_ignores_future(db_session):
    from tests.helpers import create_user_in_db

    author = create_user_in_db(db_session, role=Role.ADMIN)
    now = datetime.now(timezone.utc)
    db_session.add_all([
        Announcement(title="A", content="lewat", status=AnnouncementStatus.SCHEDULED,
                     scheduled_at=now - timedelta(hours=1), author_id=author.id),
        Announcement(title="B", content="nanti", status=AnnouncementStatus.SCHEDULED,
                     scheduled_at=now + timedelta(hours=1), author_id=author.id),
    ])
    db_session.commit()

    assert publish_due_announcements(db_session, now=now) == 1
    db_session.commit()

    statuses = dict(db_session.execute(select(Announcement.title, Announcement.status)).all())
    assert statuses == {"A": AnnouncementStatus.PUBLISHED, "B": AnnouncementStatus.SCHEDULED}
