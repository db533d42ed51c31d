"""
행사 / 문서 / 갤러리 / 연락처 API 통합 테스트.
"""

import os
import uuid

from app.models.document import Document
from app.models.user import Role
from tests.helpers import auth_header, user_with_token

PNG = b"\x89PNG\r\n\x1a\n" + b"1" * 16
PDF = b"%PDF-1.4\n% test document\n"


# ---------- events ----------

def _event(client, token, **overrides):
    body = {
        "title": "Lomba 17 Agustus",
        "start_date": "2026-08-17T08:00:00+00:00",
        "end_date": "2026-08-17T17:00:00+00:00",
        "category": "perayaan",
        "location": "Lapangan desa",
    }
    body.update(overrides)
    return client.post("/events", json=body, headers=auth_header(token))


def test_events_crud_and_filters(client, db_session):
    admin, token = user_with_token(client, db_session, Role.ADMIN)

    aug = _event(client, token)
    assert aug.status_code == 201, aug.text
    _event(client, token, title="Posyandu", start_date="2026-07-05T09:00:00+00:00", end_date=None, category="kesehatan")
    _event(client, token, title="Rapat tertutup", start_date="2026-07-01T09:00:00+00:00", end_date=None, is_public=False)

    listed = client.get("/events").json()
    assert [e["title"] for e in listed["events"]] == ["Posyandu", "Lomba 17 Agustus"]
    assert {e["creator_name"] for e in listed["events"]} == {admin.full_name}

    july = client.get("/events", params={"month": 7, "year": 2026}).json()["events"]
    assert [e["title"] for e in july] == ["Posyandu"]

    health = client.get("/events", params={"category": "kesehatan"}).json()["events"]
    assert [e["title"] for e in health] == ["Posyandu"]

    eid = aug.json()["event"]["id"]
    upd = client.put(
        f"/events/{eid}",
        json={"title": "Lomba HUT RI", "start_date": "2026-08-17T08:00:00+00:00", "category": "perayaan"},
        headers=auth_header(token),
    )
    assert upd.status_code == 200, upd.text
    assert upd.json()["event"]["title"] == "Lomba HUT RI"

    assert client.delete(f"/events/{eid}", headers=auth_header(token)).status_code == 200
    assert client.delete(f"/events/{eid}", headers=auth_header(token)).status_code == 404


def test_event_end_before_start_rejected(client, db_session):
    _, token = user_with_token(client, db_session, Role.ADMIN)
    r = _event(client, token, start_date="2026-08-17T08:00:00+00:00", end_date="2026-08-16T08:00:00+00:00")
    assert r.status_code == 400


def test_event_management_requires_admin(client, db_session):
    _, token = user_with_token(client, db_session)
    assert _event(client, token).status_code == 403


# ---------- documents ----------

def _upload_document(client, token, **overrides):
    data = {"title": "Formulir KTP", "category": "formulir"}
    data.update(overrides)
    return client.post(
        "/documents",
        data=data,
        files={"documents": ("formulir-ktp.pdf", PDF, "application/pdf")},
        headers=auth_header(token),
    )


def test_document_upload_download_delete(client, db_session):
    admin, token = user_with_token(client, db_session, Role.ADMIN)

    up = _upload_document(client, token)
    assert up.status_code == 201, up.text
    doc = up.json()["document"]
    assert doc["original_name"] == "formulir-ktp.pdf"
    assert doc["file_size"] == len(PDF)
    assert doc["download_count"] == 0

    listed = client.get("/documents", params={"search": "ktp"}).json()
    assert [d["id"] for d in listed["documents"]] == [doc["id"]]
    assert listed["documents"][0]["uploaded_by_name"] == admin.full_name

    dl = client.get(f"/documents/{doc['id']}/download")
    assert dl.status_code == 200
    assert dl.content == PDF
    client.get(f"/documents/{doc['id']}/download")

    db_session.expire_all()
    stored = db_session.get(Document, uuid.UUID(doc["id"]))
    assert stored.download_count == 2
    path = stored.file_path
    assert os.path.exists(path)

    assert client.delete(f"/documents/{doc['id']}", headers=auth_header(token)).status_code == 200
    assert not os.path.exists(path)
    assert client.get(f"/documents/{doc['id']}/download").status_code == 404


def test_private_document_hidden(client, db_session):
    _, token = user_with_token(client, db_session, Role.ADMIN)
    doc = _upload_document(client, token, is_public="false").json()["document"]

    assert client.get("/documents").json()["documents"] == []
    assert client.get(f"/documents/{doc['id']}/download").status_code == 404


def test_document_requires_file_and_allowed_type(client, db_session):
    _, token = user_with_token(client, db_session, Role.ADMIN)

    no_file = client.post("/documents", data={"title": "Tanpa file", "category": "lain"}, headers=auth_header(token))
    assert no_file.status_code == 400

    bad = client.post(
        "/documents",
        data={"title": "Gambar", "category": "lain"},
        files={"documents": ("foto.png", PNG, "image/png")},
        headers=auth_header(token),
    )
    assert bad.status_code == 400
    assert "Invalid document type" in bad.json()["message"]


# ---------- gallery ----------

def test_gallery_upload_view_delete(client, db_session):
    admin, token = user_with_token(client, db_session, Role.ADMIN)

    up = client.post(
        "/gallery",
        data={"title": "Panen raya", "category": "pertanian", "tags": "panen, sawah,"},
        files=[("gallery", (f"panen{i}.jpg", PNG, "image/jpeg")) for i in range(2)],
        headers=auth_header(token),
    )
    assert up.status_code == 201, up.text
    items = up.json()["items"]
    assert len(items) == 2
    assert items[0]["tags"] == ["panen", "sawah"]

    listed = client.get("/gallery").json()
    assert listed["pagination"]["total"] == 2
    assert listed["pagination"]["limit"] == 12
    assert all(g["uploaded_by_name"] == admin.full_name for g in listed["gallery"])

    item_id = items[0]["id"]
    first = client.get(f"/gallery/{item_id}")
    assert first.status_code == 200
    assert first.json()["item"]["view_count"] == 1
    assert client.get(f"/gallery/{item_id}").json()["item"]["view_count"] == 2

    assert client.delete(f"/gallery/{item_id}", headers=auth_header(token)).status_code == 200
    assert client.get(f"/gallery/{item_id}").status_code == 404


def test_gallery_requires_file(client, db_session):
    _, token = user_with_token(client, db_session, Role.ADMIN)
    r = client.post("/gallery", data={"title": "Kosong", "category": "lain"}, headers=auth_header(token))
    assert r.status_code == 400
    assert r.json()["message"] == "At least one file is required"


# ---------- contacts ----------

def _contact(client, token, **overrides):
    body = {"name": "Pak Slamet", "position": "Kepala Desa", "department": "Pemerintahan", "phone": "0812-1111-2222"}
    body.update(overrides)
    return client.post("/contacts", json=body, headers=auth_header(token))


def test_contacts_crud_and_order(client, db_session):
    _, token = user_with_token(client, db_session, Role.ADMIN)

    kades = _contact(client, token)
    assert kades.status_code == 201, kades.text
    _contact(client, token, name="Bu Sri", position="Bendahara", department="Keuangan")
    _contact(client, token, name="Pak Joko", position="Sekretaris Desa", department="Pemerintahan")
    _contact(client, token, name="Rahasia", position="Staf", department="Keuangan", is_public=False)

    names = [c["name"] for c in client.get("/contacts").json()["contacts"]]
    assert names == ["Bu Sri", "Pak Slamet", "Pak Joko"]

    gov = client.get("/contacts", params={"department": "Pemerintahan"}).json()["contacts"]
    assert {c["name"] for c in gov} == {"Pak Slamet", "Pak Joko"}

    cid = kades.json()["contact"]["id"]
    upd = client.put(
        f"/contacts/{cid}",
        json={"name": "Pak Slamet", "position": "Kepala Desa", "department": "Pemerintahan", "office_hours": "08-15"},
        headers=auth_header(token),
    )
    assert upd.status_code == 200, upd.text
    assert upd.json()["contact"]["office_hours"] == "08-15"
    assert upd.json()["contact"]["phone"] is None

    assert client.delete(f"/contacts/{cid}", headers=auth_header(token)).status_code == 200
    assert client.put(
        f"/contacts/{cid}",
        json={"name": "Pak Slamet", "position": "Kepala Desa", "department": "Pemerintahan"},
        headers=auth_header(token),
    ).status_code == 404


def test_contact_invalid_email(client, db_session):
    _, token = user_with_token(client, db_session, Role.ADMIN)
    r = _contact(client, token, email="bukan-email")
    assert r.status_code == 400
    assert r.json()["message"].startswith("email")
