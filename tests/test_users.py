from app.models.user import Role
from tests.helpers import DEFAULT_PASSWORD, auth_header, create_user_in_db, user_with_token


def test_list_users_admin_only_with_filters(client, db_session):
    _, admin_token = user_with_token(client, db_session, Role.ADMIN)
    _, warga_token = user_with_token(client, db_session)
    create_user_in_db(db_session, role=Role.OPERATOR, email="operator.desa@test.com")

    assert client.get("/users", headers=auth_header(warga_token)).status_code == 403

    body = client.get("/users", headers=auth_header(admin_token)).json()
    assert body["pagination"]["total"] == 3
    assert body["pagination"]["limit"] == 20
    assert all("password_hash" not in u for u in body["users"])

    ops = client.get("/users", params={"role": "operator"}, headers=auth_header(admin_token)).json()["users"]
    assert [u["email"] for u in ops] == ["operator.desa@test.com"]

    found = client.get("/users", params={"search": "OPERATOR.DESA"}, headers=auth_header(admin_token)).json()["users"]
    assert len(found) == 1


def test_update_profile(client, db_session):
    _, token = user_with_token(client, db_session)
    r = client.put(
        "/users/profile",
        json={"full_name": "Siti Aminah", "phone": "0813-2222-3333", "address": "RT 02 / RW 01"},
        headers=auth_header(token),
    )
    assert r.status_code == 200, r.text
    user = r.json()["user"]
    assert user["full_name"] == "Siti Aminah"
    assert user["address"] == "RT 02 / RW 01"

    assert client.get("/auth/me", headers=auth_header(token)).json()["user"]["full_name"] == "Siti Aminah"


def test_change_password(client, db_session):
    user, token = user_with_token(client, db_session)

    wrong = client.put(
        "/users/password",
        json={"current_password": "Salah12345", "new_password": "BaruSekali123"},
        headers=auth_header(token),
    )
    assert wrong.status_code == 400
    assert wrong.json()["message"] == "Current password is incorrect"

    same = client.put(
        "/users/password",
        json={"current_password": DEFAULT_PASSWORD, "new_password": DEFAULT_PASSWORD},
        headers=auth_header(token),
    )
    assert same.status_code == 400

    ok = client.put(
        "/users/password",
        json={"current_password": DEFAULT_PASSWORD, "new_password": "BaruSekali123"},
        headers=auth_header(token),
    )
    assert ok.status_code == 200, ok.text

    email = user.email
    assert client.post("/auth/login", json={"email": email, "password": DEFAULT_PASSWORD}).status_code == 401
    assert client.post("/auth/login", json={"email": email, "password": "BaruSekali123"}).status_code == 200


def test_set_role_super_admin_only(client, db_session):
    superadmin, super_token = user_with_token(client, db_session, Role.SUPER_ADMIN)
    _, admin_token = user_with_token(client, db_session, Role.ADMIN)
    warga, warga_token = user_with_token(client, db_session)

    denied = client.patch(f"/users/{warga.id}/role", json={"role": "operator"}, headers=auth_header(admin_token))
    assert denied.status_code == 403

    ok = client.patch(f"/users/{warga.id}/role", json={"role": "operator"}, headers=auth_header(super_token))
    assert ok.status_code == 200, ok.text
    assert ok.json()["user"]["role"] == "operator"

    # 이후 요청부터 새 권한 적용 (DB 기준)
    assert client.get("/auth/me", headers=auth_header(warga_token)).json()["user"]["role"] == "operator"

    same = client.patch(f"/users/{warga.id}/role", json={"role": "operator"}, headers=auth_header(super_token))
    assert same.status_code == 400

    self_change = client.patch(f"/users/{superadmin.id}/role", json={"role": "admin"}, headers=auth_header(super_token))
    assert self_change.status_code == 400
    assert self_change.json()["message"] == "Cannot change your own role"

    invalid = client.patch(f"/users/{warga.id}/role", json={"role": "kepala"}, headers=auth_header(super_token))
    assert invalid.status_code == 400


def test_set_active(client, db_session):
    superadmin, super_token = user_with_token(client, db_session, Role.SUPER_ADMIN)
    warga, warga_token = user_with_token(client, db_session)

    off = client.patch(f"/users/{warga.id}/active", json={"is_active": False}, headers=auth_header(super_token))
    assert off.status_code == 200, off.text
    assert off.json()["user"]["is_active"] is False

    # 비활성화 즉시 기존 토큰 거부
    assert client.get("/auth/me", headers=auth_header(warga_token)).status_code == 401

    self_off = client.patch(f"/users/{superadmin.id}/active", json={"is_active": False}, headers=auth_header(super_token))
    assert self_off.status_code == 400

    on = client.patch(f"/users/{warga.id}/active", json={"is_active": True}, headers=auth_header(super_token))
    assert on.status_code == 200
    assert client.get("/auth/me", headers=auth_header(warga_token)).status_code == 200
