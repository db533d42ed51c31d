# tests/helpers.py
import uuid
from sqlalchemy.orm import Session

from app.models.user import User, Role
from app.core.security import get_password_hash

DEFAULT_PASSWORD = "Passw0rd!123"


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def create_user_in_db(
    db: Session,
    *,
    role: Role = Role.WARGA,
    email: str | None = None,
    password: str = DEFAULT_PASSWORD,
    is_active: bool = True,
) -> User:
    user = User(
        email=email or f"{role.value}_{uuid.uuid4().hex[:6]}@test.com",
        password_hash=get_password_hash(password),
        full_name=f"Test {role.value}",
        role=role,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def login(client, email: str, password: str = DEFAULT_PASSWORD) -> dict:
    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()


def user_with_token(client, db: Session, role: Role = Role.WARGA) -> tuple[User, str]:
    """DB에 사용자를 만들고 로그인해서 (user, access_token) 반환"""
    user = create_user_in_db(db, role=role)
    tokens = login(client, user.email)
    return user, tokens["access_token"]


def register(client, *, email: str | None = None, password: str = DEFAULT_PASSWORD, full_name: str = "Budi Santoso"):
    return client.post(
        "/auth/register",
        json={
            "email": email or f"warga_{uuid.uuid4().hex[:6]}@test.com",
            "password": password,
            "full_name": full_name,
            "phone": "0812-0000-0000",
        },
    )
