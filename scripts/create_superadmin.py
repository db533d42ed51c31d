"""

SUPER_ADMIN 초기 계정 생성 스크립트.

- 서버 최초 세팅 시 단 한 번 실행하는 용도
- .env에 정의된 SUPERADMIN_* 환경 변수를 읽어
  super_admin 계정을 생성한다.
- 이미 super_admin 계정이 존재하면 생성하지 않고 종료한다.

사용 방법
- 가상환경 접속
- (.venv) ~\backend~$ python -m scripts.create_superadmin

"""

import logging
import os
from dotenv import load_dotenv
load_dotenv()

from sqlalchemy import select
from app.core.logging_config import setup_logging
from app.core.security import get_password_hash
from app.db.session import SessionLocal
from app.models.user import User, Role

logger = logging.getLogger(__name__)


def main():
    setup_logging()
    db = SessionLocal()
    try:
        exists = db.scalar(
            select(User).where(User.role == Role.SUPER_ADMIN)
        )
        if exists:
            logger.info("super_admin already exists. Skip creation.")
            return

        email = os.environ["SUPERADMIN_EMAIL"].strip().lower()
        password = os.environ["SUPERADMIN_PASSWORD"]
        full_name = os.environ.get("SUPERADMIN_NAME", "Super Admin")
        phone = os.environ.get("SUPERADMIN_PHONE")

        email_exists = db.scalar(
            select(User).where(User.email == email)
        )
        if email_exists:
            raise RuntimeError("Email already exists but is not super_admin")

        user = User(
            email=email,
            password_hash=get_password_hash(password),
            full_name=full_name,
            phone=phone,
            role=Role.SUPER_ADMIN,
        )

        db.add(user)
        db.commit()

        logger.info("super_admin created: %s", email)

    finally:
        db.close()


if __name__ == "__main__":
    main()
