"""

예약 공지 게시 스크립트.

scheduled_at 이 지난 scheduled 공지를 published 로 전환한다.
cron 등으로 주기 실행하는 용도 (POST /announcements/publish-due 와 같은 동작).

사용 방법
- (.venv) ~\backend~$ python -m scripts.publish_scheduled

"""

import logging
from dotenv import load_dotenv
load_dotenv()

from app.core.logging_config import setup_logging
from app.db.session import SessionLocal
from app.services.announcements import publish_due_announcements

logger = logging.getLogger(__name__)


def main():
    setup_logging()
    db = SessionLocal()
    try:
        count = publish_due_announcements(db)
        db.commit()
        logger.info("Published %s scheduled announcement(s)", count)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
