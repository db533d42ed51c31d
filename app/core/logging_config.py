"""
logging_config.py

애플리케이션 로깅 초기화.

각 모듈은 logging.getLogger(__name__)으로 로거를 만들고,
핸들러/포맷 설정은 앱 시작 시 이 함수에서 한 번만 수행한다.

"""

import logging

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
