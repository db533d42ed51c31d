"""
errors.py

API 에러 응답 형식 통일.

라우터는 기존처럼 HTTPException(status_code, detail)을 던지고,
여기 등록된 핸들러가 모든 에러를 {"message": ...} 형태의 JSON으로 바꾼다.

- HTTPException           : detail -> message, 헤더(WWW-Authenticate 등) 유지
- RequestValidationError  : 400, 첫 번째로 실패한 필드 규칙을 메시지로 사용
- 그 외 예외               : 500, 내부 정보는 노출하지 않고 로그에만 남김

"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def _first_error_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path", "form")]
    msg = first.get("msg", "Invalid value")
    if loc:
        return f"{loc[-1]}: {msg}"
    return msg


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": _first_error_message(exc)},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
