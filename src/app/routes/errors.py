"""
에러 → HTTP 응답 매핑.

응답 본문: {"code", "message", "context"}
- NotFound → 404
- Schema / UnsupportedKind / InvalidLocator / DanglingReference / InvalidRequest → 400
- Hydration / ContentStore → 502 (요청이 아니라 upstream 문제)
- 요청 본문 검증 실패(FastAPI)도 같은 형식의 INVALID_REQUEST 400
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.domain.errors import (
    BundleProtocolError,
    ContentStoreError,
    DanglingReferenceError,
    HydrationError,
    InvalidLocatorError,
    InvalidRequestError,
    NotFoundError,
    SchemaError,
    UnsupportedKindError,
)

logger = logging.getLogger(__name__)

# (예외 타입, status, 메시지)
ERROR_RESPONSES: tuple[tuple[type[BundleProtocolError], int, str], ...] = (
    (NotFoundError, 404, "Content not found"),
    (InvalidLocatorError, 400, "Invalid content locator"),
    (SchemaError, 400, "Document does not match its manifest schema"),
    (UnsupportedKindError, 400, "Unsupported manifest kind"),
    (DanglingReferenceError, 400, "Bundle reference points outside the bundle"),
    (InvalidRequestError, 400, "Invalid request body"),
    (HydrationError, 502, "Failed to hydrate sibling content"),
    (ContentStoreError, 502, "Content store request failed"),
)


def error_status(error: BundleProtocolError) -> tuple[int, str]:
    """예외 → (status, message). 매핑 없으면 500."""
    for error_type, status, message in ERROR_RESPONSES:
        if isinstance(error, error_type):
            return status, message
    return 500, "Internal error"


def error_response(error: BundleProtocolError) -> JSONResponse:
    status, message = error_status(error)
    return JSONResponse(
        status_code=status,
        content={
            "code": error.code,
            "message": message,
            "context": jsonable_encoder(error.context),
        },
        headers={"Access-Control-Allow-Origin": "*"},
    )


async def _handle_protocol_error(request: Request, exc: BundleProtocolError) -> JSONResponse:
    status, _ = error_status(exc)
    if status >= 500:
        logger.warning(f"{request.method} {request.url.path} → {status} {exc}")
    return error_response(exc)


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(InvalidRequestError(errors=exc.errors()))


def register_error_handlers(app: FastAPI) -> None:
    """BundleProtocolError 계열 + 요청 검증 실패를 JSON 응답으로."""
    app.add_exception_handler(BundleProtocolError, _handle_protocol_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
