# API 에러 정의 + 중앙 에러 처리
# - ApiError: 실패 응답을 일정한 모양(envelope)으로 표현하는 예외
# - register_exception_handlers: 모든 실패를 한 곳에서 envelope JSON으로 변환
#
# 응답 모양: {"statusCode", "message", "success": false, "data": null, "errors": [...]}

import inspect
import logging
import traceback
from typing import Any, Dict, Iterable, List, Optional

import jwt
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import DuplicateKeyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Something went wrong"


class ApiError(Exception):
    """클라이언트에게 돌려줄 실패를 표현하는 예외

    일반 예외와 구분되어야 하므로 중앙 에러 처리기는 이 타입을 먼저 검사합니다.
    trace를 넘기지 않으면 생성 위치의 스택을 저장합니다 (생성자 프레임은 제외).

    Attributes:
        status_code: HTTP 상태 코드
        message: 사람이 읽을 수 있는 메시지
        errors: 세부 에러 목록
        trace: 진단용 스택 문자열 (응답에는 포함되지 않음)
    """

    success = False
    data = None

    def __init__(
        self,
        status_code: int,
        message: str = DEFAULT_ERROR_MESSAGE,
        errors: Iterable[Any] = (),
        trace: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.errors = list(errors)
        self.trace = trace if trace else self._capture_trace()

    def _capture_trace(self) -> str:
        frame = inspect.currentframe()
        try:
            # 자기 자신(하위 클래스 생성자 포함)의 프레임은 건너뜀
            while frame is not None and frame.f_locals.get("self") is self:
                frame = frame.f_back
            return "".join(traceback.format_stack(frame))
        finally:
            del frame

    def to_dict(self) -> Dict[str, Any]:
        return {
            "statusCode": self.status_code,
            "message": self.message,
            "success": self.success,
            "data": self.data,
            "errors": jsonable_encoder(self.errors),
        }

    def __repr__(self) -> str:
        return f"ApiError(status_code={self.status_code!r}, message={self.message!r}, errors={self.errors!r})"


def error_response(error: ApiError, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_dict(), headers=headers)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} - {exc.status_code} {exc.message}\n{exc.trace}")
    else:
        logger.info(f"{request.method} {request.url.path} - {exc.status_code} {exc.message}")
    return error_response(exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: List[Dict[str, Any]] = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]
    return error_response(ApiError(status.HTTP_400_BAD_REQUEST, "Invalid request payload", errors))


async def duplicate_key_handler(request: Request, exc: DuplicateKeyError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} - duplicate key: {exc.details}")
    return error_response(ApiError(status.HTTP_409_CONFLICT, "User with email or username already exists"))


async def jwt_error_handler(request: Request, exc: jwt.PyJWTError) -> JSONResponse:
    return error_response(ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid access token"))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else DEFAULT_ERROR_MESSAGE
    return error_response(ApiError(exc.status_code, message), headers=getattr(exc, "headers", None))


def internal_error(exc: Exception) -> ApiError:
    """예상하지 못한 예외를 500 ApiError로 감싼다 (원래 traceback은 trace에 보존)"""
    return ApiError(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        trace="".join(traceback.format_exception(exc)),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # 원인은 로그에만 남기고 클라이언트에는 기본 메시지만 노출
    logger.error(f"Unhandled exception in {request.method} {request.url.path}: {exc!r}", exc_info=exc)
    return error_response(internal_error(exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(DuplicateKeyError, duplicate_key_handler)
    app.add_exception_handler(jwt.PyJWTError, jwt_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
