# HTTP 미들웨어
# - 요청 본문 크기 제한 (MAX_BODY_BYTES 초과 시 413)
# - 미들웨어에서 난 예외는 exception handler까지 가지 않으므로 envelope 응답을 직접 반환

import logging
from typing import Callable

from fastapi import Request, status

from .config import settings
from .exceptions import ApiError, error_response

logger = logging.getLogger(__name__)


def _too_large(request: Request, size: int):
    logger.info(f"{request.method} {request.url.path} - body of {size} bytes rejected")
    return error_response(ApiError(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "Request body too large"))


async def limit_body_size(request: Request, call_next: Callable):
    limit = settings.MAX_BODY_BYTES
    content_length = request.headers.get("content-length")
    if content_length is not None:
        if not content_length.isdigit():
            return error_response(ApiError(status.HTTP_400_BAD_REQUEST, "Invalid Content-Length header"))
        if int(content_length) > limit:
            return _too_large(request, int(content_length))
    elif request.method in ("POST", "PUT", "PATCH"):
        # chunked 전송은 길이 헤더가 없으므로 직접 읽어서 확인 (읽은 본문은 다음 단계에서 재사용됨)
        body = await request.body()
        if len(body) > limit:
            return _too_large(request, len(body))
    return await call_next(request)
