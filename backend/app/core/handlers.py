# 라우트 핸들러 래퍼
# - 동기/비동기 핸들러를 같은 방식으로 실행
# - 실패는 삼키지 않고 그대로 중앙 에러 처리로 넘김

import functools
import inspect
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

ErrorContinuation = Callable[[Exception], Any]


def async_handler(handler: Optional[Callable[..., Any]] = None, *, on_error: Optional[ErrorContinuation] = None):
    """핸들러를 같은 시그니처의 async 함수로 감싸는 데코레이터

    - 반환값이 awaitable이면 await, 아니면 이미 완료된 결과로 취급합니다.
    - 예외가 나면 on_error(exc)에 같은 예외 객체를 넘기고 그 결과를 반환합니다.
      on_error가 없으면 예외를 다시 raise하여 app에 등록된 exception handler가 받게 합니다.
    - 성공 시에는 on_error를 호출하지 않습니다.

    사용 예시:
        @router.get("/current-user")
        @async_handler
        async def current_user(user: User = Depends(get_current_user)):
            ...
    """
    if handler is None:
        return functools.partial(async_handler, on_error=on_error)

    @functools.wraps(handler)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            result = handler(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
            return result
        except Exception as exc:
            logger.debug(f"{handler.__qualname__} failed: {exc!r}")
            if on_error is None:
                raise
            forwarded = on_error(exc)
            if inspect.isawaitable(forwarded):
                forwarded = await forwarded
            return forwarded

    return wrapper
