# 재시도 로직 유틸리티
# - MongoDB 연결(ping)은 컨테이너 기동 순서 때문에 처음 몇 번 실패할 수 있음
# - tenacity로 지수 백오프 재시도

import logging
from typing import Tuple, Type

from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError
from tenacity import (
    after_log,
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .config import settings

logger = logging.getLogger(__name__)


def create_retry_decorator(
    max_attempts: int = 3,
    initial_wait: float = 1.0,
    max_wait: float = 10.0,
    exceptions: Tuple[Type[Exception], ...] = (ConnectionFailure, ServerSelectionTimeoutError),
):
    """
    재시도 데코레이터를 생성하는 팩토리 함수입니다.

    1. max_attempts: 최대 시도 횟수 (3이면 처음 1번 + 재시도 2번)
    2. initial_wait: 첫 재시도 전 대기 시간 (초)
    3. max_wait: 최대 대기 시간 (초)
    4. exceptions: 재시도할 예외 타입

    마지막 시도까지 실패하면 원래 예외를 그대로 올립니다 (reraise=True).

    사용 예시:
        @create_retry_decorator(max_attempts=5)
        async def ping():
            ...
    """
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=2, min=initial_wait, max=max_wait),
        retry=retry_if_exception_type(exceptions),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        after=after_log(logger, logging.ERROR),
        reraise=True,
    )


# MongoDB 연결용 기본 재시도 데코레이터
db_retry = create_retry_decorator(max_attempts=settings.MONGODB_CONNECT_ATTEMPTS)
