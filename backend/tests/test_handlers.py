# async_handler 래퍼 테스트
import asyncio
import inspect
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

from app.core.handlers import async_handler


class Boom(Exception):
    pass


def test_awaits_coroutine_result():
    @async_handler
    async def handler(x):
        await asyncio.sleep(0)
        return x * 2

    assert asyncio.run(handler(21)) == 42


def test_sync_return_treated_as_completed():
    @async_handler
    def handler(x):
        return x + 1

    assert inspect.iscoroutinefunction(handler)
    assert asyncio.run(handler(1)) == 2


def test_failure_is_reraised_unchanged():
    error = Boom("db down")

    @async_handler
    async def handler():
        await asyncio.sleep(0)
        raise error

    with pytest.raises(Boom) as exc_info:
        asyncio.run(handler())
    assert exc_info.value is error


def test_failure_forwarded_to_continuation():
    error = Boom("db down")
    on_error = AsyncMock(return_value="handled")

    @async_handler(on_error=on_error)
    async def handler():
        raise error

    assert asyncio.run(handler()) == "handled"
    on_error.assert_awaited_once_with(error)


def test_continuation_not_called_on_success():
    on_error = MagicMock()

    @async_handler(on_error=on_error)
    async def handler():
        return "ok"

    assert asyncio.run(handler()) == "ok"
    on_error.assert_not_called()


def test_signature_preserved():
    async def handler(video_id: str, limit: int = 10):
        return video_id

    wrapped = async_handler(handler)
    assert inspect.signature(wrapped) == inspect.signature(handler)
    assert wrapped.__name__ == "handler"


def test_error_reaches_registered_exception_handler():
    received = []
    error = Boom("inside awaited call")

    async def failing_call():
        await asyncio.sleep(0)
        raise error

    app = FastAPI()

    @app.exception_handler(Boom)
    async def boom_handler(request, exc):
        received.append(exc)
        return JSONResponse(status_code=503, content={"success": False})

    @app.get("/boom")
    @async_handler
    async def boom():
        await failing_call()

    response = TestClient(app).get("/boom")
    assert response.status_code == 503
    assert received == [error]
    assert received[0] is error
