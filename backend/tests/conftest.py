# 테스트 공통 설정
# - Settings가 import 시점에 생성되므로 필수 환경변수를 먼저 채움
# - MongoDB 대신 mongomock-motor 메모리 DB 사용 (테스트마다 새 DB)

import asyncio
import os

os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")
os.environ.setdefault("COOKIE_SECURE", "false")

import pytest
from beanie import init_beanie
from mongomock_motor import AsyncMongoMockClient

from app.models.user import User


@pytest.fixture
def mongo_db():
    client = AsyncMongoMockClient()
    db = client["videotube_test"]
    asyncio.run(init_beanie(database=db, document_models=[User]))
    yield db


@pytest.fixture
def alice_payload():
    return {
        "username": "Alice",
        "email": "A@x.com",
        "password": "secret123",
        "fullName": "Alice A",
        "avatar": "http://x/a.png",
    }
