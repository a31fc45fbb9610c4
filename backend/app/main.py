# FastAPI 진입점
# - Beanie ODM 초기화 (MongoDB, 연결 실패 시 재시도)
# - /api/v1 라우터 등록
# - CORS 설정 (쿠키 전송 허용)
# - 중앙 에러 처리기 등록

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from beanie import init_beanie
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from motor.motor_asyncio import AsyncIOMotorClient

from .api.v1.users import router as users_router
from .core.config import settings
from .core.exceptions import register_exception_handlers
from .core.middleware import limit_body_size
from .core.retry import db_retry
from .models.user import User

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@db_retry
async def connect_database(uri: str) -> AsyncIOMotorClient:
    client = AsyncIOMotorClient(uri, serverSelectionTimeoutMS=5000)
    # 실제로 연결되는지 ping으로 확인
    await client.admin.command("ping")
    await init_beanie(database=client.get_default_database(), document_models=[User])
    return client


@asynccontextmanager
async def lifespan(app: FastAPI):
    client = await connect_database(settings.MONGODB_URI)
    logger.info(f"MongoDB 연결 성공: {client.get_default_database().name}")
    try:
        yield
    finally:
        client.close()


def create_app(use_lifespan: bool = True) -> FastAPI:
    app = FastAPI(
        title="VideoTube API",
        description="사용자 계정/인증 API",
        version="1.0.0",
        lifespan=lifespan if use_lifespan else None,
    )

    # 나중에 추가한 미들웨어가 바깥쪽: 413 응답에도 CORS 헤더가 붙도록 CORS를 마지막에 추가
    app.middleware("http")(limit_body_size)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "app": settings.APP_NAME, "time": datetime.now(tz=timezone.utc).isoformat()}

    app.include_router(users_router, prefix="/api/v1")
    return app


app = create_app()
