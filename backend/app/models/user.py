# User 도메인 모델 (Beanie Document)
# - username/email: unique 인덱스, 소문자 + 앞뒤 공백 제거
# - password: 항상 bcrypt 해시 (set_password로만 변경)
# - watch_history: Video 문서의 ObjectId 목록 (참조만 저장, 무결성은 비디오 저장소 담당)
# - refresh_token: 마지막으로 발급한 refresh 토큰

from datetime import datetime, timezone
from typing import Any, List, Optional

from beanie import Document, Indexed, Insert, PydanticObjectId, Replace, Save, SaveChanges, before_event
from fastapi.concurrency import run_in_threadpool
from pydantic import EmailStr, Field, field_validator

from ..core.config import TokenConfig
from ..core.security import create_token, hash_password, is_password_hash, verify_password


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class User(Document):
    username: Indexed(str, unique=True)
    email: Indexed(EmailStr, unique=True)
    full_name: Indexed(str)
    avatar: str
    cover_image: Optional[str] = None
    watch_history: List[PydanticObjectId] = Field(default_factory=list)
    password: str = Field(repr=False)
    refresh_token: Optional[str] = Field(default=None, repr=False)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    class Settings:
        name = "users"  # 컬렉션명

    @field_validator("username", "email", mode="before")
    @classmethod
    def _normalize_identifier(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("full_name", mode="before")
    @classmethod
    def _strip_full_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @classmethod
    async def with_password(cls, password: str, **fields: Any) -> "User":
        """평문 비밀번호를 해시한 뒤 새 User를 만든다 (저장은 하지 않음)"""
        hashed = await run_in_threadpool(hash_password, password)
        return cls(password=hashed, **fields)

    # ---- 쓰기 직전 검사 ----

    @before_event(Insert, Replace, Save, SaveChanges)
    def _ensure_password_hashed(self) -> None:
        if not is_password_hash(self.password):
            raise ValueError("password must be hashed before the user is persisted")

    @before_event(Replace, Save, SaveChanges)
    def _touch_updated_at(self) -> None:
        self.updated_at = _utcnow()

    # ---- 자격 증명 ----

    async def set_password(self, password: str) -> None:
        # 해시가 실패하면 기존 값을 그대로 두고 예외를 올림
        hashed = await run_in_threadpool(hash_password, password)
        self.password = hashed

    async def is_password_correct(self, password: str) -> bool:
        return await run_in_threadpool(verify_password, password, self.password)

    def generate_access_token(self, config: TokenConfig) -> str:
        return create_token(
            {
                "_id": str(self.id),
                "email": self.email,
                "username": self.username,
                "fullName": self.full_name,
            },
            config,
        )

    def generate_refresh_token(self, config: TokenConfig) -> str:
        # refresh 토큰에는 id만 담음
        return create_token({"_id": str(self.id)}, config)

    def add_to_watch_history(self, video_id: PydanticObjectId) -> None:
        self.watch_history.append(video_id)
