# 요청/응답 스키마 정의 (Pydantic 모델)
# - JSON 키는 camelCase (fullName, coverImage ...), 파이썬 속성은 snake_case

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from ..core.security import MAX_PASSWORD_BYTES


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _check_password_length(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


Password = Annotated[str, AfterValidator(_check_password_length)]


class UserRegister(CamelModel):
    username: str = ""
    email: str = ""
    full_name: str = ""
    password: Password = ""
    avatar: str = ""
    cover_image: Optional[str] = None

    @field_validator("username", "email", "full_name", "avatar", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value


class UserLogin(CamelModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: str = ""


class RefreshTokenRequest(CamelModel):
    refresh_token: Optional[str] = None


class ChangePassword(CamelModel):
    old_password: str
    new_password: Password = Field(min_length=1)


class UpdateAccount(CamelModel):
    full_name: str
    email: EmailStr

    @field_validator("full_name", "email", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value


class UpdateImage(CamelModel):
    url: str = Field(min_length=1)


class UserPublic(CamelModel):
    id: str
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: Optional[str] = None
    watch_history: List[str] = []
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user) -> "UserPublic":
        # password, refresh_token은 절대 응답에 포함하지 않음
        return cls(
            id=str(user.id),
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            avatar=user.avatar,
            cover_image=user.cover_image,
            watch_history=[str(v) for v in user.watch_history],
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LoginResult(TokenPair):
    user: UserPublic
