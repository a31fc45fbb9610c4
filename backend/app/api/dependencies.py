# 공통 의존성
# - 현재 사용자 가져오기: accessToken 쿠키 또는 Authorization: Bearer 헤더

from typing import Optional

from fastapi import Cookie, Depends, status
from fastapi.security import OAuth2PasswordBearer

from ..core.config import settings
from ..core.exceptions import ApiError
from ..core.security import decode_token
from ..models.user import User
from ..repositories.user_repository import UserRepository

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/users/login", auto_error=False)


async def get_current_user(
    bearer: Optional[str] = Depends(oauth2_scheme),
    access_token: Optional[str] = Cookie(default=None, alias=ACCESS_TOKEN_COOKIE),
    repo: UserRepository = Depends(UserRepository),
) -> User:
    token = access_token or bearer
    if not token:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Unauthorized request")

    payload = decode_token(token, settings.access_token_config())
    user = await repo.get(payload.get("_id", ""))
    if not user:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid access token")
    return user
