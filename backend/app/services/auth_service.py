# 인증/계정 서비스 레이어
# - 회원가입 (필수값 검사, username/email 중복 체크)
# - 로그인 (비밀번호 검증, Access/Refresh 토큰 발급 + refresh 토큰 저장)
# - 로그아웃, refresh 토큰 회전, 비밀번호 변경, 프로필 수정, 시청 기록

import logging
from typing import List, Optional

from beanie import PydanticObjectId
from bson.errors import InvalidId
from fastapi import Depends, status
from pydantic import ValidationError

from ..core.config import Settings, settings
from ..core.exceptions import ApiError
from ..core.security import decode_token
from ..models.user import User
from ..repositories.user_repository import UserRepository
from ..schemas.user_schema import TokenPair, UserRegister

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, repo: UserRepository, config: Settings = settings):
        self.repo = repo
        self.access_config = config.access_token_config()
        self.refresh_config = config.refresh_token_config()

    async def register(self, payload: UserRegister) -> User:
        required = {
            "username": payload.username,
            "email": payload.email,
            "fullName": payload.full_name,
            "password": payload.password,
            "avatar": payload.avatar,
        }
        missing = [name for name, value in required.items() if not value or not value.strip()]
        if missing:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "All fields are required", [{"field": name} for name in missing])

        existing = await self.repo.get_by_username_or_email(payload.username, payload.email)
        if existing:
            raise ApiError(status.HTTP_409_CONFLICT, "User with email or username already exists")

        try:
            user = await User.with_password(
                payload.password,
                username=payload.username,
                email=payload.email,
                full_name=payload.full_name,
                avatar=payload.avatar,
                cover_image=payload.cover_image or None,
            )
        except ValidationError as exc:
            errors = [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()]
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Invalid user data", errors)
        user = await self.repo.create(user)
        logger.info(f"User registered: {user.username}")
        return user

    async def issue_tokens(self, user: User) -> TokenPair:
        access = user.generate_access_token(self.access_config)
        refresh = user.generate_refresh_token(self.refresh_config)
        user.refresh_token = refresh
        await self.repo.save(user)
        return TokenPair(access_token=access, refresh_token=refresh)

    async def login(self, password: str, username: Optional[str] = None, email: Optional[str] = None):
        if not username and not email:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Username or email is required")

        user = await self.repo.get_by_username_or_email(username, email)
        if not user:
            raise ApiError(status.HTTP_404_NOT_FOUND, "User does not exist")

        if not await user.is_password_correct(password):
            logger.info(f"Rejected login for {user.username}: invalid credentials")
            raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid user credentials")

        tokens = await self.issue_tokens(user)
        logger.info(f"User logged in: {user.username}")
        return user, tokens

    async def logout(self, user: User) -> None:
        user.refresh_token = None
        await self.repo.save(user)
        logger.info(f"User logged out: {user.username}")

    async def refresh(self, incoming_token: Optional[str]):
        if not incoming_token:
            raise ApiError(status.HTTP_401_UNAUTHORIZED, "Unauthorized request")

        payload = decode_token(incoming_token, self.refresh_config)
        user = await self.repo.get(payload.get("_id", ""))
        if not user:
            raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid refresh token")

        # 이미 회전되었거나 로그아웃된 토큰은 재사용 불가
        if incoming_token != user.refresh_token:
            logger.warning(f"Stale refresh token presented for {user.username}")
            raise ApiError(status.HTTP_401_UNAUTHORIZED, "Refresh token is expired or used")

        tokens = await self.issue_tokens(user)
        return user, tokens

    async def change_password(self, user: User, old_password: str, new_password: str) -> None:
        if not await user.is_password_correct(old_password):
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Invalid old password")
        await user.set_password(new_password)
        await self.repo.save(user)
        logger.info(f"Password changed: {user.username}")

    async def update_account(self, user: User, full_name: str, email: str) -> User:
        if not full_name or not email:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "All fields are required")
        other = await self.repo.get_by_email(email)
        if other and other.id != user.id:
            raise ApiError(status.HTTP_409_CONFLICT, "User with email or username already exists")
        user.full_name = full_name.strip()
        user.email = email.strip().lower()
        return await self.repo.save(user)

    async def update_avatar(self, user: User, url: str) -> User:
        if not url:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Avatar url is missing")
        user.avatar = url
        return await self.repo.save(user)

    async def update_cover_image(self, user: User, url: str) -> User:
        if not url:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Cover image url is missing")
        user.cover_image = url
        return await self.repo.save(user)

    async def add_to_watch_history(self, user: User, video_id: str) -> User:
        try:
            oid = PydanticObjectId(video_id)
        except (InvalidId, TypeError):
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Invalid video id")
        user.add_to_watch_history(oid)
        return await self.repo.save(user)

    def get_watch_history(self, user: User) -> List[str]:
        return [str(video_id) for video_id in user.watch_history]


def get_auth_service(repo: UserRepository = Depends(UserRepository)) -> AuthService:
    return AuthService(repo)
