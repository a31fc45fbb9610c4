# 사용자 저장소 레이어
# - 데이터 접근(조회/생성/저장)만 담당 (서비스 로직 분리)
# - username/email 중복은 MongoDB unique 인덱스가 최종 판단

import logging
from typing import Optional

from beanie import PydanticObjectId
from beanie.operators import Or
from bson.errors import InvalidId
from fastapi import status
from pymongo.errors import DuplicateKeyError

from ..core.exceptions import ApiError
from ..models.user import User

logger = logging.getLogger(__name__)


class UserRepository:
    async def get(self, user_id: str) -> Optional[User]:
        try:
            oid = PydanticObjectId(user_id)
        except (InvalidId, TypeError):
            return None
        return await User.get(oid)

    async def get_by_email(self, email: str) -> Optional[User]:
        return await User.find_one(User.email == email.strip().lower())

    async def get_by_username_or_email(self, username: Optional[str] = None, email: Optional[str] = None) -> Optional[User]:
        conditions = []
        if username:
            conditions.append(User.username == username.strip().lower())
        if email:
            conditions.append(User.email == email.strip().lower())
        if not conditions:
            return None
        return await User.find_one(Or(*conditions))

    async def create(self, user: User) -> User:
        try:
            return await user.insert()
        except DuplicateKeyError:
            # 동시에 같은 username/email로 가입한 경우 두 번째 쓰기가 여기로 옴
            logger.info(f"Duplicate user rejected by unique index: {user.username}")
            raise ApiError(status.HTTP_409_CONFLICT, "User with email or username already exists")

    async def save(self, user: User) -> User:
        return await user.save()
