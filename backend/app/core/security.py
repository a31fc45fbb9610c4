# 보안/인증 유틸리티
# - 비밀번호 해싱/검증 (bcrypt, cost 10)
# - JWT 토큰 생성/검증
# - 서명키/만료시간은 TokenConfig로 호출 시점에 전달받음

from datetime import datetime, timezone
from typing import Any, Dict
from uuid import uuid4

import jwt
from fastapi import status
from passlib.context import CryptContext

from .config import TokenConfig, settings
from .exceptions import ApiError

# bcrypt는 앞 72바이트만 사용하므로 더 긴 비밀번호는 스키마에서 거부
MAX_PASSWORD_BYTES = 72

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def is_password_hash(value: str) -> bool:
    """저장된 값이 우리가 만든 해시 형식인지 확인 (평문 저장 방지용)"""
    if not value:
        return False
    return pwd_context.identify(value) is not None


def create_token(claims: Dict[str, Any], config: TokenConfig) -> str:
    now = datetime.now(tz=timezone.utc)
    # jti: 같은 초에 발급해도 토큰 문자열이 달라지도록
    payload = {
        "exp": now + config.expires_delta,
        "iat": now,
        "jti": uuid4().hex,
        **claims,
    }
    return jwt.encode(payload, config.secret, algorithm=config.algorithm)


def decode_token(token: str, config: TokenConfig) -> Dict[str, Any]:
    # 만료/서명 불일치 모두 401로 통일
    try:
        return jwt.decode(token, config.secret, algorithms=[config.algorithm])
    except jwt.ExpiredSignatureError:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Token has expired")
    except jwt.PyJWTError:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid token")
