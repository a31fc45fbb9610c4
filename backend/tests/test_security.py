# 보안 유닛 테스트 (DB 의존성 없음)
from datetime import timedelta

import jwt
import pytest

from app.core.config import TokenConfig, settings
from app.core.exceptions import ApiError
from app.core.security import create_token, decode_token, hash_password, is_password_hash, verify_password


def test_password_hash_and_verify():
    pw = "S3cure!"
    hashed = hash_password(pw)
    assert hashed != pw
    assert verify_password(pw, hashed)
    assert not verify_password("wrong", hashed)


def test_password_hash_uses_bcrypt_cost_10():
    hashed = hash_password("secret123")
    assert hashed.startswith("$2b$10$")


def test_same_password_hashes_differently():
    assert hash_password("secret123") != hash_password("secret123")


def test_is_password_hash():
    assert is_password_hash(hash_password("secret123"))
    assert not is_password_hash("secret123")
    assert not is_password_hash("")


def test_create_and_decode_token():
    config = settings.access_token_config()
    token = create_token({"_id": "user123"}, config)
    decoded = jwt.decode(token, settings.ACCESS_TOKEN_SECRET, algorithms=[settings.JWT_ALGORITHM])
    assert decoded["_id"] == "user123"
    assert decode_token(token, config)["_id"] == "user123"
    assert decoded["exp"] - decoded["iat"] == settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60


def test_access_token_rejected_by_refresh_secret():
    token = create_token({"_id": "user123"}, settings.access_token_config())
    with pytest.raises(ApiError) as exc_info:
        decode_token(token, settings.refresh_token_config())
    assert exc_info.value.status_code == 401


def test_refresh_token_rejected_by_access_secret():
    token = create_token({"_id": "user123"}, settings.refresh_token_config())
    with pytest.raises(ApiError) as exc_info:
        decode_token(token, settings.access_token_config())
    assert exc_info.value.status_code == 401


def test_expired_token():
    config = TokenConfig(secret="s", expires_delta=timedelta(seconds=-5))
    token = create_token({"_id": "user123"}, config)
    with pytest.raises(ApiError) as exc_info:
        decode_token(token, config)
    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Token has expired"


def test_token_config_hides_secret():
    assert "test-access-secret" not in repr(settings.access_token_config())
