# 설정 모듈
# - .env 값들을 한 곳에서 관리
# - 토큰 서명키/만료시간은 기본값 없이 반드시 환경변수로 주입
# - 토큰 함수에는 전역 settings 대신 TokenConfig 객체를 넘겨서 사용

from datetime import timedelta
from pathlib import Path
from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# 프로젝트 루트 디렉토리 경로 찾기
# 이 파일은 backend/app/core/config.py 이므로 4단계 위가 프로젝트 루트입니다.
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
ENV_FILE_PATH = PROJECT_ROOT / ".env"


class TokenConfig(BaseModel):
    """JWT 한 종류(access 또는 refresh)를 발급/검증할 때 필요한 설정 묶음"""

    model_config = ConfigDict(frozen=True)

    secret: str = Field(repr=False)
    expires_delta: timedelta
    algorithm: str = "HS256"


class Settings(BaseSettings):
    APP_NAME: str = "videotube"
    ENV: str = "dev"
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    MONGODB_URI: str = "mongodb://localhost:27017/videotube"
    MONGODB_CONNECT_ATTEMPTS: int = 3

    CORS_ORIGIN: str = "http://localhost:5173,http://localhost:3000"

    ACCESS_TOKEN_SECRET: str = Field(..., description="Access 토큰 서명 비밀키. 강력한 랜덤 문자열로 설정하세요.")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    REFRESH_TOKEN_SECRET: str = Field(..., description="Refresh 토큰 서명 비밀키. Access 키와 달라야 합니다.")
    REFRESH_TOKEN_EXPIRE_DAYS: int = 10
    JWT_ALGORITHM: str = "HS256"

    # bcrypt work factor
    BCRYPT_ROUNDS: int = 10

    # 요청 본문 최대 크기 (bytes)
    MAX_BODY_BYTES: int = 16 * 1024

    # 쿠키 secure 플래그 (로컬 http 테스트 시에만 false)
    COOKIE_SECURE: bool = True

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE_PATH) if ENV_FILE_PATH.exists() else ".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGIN.split(",") if o.strip()]

    def access_token_config(self) -> TokenConfig:
        return TokenConfig(
            secret=self.ACCESS_TOKEN_SECRET,
            expires_delta=timedelta(minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES),
            algorithm=self.JWT_ALGORITHM,
        )

    def refresh_token_config(self) -> TokenConfig:
        return TokenConfig(
            secret=self.REFRESH_TOKEN_SECRET,
            expires_delta=timedelta(days=self.REFRESH_TOKEN_EXPIRE_DAYS),
            algorithm=self.JWT_ALGORITHM,
        )


settings = Settings()
