# app/core/config.py

from typing import Any, List
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# 프로젝트의 루트 디렉토리 경로를 계산합니다.
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class Settings(BaseSettings):
    """
    애플리케이션의 모든 설정을 정의하는 Pydantic BaseSettings 모델입니다.
    환경 변수 및 .env 파일에서 값을 자동으로 로드합니다.
    """

    # --- Pydantic Settings 설정 ---
    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, '.env'),  # 프로젝트 루트의 .env 파일을 명시적으로 지정
        env_file_encoding='utf-8',
        extra='ignore',                      # .env 파일에 정의되었지만 모델에 없는 변수는 무시
        case_sensitive=True                  # 환경 변수 이름 대소문자 구분
    )

    # --- 애플리케이션 기본 설정 ---
    APP_NAME: str = "DFMS FastAPI API"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Drone Fleet Maintenance System (DFMS) API"
    APP_ENV: str = Field("development", description="Application environment (e.g., development, production, testing)")
    DEBUG_MODE: bool = Field(False, description="Enable debug mode for detailed logging and SQL echo")
    LOG_LEVEL: str = Field("INFO", description="Root logger level (DEBUG, INFO, WARNING, ...)")

    # --- 데이터베이스 설정 ---
    DATABASE_URL: SecretStr = Field(..., description="Async database connection URL (postgresql+asyncpg://...)")
    AUTO_CREATE_TABLES: bool = Field(False, description="Create missing tables on application startup")

    # --- 세션/매직링크 토큰 설정 ---
    SECRET_KEY: SecretStr = Field(..., description="Secret key for magic-link token signing. Keep this highly secure!")
    ALGORITHM: str = Field("HS256", description="Algorithm used for JWT signing (e.g., HS256)")
    SESSION_EXPIRE_HOURS: int = Field(24, description="Session validity window in hours")
    MAGIC_LINK_EXPIRE_MINUTES: int = Field(15, description="Magic-link verification token lifetime in minutes")
    MAGIC_LINK_BASE_URL: str = Field(
        "http://localhost:8000/api/v1/usr/auth/session/verify",
        description="URL the emailed magic link points at (token is appended as a query parameter)"
    )

    # --- ARQ(Redis) 설정 ---
    REDIS_HOST: str = Field("localhost", description="Redis host for the ARQ task queue")
    REDIS_PORT: int = Field(6379, description="Redis port for the ARQ task queue")

    # --- CORS ---
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")

    def model_post_init(self, __context: Any) -> None:  # noqa: ANN001
        # 운영 환경에서 디버그 모드가 켜져 있으면 SQL 출력만 끕니다.
        if self.APP_ENV == "production" and self.DEBUG_MODE:
            self.DEBUG_MODE = False


settings = Settings()
