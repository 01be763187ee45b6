# app/core/config.py

import os
from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# 프로젝트의 루트 디렉토리 경로를 계산합니다.
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class Settings(BaseSettings):
    """
    애플리케이션의 모든 설정을 정의하는 Pydantic BaseSettings 모델입니다.
    환경 변수 및 .env 파일에서 값을 자동으로 로드합니다.
    """

    # --- Pydantic Settings 설정 ---
    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, '.env'),  # 프로젝트 루트의 .env 파일
        env_file_encoding='utf-8',
        extra='ignore',                      # 모델에 없는 변수는 무시
        case_sensitive=True
    )

    # --- 애플리케이션 기본 설정 ---
    APP_NAME: str = "User Account API"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "User, credentials and login API"
    APP_ENV: Literal["development", "testing", "production"] = Field(
        "development", description="Application environment (development, testing, production)"
    )
    DEBUG_MODE: bool = Field(False, description="Echo SQL statements and other debug output")
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field("INFO", description="Root log level")

    # --- 데이터베이스 설정 ---
    DATABASE_URL: SecretStr = Field(..., description="Async SQLAlchemy database URL")
    AUTO_CREATE_TABLES: bool = Field(False, description="Create missing tables on startup instead of running Alembic")

    # --- JWT (JSON Web Token) 설정 ---
    SECRET_KEY: SecretStr = Field(..., description="Secret key for token signing. Provision it, never commit it.")
    ALGORITHM: str = Field("HS256", description="Algorithm used for JWT signing")
    ACCESS_TOKEN_EXPIRE_SECONDS: int = Field(600, gt=0, description="Access token lifetime in seconds")

    # --- 비밀번호 해싱 설정 ---
    PASSWORD_HASH_ROUNDS: int = Field(10, ge=4, le=31, description="bcrypt cost factor")

    # --- 인증 전략 설정 ---
    # stub 전략은 토큰을 검사하지 않고 항상 STUB_IDENTITY로 인증합니다. 테스트 전용입니다.
    AUTH_STRATEGY: Literal["jwt", "stub"] = Field("jwt", description="Authentication strategy for gated routes")
    STUB_IDENTITY: str = Field("test@test.com", description="Identity resolved by the stub strategy")

    # --- 백그라운드 작업 (ARQ) 설정 ---
    REDIS_URL: str = Field("redis://localhost:6379", description="Redis DSN used by the ARQ worker")

    @model_validator(mode="after")
    def check_auth_strategy(self) -> "Settings":
        if self.APP_ENV == "production" and self.AUTH_STRATEGY == "stub":
            raise ValueError("AUTH_STRATEGY=stub is not allowed when APP_ENV=production")
        return self


settings = Settings()
