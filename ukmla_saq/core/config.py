# -*- coding: utf-8 -*-
"""
서비스 설정 (환경 변수에서 한 번 읽어 각 구성 요소에 명시적으로 전달)
"""
import logging
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError

from .errors import ConfigurationError


class ServiceAccountKey(BaseModel):
    """토큰 assertion 서명에 쓰는 서비스 계정 키 항목"""

    model_config = ConfigDict(extra="ignore")

    client_email: str = Field(min_length=1)
    private_key: str = Field(min_length=1)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # 스토어 (Supabase)
    SUPABASE_URL: str = Field(min_length=1)
    SUPABASE_SERVICE_ROLE_KEY: str = Field(min_length=1)

    # Vertex AI
    GOOGLE_CLOUD_PROJECT_ID: str = Field(min_length=1)
    GOOGLE_SERVICE_ACCOUNT_KEY: ServiceAccountKey
    VERTEX_LOCATION: str = "us-central1"
    VERTEX_MODEL: str = "gemini-1.5-pro"

    # 외부 HTTP 호출 (토큰 교환, AI 호출에만 적용)
    HTTP_TIMEOUT_SECONDS: float = 60.0
    RETRY_TOTAL: int = Field(default=3, ge=0)
    RETRY_BACKOFF_FACTOR: float = Field(default=0.5, ge=0)
    RETRY_BACKOFF_JITTER: float = Field(default=0.5, ge=0)

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.strip().upper() if isinstance(value, str) else value


def _describe_validation_error(error):
    problems = []
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"]) or "settings"
        problems.append(f"{field}: {item['msg']}")
    return problems


def load_settings(**overrides):
    """설정 생성 및 검증. 누락/형식 오류는 ConfigurationError"""
    try:
        return Settings(**overrides)
    except PydanticValidationError as e:
        problems = _describe_validation_error(e)
        logging.error(f"Invalid configuration: {problems}")
        raise ConfigurationError(
            "Invalid configuration: " + "; ".join(problems),
            details={"invalid_settings": problems}
        ) from e
    except SettingsError as e:
        # JSON 형식 변수(서비스 계정 키)를 디코딩하지 못한 경우
        logging.error(f"Unreadable configuration: {str(e)}")
        raise ConfigurationError(f"Unreadable configuration: {str(e)}") from e


@lru_cache(maxsize=1)
def get_settings():
    """프로세스 전체에서 공유하는 설정 (첫 호출 시 생성)"""
    settings = load_settings()
    logging.getLogger().setLevel(settings.LOG_LEVEL)
    return settings
