"""설정 관리 모듈."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """애플리케이션 설정."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # GitHub
    github_api_url: str = Field(
        default="https://api.github.com",
        description="GitHub REST API 기본 URL",
    )
    github_web_url: str = Field(
        default="https://github.com",
        description="GitHub 웹 기본 URL",
    )

    # OAuth
    oauth_client_id: str = Field(default="", description="OAuth App client ID")
    oauth_gateway_url: str = Field(
        default="",
        description="code를 access token으로 교환해주는 게이트웨이 URL",
    )
    redirect_uri: str = Field(
        default="http://localhost:8000/",
        description="OAuth 인증 후 돌아올 URL",
    )

    # 요청
    per_page: int = Field(
        default=100,
        ge=1,
        le=100,
        description="검색 API 페이지 크기",
    )
    request_timeout: float = Field(
        default=10.0,
        gt=0,
        description="HTTP 요청 타임아웃 (초)",
    )
    enrich_concurrency: int = Field(
        default=8,
        ge=1,
        description="저장소/PR 상세 정보 동시 요청 수",
    )

    # 저장소
    token_store_path: Path = Field(
        default=Path.home() / ".contrib-sieve" / "auth.json",
        description="access token 저장 파일 경로",
    )

    log_level: str = Field(default="INFO", description="로그 레벨")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """표준 로그 레벨인지 확인한다."""
        v_upper = v.upper()
        if v_upper not in LOG_LEVELS:
            raise ValueError(f"Log level must be one of: {', '.join(LOG_LEVELS)}")
        return v_upper

    @field_validator("github_api_url", "github_web_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


settings = Settings()
