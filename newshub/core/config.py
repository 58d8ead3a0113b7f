"""Application configuration."""

from typing import Annotated, Any, Literal

from pydantic import AnyUrl, BeforeValidator, computed_field
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",")]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


def parse_prefixes(v: Any) -> list[str]:
    """Relay prefixes may come from the environment as a comma separated string."""
    if isinstance(v, str):
        return [i.strip() for i in v.split(",") if i.strip()]
    if isinstance(v, list | tuple):
        return [str(i) for i in v]
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "newsHub"
    SERVER_PORT: int = 8000
    ROOTPATH: str = ""
    API_V1_STR: str = "/api/v1"
    FRONTEND_HOST: str = "http://localhost:3000"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []
    CORS_ALLOW_METHODS: list[str] = ["GET", "POST"]
    CORS_ALLOW_HEADERS: list[str] = ["*"]

    @computed_field
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS] + [
            self.FRONTEND_HOST
        ]

    # Feed fetching
    FEED_FETCH_TIMEOUT_MS: int = 8000
    FEED_REFRESH_INTERVAL_SEC: int = 300  # 5 minutes
    FEED_SCHEDULER_ENABLED: bool = True
    FEED_DIRECT_FIRST: bool = True  # 先直连，再走中继
    FEED_RELAY_PREFIXES: Annotated[list[str], NoDecode, BeforeValidator(parse_prefixes)] = [
        "https://api.allorigins.win/raw?url=",
        "https://corsproxy.io/?",
    ]
    FEED_USER_AGENT: str = "Mozilla/5.0 (compatible; newsHub/1.0; RSS reader)"
    FEED_ACCEPT_HEADER: str = "application/rss+xml, application/xml, text/xml, */*"


settings = Settings()
