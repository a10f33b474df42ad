"""Application configuration."""

from typing import Annotated, Any, Literal, Self

from pydantic import (
    AnyUrl,
    BeforeValidator,
    HttpUrl,
    computed_field,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",")]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "mixhub"
    VERSION: str = "0.1.0"
    SERVER_PORT: int = 3001
    ROOTPATH: str = ""
    API_PREFIX: str = "/api"
    FRONTEND_HOST: str = "http://localhost:3000"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    STATIC_DIR: str | None = None  # 浏览器客户端静态资源目录（可选）

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []

    @computed_field
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS] + [
            self.FRONTEND_HOST
        ]

    CORS_ALLOW_METHODS: list[str] = ["GET", "POST", "PUT", "OPTIONS"]
    CORS_ALLOW_HEADERS: list[str] = ["*"]

    # Sentry
    SENTRY_DSN: HttpUrl | None = None

    # Cache
    CACHE_BACKEND: Literal["redis", "memory", "none"] = "redis"
    REDIS_URL: str | None = None  # 未配置时降级为 no-op 缓存
    REDIS_PING_TIMEOUT_SEC: float = 5.0
    CATALOG_CACHE_KEY: str = "youtube_channel_videos"
    CATALOG_CACHE_TTL_SEC: int = 3600  # 1 hour

    # Rate limiting (per client IP, fixed window)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_MAX_REQUESTS: int = 1000
    RATE_LIMIT_WINDOW_SEC: int = 900  # 15 minutes
    TRUST_PROXY_HEADERS: bool = False  # 仅在反向代理之后开启

    # Outbound HTTP
    HTTP_USER_AGENT: str = "mixhub-backend/0.1 (+https://github.com/mixhub)"

    # YouTube catalog source
    YOUTUBE_API_BASE_URL: str = "https://www.googleapis.com/youtube/v3"
    YOUTUBE_API_KEY: str | None = None
    YOUTUBE_CHANNEL_ID: str | None = None
    YOUTUBE_MAX_RESULTS: int = 50
    CATALOG_FETCH_TIMEOUT_SEC: float = 10.0
    SOURCE_URL_TEMPLATE: str = "https://www.youtube.com/watch?v={item_id}"

    # GiftedTech conversion service
    GIFTED_API_BASE_URL: str = "https://api.giftedtech.web.id/api/download"
    GIFTED_API_KEY: str | None = None
    CONVERSION_TIMEOUT_SEC: float = 30.0
    DOWNLOAD_LINK_TTL_HOURS: int = 24  # 仅对客户端声明，真实过期由上游控制
    STREAM_DEFAULT_QUALITY: str = "320kbps"

    # Waveform
    WAVEFORM_SAMPLES: int = 100
    WAVEFORM_DEFAULT_DURATION_SEC: int = 180

    @computed_field
    @property
    def catalog_source_configured(self) -> bool:
        return bool(self.YOUTUBE_API_KEY and self.YOUTUBE_CHANNEL_ID)

    @computed_field
    @property
    def conversion_configured(self) -> bool:
        return bool(self.GIFTED_API_KEY)

    @model_validator(mode="after")
    def _check_timeouts(self) -> Self:
        if self.CONVERSION_TIMEOUT_SEC <= 0 or self.CATALOG_FETCH_TIMEOUT_SEC <= 0:
            raise ValueError("Outbound timeouts must be positive")
        if self.RATE_LIMIT_WINDOW_SEC <= 0:
            raise ValueError("RATE_LIMIT_WINDOW_SEC must be positive")
        return self


settings = Settings()
