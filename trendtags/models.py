from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/118.0 Safari/537.36"
)


class ServerSettings(BaseModel):
    host: str = Field("0.0.0.0", description="Interface the API binds to")
    port: int = Field(8000, ge=1, le=65535)
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    max_body_bytes: int = Field(1024 * 1024, ge=1, description="Largest accepted JSON body")


class RateLimitSettings(BaseModel):
    enabled: bool = True
    points: int = Field(25, ge=1, description="Requests allowed per window and client")
    duration: int = Field(60, ge=1, description="Window length in seconds")
    storage_uri: str = Field("memory://", description="limits storage backend, e.g. redis://host:6379/0")

    @property
    def limit_string(self) -> str:
        return f"{self.points} per {self.duration} seconds"


class StorageSettings(BaseModel):
    path: str = Field("data/trends.duckdb", description="DuckDB database file")


class ScraperSettings(BaseModel):
    source: str = Field("tiktok", description="Connector name")
    url: str = Field("https://www.tiktok.com/discover", description="Page listing trending hashtags")
    countries: List[str] = Field(default_factory=lambda: ["global"])
    interval_minutes: int = Field(60, description="Minutes between scheduled refreshes (minimum 1)")
    render: bool = Field(True, description="Render with Playwright instead of a plain HTTP fetch")
    headless: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    timeout_ms: int = Field(90000, ge=1000)
    settle_ms: int = Field(5000, ge=0, description="Wait after load for dynamic content")
    dom_weight: int = Field(5, ge=0, description="Score added per hashtag found in trending DOM nodes")
    max_hashtags: int = Field(150, ge=1)


class RecommendSettings(BaseModel):
    default_country: str = "global"
    default_limit: int = Field(12, ge=0)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TRENDTAGS_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    server: ServerSettings = Field(default_factory=ServerSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    scraper: ScraperSettings = Field(default_factory=ScraperSettings)
    recommend: RecommendSettings = Field(default_factory=RecommendSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        # Environment wins over values loaded from the YAML file.
        return env_settings, init_settings, dotenv_settings, file_secret_settings


class HashtagScore(BaseModel):
    tag: str
    score: int = Field(0, ge=0)


class TrendSnapshot(BaseModel):
    """Ranked hashtags scraped for one country."""

    model_config = ConfigDict(populate_by_name=True)

    country: str = "global"
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
    hashtags: List[HashtagScore] = Field(default_factory=list)
    count: int = 0
    source: Optional[str] = None

    @classmethod
    def empty(cls, country: str) -> "TrendSnapshot":
        return cls(country=country.lower())

    def dict_for_response(self) -> Dict[str, Any]:
        payload = self.model_dump(mode="json", by_alias=True)
        payload.pop("country", None)
        return payload


class GenerateRequest(BaseModel):
    text: Optional[str] = None
    country: Optional[str] = None
    limit: Optional[int] = Field(None, ge=0)


class GenerateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    generated: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    source_updated_at: Optional[datetime] = Field(None, alias="sourceUpdatedAt")
