import logging
from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class Settings(BaseSettings):
    # GitHub Actions exposes `with:` inputs as INPUT_<NAME> variables
    github_token: str = Field(
        ..., validation_alias=AliasChoices("INPUT_GITHUB-TOKEN", "GITHUB_TOKEN")
    )
    openai_api_key: str = Field(
        ..., validation_alias=AliasChoices("INPUT_OPENAI-API-KEY", "OPENAI_API_KEY")
    )
    github_repository: Optional[str] = Field(None, validation_alias="GITHUB_REPOSITORY")
    github_event_path: Optional[str] = Field(None, validation_alias="GITHUB_EVENT_PATH")
    github_api_url: str = Field("https://api.github.com", validation_alias="GITHUB_API_URL")
    review_models: str = Field(
        "gpt-4o", validation_alias=AliasChoices("INPUT_MODELS", "REVIEW_MODELS")
    )
    max_changes: int = Field(500, validation_alias="MAX_CHANGES")
    overview_title: str = Field("GPT-4 Code Review Overview", validation_alias="OVERVIEW_TITLE")
    http_timeout: float = Field(30.0, validation_alias="HTTP_TIMEOUT")
    log_level: str = Field("info", validation_alias="LOG_LEVEL")
    webhook_secret: Optional[str] = Field(None, validation_alias="GITHUB_WEBHOOK_SECRET")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def models(self) -> list[str]:
        return [m.strip() for m in self.review_models.split(",") if m.strip()]


def load_settings(**overrides) -> Settings:
    """
    Build Settings from the environment, turning validation failures into
    ConfigurationError so nothing touches the network without credentials.
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        missing = []
        for err in e.errors():
            loc = err.get("loc") or ("?",)
            missing.append(str(loc[0]))
        raise ConfigurationError(
            f"Missing or invalid configuration: {', '.join(missing)}"
        ) from e


@lru_cache
def get_settings() -> Settings:
    return load_settings()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
