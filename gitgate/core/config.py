from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="GITGATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="gitgate", description="Application name")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Logging level"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", description="Log output format"
    )

    git_binary_path: str = Field(default="git", description="Path to git binary")
    git_timeout_seconds: int = Field(
        default=60, description="Timeout for a single git query in seconds"
    )

    config_file_name: str = Field(
        default=".gitgate.yml",
        description="Configuration file looked up at the repository top level",
    )
    config_file: Optional[Path] = Field(
        default=None, description="Explicit configuration file (overrides lookup)"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v

    @property
    def is_debug(self) -> bool:
        return self.log_level == "DEBUG"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
