"""Runtime settings for njson, read from NJSON_* environment variables or a .env file."""
from __future__ import annotations

import codecs
import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """NJSON configuration.

    Every field can be overridden with an environment variable of the same
    name prefixed by NJSON_ (e.g. NJSON_INDENT=2).
    """

    encoding: str = Field(default="utf-8", description="Text encoding used when opening document paths")
    indent: int = Field(default=4, ge=0, description="Spaces per nesting level when writing (0 = single line)")
    log_level: str = Field(default="WARNING", description="Log level applied by the CLI")
    redis_url: str = Field(default="redis://localhost:6379/0", description="Redis URL for the document cache")
    cache_ttl: int = Field(default=300, gt=0, description="Document cache TTL in seconds")

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError:
            raise ValueError(f"unknown encoding {value!r}") from None
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level

    class Config:
        env_prefix = "NJSON_"
        env_file = ".env"


settings = Settings()
