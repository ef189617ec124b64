"""Runtime configuration using pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Decoder defaults, overridable through ``BLOBCURSOR_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="BLOBCURSOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    byte_order: Literal["<", ">"] = Field(
        default="<",
        description="Byte order used until a descriptor sets one, and for '='",
    )
    int_size: int = Field(
        default=4,
        ge=1,
        le=8,
        description="Width in bytes of a bare 'i' / 'I'",
    )
    max_alignment: int = Field(
        default=8,
        ge=1,
        description="Alignment selected by a bare '!'",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
