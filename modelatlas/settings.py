from __future__ import annotations

import logging
from typing import Annotated, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MODELATLAS_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_title: str = Field(default="Model Atlas API", description="FastAPI application title")
    app_description: str = Field(
        default="Timeline layout and glossary annotation for the robot foundation model catalogue",
        description="Description shown in the OpenAPI document",
    )
    allowed_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by CORS (comma separated in the environment)",
    )
    log_level: str = Field(
        default="INFO",
        description="Application log level (DEBUG/INFO/WARNING/ERROR/CRITICAL)",
    )
    enable_request_logging: bool = Field(
        default=True,
        description="Emit one log line per handled request",
    )
    viewport_width_units: float = Field(
        default=1200.0,
        description="Viewport width used for label collision checks when a request does not give one",
        gt=0,
    )
    max_entities: int = Field(
        default=2_000,
        description="Maximum number of entities accepted by a single request",
        ge=1,
        le=100_000,
    )
    max_text_characters: int = Field(
        default=50_000,
        description="Maximum length of text accepted by the annotate and link endpoints",
        ge=1_000,
        le=1_000_000,
    )
    max_glossary_terms: int = Field(
        default=500,
        description="Maximum number of glossary terms accepted by the annotate endpoint",
        ge=1,
        le=10_000,
    )

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if isinstance(value, str):
            raw = value.strip()
            if raw == "*":
                return ["*"]
            return [origin.strip() for origin in raw.split(",") if origin.strip()]
        return value

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        candidate = value.upper()
        if candidate not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            logging.getLogger("modelatlas.settings").warning(
                "Unknown log level '%s', falling back to INFO.", value
            )
            return "INFO"
        return candidate


settings = Settings()
