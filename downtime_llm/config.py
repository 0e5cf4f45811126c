"""
Service configuration.

Values come from the environment, with a local .env file loaded first.
"""

import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:3000",
    "http://127.0.0.1:5173",
]


class Settings(BaseModel):
    """Runtime settings for the downtime analysis service."""

    log_level: str = Field("INFO", description="Root logging level")
    cors_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    host: str = Field("0.0.0.0", description="API bind address")
    port: int = Field(8000, ge=1, le=65535, description="API port")
    hours_underreport_ratio: float = Field(
        0.5,
        ge=0.0,
        le=1.0,
        description="AI totals below this share of the file-calculated total are replaced",
    )


def get_settings() -> Settings:
    """Build settings from the current environment."""
    origins = os.getenv("CORS_ORIGINS")
    return Settings(
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        cors_origins=(
            [o.strip() for o in origins.split(",") if o.strip()]
            if origins else list(DEFAULT_CORS_ORIGINS)
        ),
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", "8000")),
        hours_underreport_ratio=float(os.getenv("HOURS_UNDERREPORT_RATIO", "0.5")),
    )
