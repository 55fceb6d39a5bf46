# config/settings.py
# ============================================================
# Centralized Configuration for the PDF → PNG Archive Pipeline
# ============================================================
# All settings are loaded from environment variables (or .env file).
# Pydantic validates types and provides sensible defaults. The
# instance is frozen: the converter receives it once and never
# mutates it. Derive overrides with settings.model_copy(update=...).
#
# Usage:
#   from config.settings import settings
#   converter = PdfConverter(settings=settings)
# ============================================================

from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Settings(BaseSettings):
    """
    Application-wide settings. Values are loaded from environment variables
    or a .env file. Every setting has a typed default so the app can run
    out-of-the-box with zero configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # --- Rendering ---
    render_scale: float = Field(
        default=2.0,
        gt=0,
        description="Upscaling factor applied to the page's native geometry (2.0 = sharp on HiDPI/print).",
    )
    preview_scale: float = Field(
        default=0.3,
        gt=0,
        le=1,
        description="Downscale factor for the thumbnail previews, relative to the rendered page.",
    )
    poppler_path: Optional[str] = Field(
        default=None,
        description="Directory holding the poppler binaries (pdftoppm). None = look up on PATH.",
    )

    # --- Failure policy ---
    page_error_policy: Literal["skip", "abort"] = Field(
        default="skip",
        description="What to do when a page encodes to no data: skip it silently or abort the conversion.",
    )

    # --- Output ---
    archive_suffix: str = Field(
        default="_images.zip",
        description="Suffix appended to the input's base name to form the archive name.",
    )
    output_dir: str = Field(
        default="output",
        description="Default directory the CLI writes archives into.",
    )

    # --- Logging ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level: DEBUG | INFO | WARNING | ERROR.",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value


# ============================================================
# Singleton instance — import this everywhere:
#   from config.settings import settings
# ============================================================
settings = Settings()
