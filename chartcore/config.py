"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    chartcore_env: str = "development"
    chartcore_log_level: str = "info"

    # Decimals kept when formatting coordinates into path data
    path_precision: int = 3

    # Label bounding-box heuristic (sans-serif average glyph width per px of font size)
    label_char_width: float = 0.55
    label_font_size: float = 14.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()


def get_settings() -> Settings:
    return settings
