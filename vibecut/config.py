from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Application
    app_name: str = "Vibecut"
    app_version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"

    # Render service (Shotstack-compatible request/poll API)
    render_api_url: str = "https://api.shotstack.io/stage"
    render_api_key: str = ""
    render_request_timeout_s: float = 30.0
    render_poll_interval_s: float = 3.0
    render_max_polls: int = 200
    # Consecutive transport errors tolerated while polling before giving up
    render_max_poll_errors: int = 3

    # Render output
    render_output_format: str = "mp4"
    render_output_resolution: str = "sd"
    render_aspect_ratio: str = "9:16"
    render_background: str = "#000000"

    # Two-track composition for non-vertical sources
    background_scale: float = 1.8
    background_opacity: float = 0.5

    # Editing
    history_depth: int = 20

    # Timeline generation
    double_dip_threshold_s: float = 30.0
    double_dip_min_length_s: float = 1.5
    personal_start_headroom_s: float = 1.0


@lru_cache
def get_settings() -> Settings:
    return Settings()
