from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings

from accessview.services.query import SortField


class Settings(BaseSettings):
    app_name: str = "access-map-viewer"
    host: str = "127.0.0.1"
    port: int = 7890
    report_url: str = Field(
        default="http://127.0.0.1:7890",
        description="Base URL of the viewer process that may hold an embedded report",
    )
    fetch_timeout_seconds: int = 10
    default_page_size: int = Field(default=10, ge=1)
    default_sort_field: SortField = SortField.RULE
    allowed_report_extensions: List[str] = Field(default_factory=lambda: ["json", "jsonl"])
    log_level: str = "INFO"
    json_logs: bool = False

    class Config:
        env_prefix = "ACCESSVIEW_"
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    return Settings()
