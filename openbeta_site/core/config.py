from __future__ import annotations

from pydantic import BaseModel, Field
from dotenv import load_dotenv
import os


def load_env() -> None:
    load_dotenv()


class Settings(BaseModel):
    database_url: str = Field("sqlite:///openbeta.db", alias="DATABASE_URL")
    areas_dir: str = Field("content/areas", alias="AREAS_DIR")
    pages_dir: str = Field("content/pages", alias="PAGES_DIR")
    output_dir: str = Field("public", alias="OUTPUT_DIR")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    api_host: str = Field("127.0.0.1", alias="API_HOST")
    api_port: int = Field(8000, alias="API_PORT")


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        load_env()
        _settings = Settings(**os.environ)
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
