from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MOVIE_MATCH_")

    log_level: str = "INFO"
    log_json: bool = True
    matching_config_path: Path = Path("./config/matching.yaml")


@lru_cache
def get_settings() -> Settings:
    return Settings()
