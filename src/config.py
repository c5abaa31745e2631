"""Loot generation configuration loaded from environment variables and .env file."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Loot subsystem settings.

    Values are loaded from environment variables first,
    then from a .env file in the project root as fallback.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    LOG_LEVEL: str = "INFO"

    # None이면 내장 기본 테이블 사용
    LOOT_DATA_PATH: Optional[str] = None
    DEFAULT_LOOT_TABLE: str = "depth_1_5"
    MAX_TABLE_DEPTH: int = 8

    # 세션 시드 (make_rng 기본값)
    WORLD_SEED: Optional[int] = None


settings = Settings()
