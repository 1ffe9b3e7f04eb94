"""应用配置管理."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_OPML_URL = "https://labs.landsurveyorsunited.com/opml/combined.opml"


class Settings(BaseSettings):
    """应用配置（环境变量）."""

    model_config = SettingsConfigDict(
        env_prefix="FEEDSYNC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # 存储配置
    database_url: str = "sqlite+aiosqlite:///./feedsync.db"

    # 首次启动时导入的默认订阅
    default_opml_url: str = DEFAULT_OPML_URL

    # 抓取配置
    fetch_timeout_seconds: int = 30
    user_agent: str = "feedsync/0.1"

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """获取应用配置（带缓存）."""
    return Settings()
