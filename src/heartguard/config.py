"""
Application configuration.

Runtime settings for the API process, read from ``HEARTGUARD_*`` environment
variables or a local ``.env`` file. Scoring constants are deliberately not
configurable; they live in code next to ``MODEL_VERSION``.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """API settings from environment variables"""

    app_title: str = "HeartGuard Risk API"
    app_version: str = "1.0"
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    history_max_logs: int = 10_000

    model_config = SettingsConfigDict(env_prefix="HEARTGUARD_", env_file=".env", extra="ignore")


settings = Settings()
