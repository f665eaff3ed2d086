from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

TRACKING_END_POINT = "https://track.customer.io/api/v1"
API_END_POINT = "https://api.customer.io/v1/api"
USER_AGENT = "customerio-async/0.1 (+https://customer.io/docs/api/)"


class Settings(BaseSettings):
    site_id: str = ""
    api_key: str = ""
    tracking_url: str = TRACKING_END_POINT
    api_url: str = API_END_POINT
    tracking_rate_limit: int = 30
    api_rate_limit: int = 10
    rate_limit_interval: float = 1.0
    rate_limit_policy: Literal["rolling", "fixed"] = "rolling"
    timeout: float = 60.0
    max_connections: int = 4
    user_agent: str = USER_AGENT
    log_format: str = "text"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="CUSTOMERIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
