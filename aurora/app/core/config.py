from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings sourced from environment variables."""

    SESSION_COOKIE_NAME: str = "username"
    RESERVATION_CAPACITY: int = 2000
    MAX_NIGHTS: int = 14

    # Static room catalog and its photos
    ROOMS_FILE: str = "rooms.json"
    IMAGES_DIR: str = "room resources"

    # Initial simulation values; POST /config changes them at runtime
    AUTH_MODE: str = "cookie"  # "cookie" or "token"
    ERROR_RATE: float = 0.0

    LOG_LEVEL: str = "INFO"

    model_config = ConfigDict(env_file=".env", extra="ignore")


settings = Settings()
