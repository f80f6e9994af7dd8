"""
Application configuration using Pydantic Settings
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = "sqlite:///./data/booth_booking.db"

    # Application
    APP_NAME: str = "Booth booker"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # Security
    SECRET_KEY: str = "secure-secret-key-1234567890"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Booking rules
    MAX_BOOTHS_PER_EXHIBITION: int = 6


settings = Settings()
