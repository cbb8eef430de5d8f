from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./ecovive.db"

    # Application
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = [
        "http://0.0.0.0:8000",
        "http://localhost:8000",
        "http://127.0.0.1:8000",
    ]

    # Duplicate detection
    DUPLICATE_RADIUS_METERS: float = 100.0
    DUPLICATE_WINDOW_DAYS: int = 7
    AUTO_FLAG_DUPLICATES: bool = True

    # Rewards
    PHOTO_BONUS_POINTS: int = 5
    # "resolution" credits the reporter when the report is resolved/verified,
    # "creation" credits as soon as the report is filed.
    POINTS_CREDIT_POLICY: Literal["resolution", "creation"] = "resolution"
    REQUIRE_VERIFICATION_NOTES: bool = True

    # Photo storage
    UPLOAD_DIR: str = "uploads"
    UPLOAD_BASE_URL: str = "/uploads"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
