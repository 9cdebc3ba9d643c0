from functools import lru_cache
from pydantic_settings import BaseSettings
import os


class Settings(BaseSettings):
    app_name: str = "Job Board API"
    backend_cors_origins: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./jobboard.db")

    jwt_secret_key: str = os.getenv("JWT_SECRET_KEY", "change-me-access")
    jwt_refresh_secret_key: str = os.getenv("JWT_REFRESH_SECRET_KEY", "change-me-refresh")
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    refresh_token_expire_days: int = 7
    bcrypt_rounds: int = 12

    # CV files
    storage_root: str = os.getenv("STORAGE_ROOT", "storage")
    download_url_ttl_seconds: int = 300
    cv_max_size_kb: int = 2048

    log_level: str = "INFO"

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings():
    return Settings()


settings = get_settings()
