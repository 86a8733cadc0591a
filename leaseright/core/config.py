from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "LeaseRight Gateway"
    BACKEND_BASE_URL: str = "http://localhost:8080"
    USE_BACKEND_API: bool = True
    REQUEST_TIMEOUT: float = 30.0
    LOCAL_STORE_PATH: str = "leaseright_store.json"
    EXPIRING_SOON_DAYS: int = 7
    DEFAULT_PAGE_SIZE: int = 5
    OTP_PENDING_MINUTES: int = 10
    LOG_LEVEL: str = "INFO"
    ADMIN_EMAIL: str = "admin@leaseright.com"
    ADMIN_PASSWORD: str = "Admin@123"
    CORS_ORIGINS: List[str] = ["*"]

    class Config:
        env_file = ".env"

settings = Settings()
