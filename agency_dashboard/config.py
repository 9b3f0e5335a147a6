from pydantic_settings import BaseSettings
from dotenv import load_dotenv

from agency_dashboard.errors import ConfigurationError

load_dotenv()

class Settings(BaseSettings):
    database_url: str = "postgresql://localhost:5432/agency_dashboard"

    # Security
    JWT_SECRET: str | None = None
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # Provisioned admin account
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "Admin@12345"
    ADMIN_DISPLAY_NAME: str = "Admin"
    ADMIN_LEGACY_SUBJECT: str = "admin-user"

    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None

    class Config:
        env_file = ".env"
        extra = "ignore"


def load_settings(**overrides) -> Settings:
    loaded = Settings(**overrides)
    if not loaded.JWT_SECRET:
        raise ConfigurationError("JWT_SECRET is not set; refusing to start without a token signing secret")
    return loaded


settings = load_settings()
