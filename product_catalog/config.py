from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables (or a .env file).
    """
    APP_NAME: str = "Products CRUD API"
    APP_VERSION: str = "1.0.0"

    HOST: str = "0.0.0.0"
    PORT: int = 8080

    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB: str = "productcatalog"
    MONGODB_TIMEOUT_MS: int = 5000

    API_PREFIX: str = "/api/productcatalog"
    DOCS_URL: str = "/api-docs"
    CORS_ORIGINS: str = "*"

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def cors_origin_list(self) -> List[str]:
        """Split the comma-separated CORS_ORIGINS value."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
