from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, read from the environment and an optional .env file."""

    APP_NAME: str = "Inventory Ledger API"
    APP_VERSION: str = "1.0.0"

    # Database
    DATABASE_URL: str = "sqlite:///./inventory.db"
    # "require" encrypts the connection without verifying the server certificate
    DB_SSLMODE: str = "require"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_CONNECT_TIMEOUT: int = 10
    DB_STATEMENT_TIMEOUT_MS: int = 15000

    # Restrict outflow lookups to products owned by the caller
    OUTFLOW_OWNER_SCOPED: bool = False

    # HTTP
    CORS_ORIGINS: str = "*"
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def database_url(self) -> str:
        """DATABASE_URL with the legacy postgres:// scheme normalized."""
        if self.DATABASE_URL.startswith("postgres://"):
            return "postgresql://" + self.DATABASE_URL[len("postgres://"):]
        return self.DATABASE_URL

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
