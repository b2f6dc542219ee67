"""Application configuration.

Loads settings from environment variables with the TODOKIT_ prefix, or
from a .env file in the working directory. Nested values use a double
underscore, e.g. TODOKIT_DB__HOST.
"""

from pydantic import BaseModel, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseModel):
    """PostgreSQL connection and pool options."""

    host: str = "localhost"
    port: int = 5432
    user: str = "postgres"
    password: SecretStr = SecretStr("postgres")
    name: str = "todokit"
    ssl_mode: str = "disable"
    debug: bool = False
    min_pool_size: int = 1
    max_pool_size: int = 10
    statement_timeout: float | None = 30.0

    def dsn(self) -> str:
        """Build the asyncpg DSN for these settings."""
        return (
            f"postgresql://{self.user}:{self.password.get_secret_value()}"
            f"@{self.host}:{self.port}/{self.name}?sslmode={self.ssl_mode}"
        )


class Settings(BaseSettings):
    """todokit application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="TODOKIT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    db: DatabaseSettings = DatabaseSettings()
    pagination_max_size: int = 100
    log_level: str = "INFO"


def get_settings() -> Settings:
    """Create and return a Settings instance.

    Wraps validation failures in a RuntimeError with a hint about where
    the values are read from.
    """
    try:
        return Settings()
    except Exception as e:
        raise RuntimeError(
            f"Failed to load todokit settings: {e}\n"
            "Set TODOKIT_* environment variables or provide a .env file."
        ) from e
