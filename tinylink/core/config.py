from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "tinylink"

    # Infrastructure Configs (Env Vars)
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: str = "5432"
    POSTGRES_DB: str = "tinylink"
    # Full SQLAlchemy URL, takes precedence over the POSTGRES_* parts
    DATABASE_URL: Optional[str] = None

    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    BASE_URL: str = "http://localhost:3000"

    LOG_LEVEL: str = "INFO"
    LOG_ACCESS: bool = False

    # Short code allocation
    URL_COUNTER_KEY: str = "url_counter"
    # Starting at 1 billion keeps codes at six characters from the first link
    INITIAL_URL_COUNTER: int = 1_000_000_000
    AUTO_INITIALIZE_COUNTER: bool = True
    MAX_ALLOCATION_ATTEMPTS: int = 5

    # Resolution cache
    LINK_CACHE_PREFIX: str = "link:"
    LINK_CACHE_TTL: int = 12 * 60 * 60

    # /encode throttling, per client IP
    ENCODE_RATE_LIMIT: int = 20
    ENCODE_RATE_WINDOW: int = 5 * 60

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql://{self.POSTGRES_USER}:"
            f"{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:"
            f"{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )


settings = Settings()
