from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    ENV: str = "local"
    API_VERSION: str = "dev"
    DATABASE_URL: str = "sqlite:///./fittrack.db"
    ALLOW_ORIGINS: str = "*"

    # Create tables on startup; managed databases use alembic instead
    CREATE_TABLES: bool = True

    # Rest defaults seeded into new profiles (seconds)
    REST_COMPOUND_SEC: int = 150
    REST_ACCESSORY_SEC: int = 90
    REST_AUTO_ADJUST: bool = True

    # Background rest tick granularity
    REST_TICK_SECONDS: float = 1.0

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.ALLOW_ORIGINS.split(",") if o.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

@lru_cache
def get_settings() -> Settings:
    return Settings()
