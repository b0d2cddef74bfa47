from pathlib import Path

from pydantic_settings import BaseSettings

DEFAULT_SEED_PATH = Path(__file__).resolve().parent / "data" / "calendar_seed.json"


class Settings(BaseSettings):
    ENV: str = "development"
    SEED_PATH: str = str(DEFAULT_SEED_PATH)
    CALGRID_STORE: str = "memory"
    DATABASE_URL: str = "sqlite:///:memory:"
    HOST: str = "0.0.0.0"
    PORT: int = 8000


settings = Settings()
