from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    DATABASE_URL: str = "sqlite:///./dev.db"
    APP_HOST: str = "127.0.0.1"
    APP_PORT: int = 8000
    FRONTEND_ORIGINS: List[str] = ["http://localhost:3000"]
    RESET_DB: bool = False
    LOG_LEVEL: str = "INFO"
    # products with stock strictly below this show up on the dashboard
    LOW_STOCK_THRESHOLD: int = 5
    MAX_ORDER_ITEMS: int = 50

settings = Settings()
