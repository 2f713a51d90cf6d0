# clinic_schedule/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore")

    APP_NAME: str = "Clinic Schedule API"

    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "clinic"
    DB_PASSWORD: str = ""
    DB_NAME: str = "clinic_schedule"
    # si viene, pisa la URL armada con DB_* (tests usan sqlite+aiosqlite)
    DATABASE_URL: str | None = None

    # --- calendario ---
    CALENDAR_START_HOUR: int = Field(8, ge=0, le=23)
    CALENDAR_END_HOUR: int = Field(18, ge=1, le=24)
    CALENDAR_SLOT_MINUTES: int = Field(30, ge=1, le=60)
    CALENDAR_ROW_HEIGHT: float = 70
    CALENDAR_SLOT_MARGIN: float = 4
    CALENDAR_MIN_CARD_HEIGHT: float = 20

    # --- store ---
    FETCH_TIMEOUT_SECONDS: float = 10.0
    FETCH_RETRIES: int = Field(0, ge=0, le=5)

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    @property
    def async_database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (f"mysql+aiomysql://{self.DB_USER}:{self.DB_PASSWORD}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}?charset=utf8mb4")

settings = Settings()
