from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    CANCELLATION_WINDOW_HOURS: float = 24.0
    CONFIRMATION_ESTIMATE_HOURS: float = 2.0
    PENDING_EXPIRY_HOURS: float = 24.0
    REMINDER_LEAD_HOURS: float = 24.0
    REMINDER_TOLERANCE_HOURS: float = 1.0


settings = Settings()
