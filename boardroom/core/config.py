from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    BOOKING_TIMEZONE: str = "Africa/Johannesburg"
    WORKDAY_START_HOUR: int = 7
    WORKDAY_END_HOUR: int = 16
    SLOT_MINUTES: int = 30
    MIN_BOOKING_MINUTES: int = 30
    MAX_BOOKING_MINUTES: int = 480

    STORE_PROVIDER: str = "memory"
    DATA_DIR: str = "./data"
    BACKUP_DIR: str = "./backups"
    MAX_BACKUPS: int = 7

    BOOTSTRAP_ADMIN_NAME: str = "Administrator"
    BOOTSTRAP_ADMIN_EMAIL: str | None = None


settings = Settings()
