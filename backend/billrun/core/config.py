from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DEBUG: bool = False
    APP_NAME: str = "billrun"
    version: str = "0.1.0"
    APP_DATABASE_DSN: str = "sqlite:////tmp/billrun.db"
    REDIS_URL: str = "redis://localhost:6379"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Invoice numbering: <prefix>-YYYYMMDD-NNNN
    INVOICE_NUMBER_PREFIX: str = "INV"


settings = Settings()
