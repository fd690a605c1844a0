from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./sling_erp.db"

    # CORS origins for the web front-end
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Stock at or below this level shows up as low stock
    LOW_STOCK_THRESHOLD: int = 5

    # Invoice type pre-selected at checkout ("A", "B" or "X")
    DEFAULT_INVOICE_TYPE: str = "B"

    LOG_LEVEL: str = "INFO"

    # SMTP
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    OWNER_EMAIL: str = ""
    NOTIFICATION_ENABLED: bool = False


settings = Settings()
