from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./designflow.db"
    APP_NAME: str = "DesignFlow Studio API"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "*"  # comma-separated

    # Estimates
    ESTIMATE_VALID_DAYS: int = 30

    # Client portal
    RECENT_UPDATES_LIMIT: int = 3

    class Config:
        env_file = ".env"


settings = Settings()
