from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./paintquote.db"
    COMPANY_NAME: str = "PaintQuote"
    LOG_LEVEL: str = "INFO"

    # Company settings are re-read from the database after this many seconds
    SETTINGS_CACHE_SECONDS: int = 300

    # Demo/test fallbacks only: real quotes use the contractor's own rates
    FALLBACK_WALL_RATE: float = 1.50        # $/sqft
    FALLBACK_CEILING_RATE: float = 1.25     # $/sqft
    FALLBACK_DOOR_RATE: float = 150.00      # $/door
    FALLBACK_WINDOW_RATE: float = 100.00    # $/window
    FALLBACK_PRIMER_RATE: float = 0.45      # $/sqft

    class Config:
        env_file = ".env"


settings = Settings()
