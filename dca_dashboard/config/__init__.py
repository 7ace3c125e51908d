"""
Application Settings
Load from environment variables
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment"""

    # ======================
    # Application
    # ======================
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # ======================
    # Data Sources
    # ======================
    SHEET_CSV_URL: str = (
        "https://docs.google.com/spreadsheets/d/e/"
        "2PACX-1vTky6EXF-T1UqfBgBdLM_shv8VdaQzGifDBwlYSRBDk_J4_wxDeU_9FSdhjj2I-EaoN2jREHxAnyxa3"
        "/pub?gid=0&single=true&output=csv"
    )
    COINGECKO_API_BASE_URL: str = "https://api.coingecko.com/api/v3"
    GOLD_PRICE_API_BASE_URL: str = "https://data-asg.goldprice.org"
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # ======================
    # Live Prices
    # ======================
    # Gold is quoted per this many grams; the sheet records grams.
    GOLD_QUOTE_GRAMS: float = 14.71

    # ======================
    # Scheduler
    # ======================
    SCHEDULER_ENABLED: bool = True
    PRICE_REFRESH_SECONDS: int = 60

    # ======================
    # Timezone
    # ======================
    TIMEZONE: str = "Asia/Bangkok"

    # ======================
    # Pydantic v2 config
    # ======================
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="forbid",
    )


settings = Settings()
