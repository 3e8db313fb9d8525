from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # API Settings
    PROJECT_NAME: str = "Jewel Ledger API"
    API_V1_STR: str = "/api/v1"
    PROJECT_VERSION: str = "0.1.0"
    DESCRIPTION: str = "Ledger reconciliation and statement export for jewellery shops"

    # Remote shop API
    LEDGER_API_URL: str = "http://localhost:5000"
    REQUEST_TIMEOUT: int = 30

    # Statement branding
    DEFAULT_SHOP_NAME: str = "JEWELLERY SHOP"
    BRAND_NAME: str = "Jewel Ledger"
    BRAND_PHONE: str = ""

    # Dates are compared in the shop's local time
    TIMEZONE: str = "Asia/Kolkata"

    # Number formatting
    CURRENCY_DECIMALS: int = 2
    WEIGHT_DECIMALS: int = 3

    # Logging
    LOGGER_NAME: str = "jewel_ledger"
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Session
    TOKEN_EXPIRY_LEEWAY_SECONDS: int = 30

    # The shop API pages its list endpoints
    REPORT_FETCH_LIMIT: int = 2000

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env"
    )

settings = Settings()
