from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "tradie-rates"
    LOG_LEVEL: str = "INFO"

    # Display
    CURRENCY_SYMBOL: str = "$"

    # Estimate banding
    ESTIMATE_LOW_FACTOR: float = 0.95
    ESTIMATE_HIGH_FACTOR: float = 1.10
    ESTIMATE_ROUND_TO: int = 10
    ESTIMATE_FALLBACK_SPREAD: float = 50.0
    ESTIMATE_PAIR_TOLERANCE: float = 1.0  # two parsed totals closer than this are the same value

    class Config:
        env_file = ".env"


settings = Settings()
