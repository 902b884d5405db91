from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL_INTERPRET: str = "gpt-4o-mini"
    OPENAI_TEMPERATURE_INTERPRET: float = 0.0

    BUSINESS_TIMEZONE: str = "Europe/Kyiv"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    STORE_PROVIDER: str = "json"  # json | memory
    STORE_DATA_DIR: str = "./data/store"
    STORE_TRANSACTION_ATTEMPTS: int = 2

    CANDIDATE_WINDOW_DAYS: int = 10


settings = Settings()
