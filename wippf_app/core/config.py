import os
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from wippf_engine.catalogue import DEFAULT_CATALOGUE_PATH

# Load .env file if it exists, for local development
# In production, environment variables should be set directly.
if os.path.exists(".env"):
    from dotenv import load_dotenv
    load_dotenv()


class Settings(BaseSettings):
    catalogue_path: str = str(DEFAULT_CATALOGUE_PATH)
    history_path: str = "data/wippf_history.json"
    log_level: str = "INFO"
    api_prefix: str = "/api/v1"

    model_config = SettingsConfigDict(env_prefix='WIPPF_')


@lru_cache
def get_settings() -> Settings:
    return Settings()
