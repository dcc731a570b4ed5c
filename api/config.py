from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file for local development.
load_dotenv()


class Settings(BaseSettings):
    """Application settings, read from the environment (and .env)."""
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Required ---
    jwt_secret: str

    # --- Optional settings with defaults ---
    database_url: Optional[str] = None
    access_token_minutes: int = 15
    refresh_token_days: int = 7
    allowed_origins: str = "http://localhost:5173"
    log_level: str = "INFO"
    init_schema: bool = False

    aws_region: str = "us-east-1"
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    s3_bucket_name: Optional[str] = None
    s3_endpoint: Optional[str] = None

    @property
    def cors_origins(self) -> List[str]:
        """ALLOWED_ORIGINS is comma separated."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
