from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # API Settings
    API_V1_STR: str = "/api"
    PROJECT_NAME: str = "Cloudify"
    VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Server Settings
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # External APIs
    # Not validated at startup: a missing key is reported per request as a 500
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    UPSTREAM_TIMEOUT_SECONDS: float = 120.0

    # Transform Configuration
    TRANSFORM_STYLE: str = "cloud"
    MAX_PAYLOAD_BYTES: int = 4 * 1024 * 1024  # 4MB, estimated from the encoded length

    # Analytics - Supabase (optional)
    SUPABASE_URL: Optional[str] = None
    SUPABASE_KEY: Optional[str] = None
    ANALYTICS_TABLE: str = "usage_counters"

    @property
    def upstream_configured(self) -> bool:
        return bool(self.OPENAI_API_KEY)

    @property
    def analytics_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_KEY)

# Global settings instance
settings = Settings()

def get_settings() -> Settings:
    return settings
