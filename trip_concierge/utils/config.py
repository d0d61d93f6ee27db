import logging
from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import Optional

logger = logging.getLogger(__name__)

class Settings(BaseSettings):
    # Gemini Configuration
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: Optional[str] = None  # operator override, e.g. "gemini-2.5-flash" or "models/gemini-2.5-flash"
    GEMINI_API_VERSION: str = "v1"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com"
    GEMINI_TEMPERATURE: float = 0.7

    # Model resolution
    MODEL_CACHE_TTL_SECONDS: int = 600
    LIST_MODELS_TIMEOUT_SECONDS: float = 10.0

    # API Configuration
    API_VERSION: str = "1.0.0"
    DEBUG_MODE: bool = False
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_NOTES_LIMIT: int = 200
    LOG_TEXT_LIMIT: int = 4000

    # Performance Settings
    REQUEST_TIMEOUT_SECONDS: float = 60.0

    model_config = {"env_file": ".env", "case_sensitive": True, "extra": "ignore"}

    @field_validator("GEMINI_API_KEY", "GEMINI_MODEL")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("GEMINI_API_VERSION")
    @classmethod
    def default_api_version(cls, v: str) -> str:
        # v1 is the safer default for the 2.5/3 model families
        return (v or "").strip() or "v1"

# Global settings instance
settings = Settings()

def get_settings() -> Settings:
    """Get the global settings instance"""
    return settings

def validate_settings() -> bool:
    """Validate that all required settings are configured"""
    required_settings = [
        "GEMINI_API_KEY",
    ]

    missing_settings = [name for name in required_settings if not getattr(settings, name)]

    if missing_settings:
        logger.warning(f"Missing or invalid settings: {', '.join(missing_settings)}")
        logger.warning("Please configure these settings in your .env file or environment variables")
        return False

    return True
