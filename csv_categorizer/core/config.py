"""Application configuration management"""
from typing import Optional
from pydantic import BaseModel
import os


class AppConfig(BaseModel):
    """Application configuration settings"""

    # Application settings
    title: str = "Smart CSV Categorizer"
    description: str = "Categorizes a column of free-text values with an LLM classification service"
    version: str = "0.1.0"

    # Logging settings
    log_level: str = "INFO"

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = True

    # Classification service settings
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-3-flash-preview"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    request_timeout: float = 120.0

    # Pipeline settings
    categorization_batch_size: int = 100

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create config from environment variables"""
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            reload=os.getenv("RELOAD", "true").lower() == "true",
            gemini_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or None,
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-3-flash-preview"),
            gemini_base_url=os.getenv(
                "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
            ),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT", "120")),
            categorization_batch_size=int(os.getenv("CATEGORIZATION_BATCH_SIZE", "100")),
        )


# Global config instance
config = AppConfig.from_env()


def get_settings() -> AppConfig:
    """Get application settings instance"""
    return config
