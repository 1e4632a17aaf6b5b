from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

# Project root directory
# config.py lives in jalpan/core/, so parent.parent.parent is the root
BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_FILE = BASE_DIR / ".env"


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"  # ignore keys in .env that are not declared here
    )

    # Database
    DATABASE_URL: str = "sqlite:///./jalpan.db"

    # OpenAI (empty key disables the AI summary)
    OPENAI_API_KEY: str = ""

    # LLM
    LLM_MODEL: str = "gpt-4o-mini"
    LLM_TEMPERATURE: float = 0.4
    LLM_MAX_TOKENS: int = 400

    # Application
    APP_NAME: str = "Jalpan Quality Inspection"
    APP_VERSION: str = "2.0.0"
    DEBUG: bool = False
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"
    API_PREFIX: str = "/api/v1"

    # Inspection defaults
    INITIAL_INSPECTOR: str = ""
    ORGANIZATION_NAME: str = "Jalpan Services"
    LOCATION_NAME: str = "Canteen, Kirpal Bagh"

    # PDF export (empty path means wkhtmltopdf is looked up on PATH)
    WKHTMLTOPDF_PATH: str = ""

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def cors_origins_list(self) -> List[str]:
        """CORS origins as a list"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]


# Singleton settings instance
settings = Settings()
