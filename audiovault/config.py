# ============================================================================
# FILE: audiovault/config.py
# ============================================================================
from pydantic_settings import BaseSettings
from typing import List, Optional

AUDIO_MIME_TYPES = [
    "audio/mpeg",  # MP3
    "audio/wav",   # WAV
    "audio/flac",  # FLAC
    "audio/aac",   # AAC
    "audio/ogg",   # OGG
]

class Settings(BaseSettings):
    """Application configuration using Pydantic BaseSettings"""

    # App settings
    APP_NAME: str = "Audio Vault"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    API_PREFIX: str = ""
    HOST: str = "127.0.0.1"
    PORT: int = 8080

    # Database
    DATABASE_URL: str = "sqlite:///./audio.db"  # Change to PostgreSQL in production
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    # Security
    SECRET_KEY: str = "your-secret-key-change-this-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # First admin, created on startup when both are set
    ADMIN_USERNAME: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    # Blob storage
    UPLOAD_ROOT: str = "./uploads"
    ALLOWED_MIME_TYPES: List[str] = AUDIO_MIME_TYPES

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8080"]

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()

def get_settings() -> Settings:
    """Dependency returning the process-wide settings"""
    return settings
