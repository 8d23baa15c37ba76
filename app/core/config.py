"""
Configuration settings for the application
"""

import os
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./wedding_seating.db")

    # Security
    ADMIN_TOKEN: str = os.getenv("ADMIN_TOKEN", "admin_token_123")

    # Application
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # Rate limiting (guest portal)
    RATE_LIMIT_PER_MINUTE: int = 30

    # Seating limits
    MAX_PARTY_SIZE: int = 20
    MAX_TABLE_CAPACITY: int = 50

    # Guest portal
    SEARCH_SUGGESTION_LIMIT: int = 10

    # Seating chart canvas used by auto-arrange
    CANVAS_WIDTH: int = 1200
    CANVAS_HEIGHT: int = 800

    class Config:
        env_file = ".env"

settings = Settings()
