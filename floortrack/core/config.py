"""
Application Configuration
Environment-driven settings for the FloorTrack API service
"""

import os
from typing import List
from dotenv import load_dotenv

load_dotenv()


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class SimpleSettings:
    """Settings read from the environment without a validation layer"""

    def __init__(self):
        # Application
        self.ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
        self.DEBUG = os.getenv("DEBUG", "false").lower() == "true"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        # Database
        self.DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./floortrack.db")
        self.DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))
        self.DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "20"))
        self.DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
        self.DB_POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "3600"))
        self.DB_AUTO_CREATE = os.getenv("DB_AUTO_CREATE", "true").lower() == "true"

        # Firebase identity provider
        self.FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID", "")
        self.FIREBASE_API_KEY = os.getenv("FIREBASE_API_KEY", "")
        self.FIREBASE_AUTH_BASE_URL = os.getenv(
            "FIREBASE_AUTH_BASE_URL", "https://identitytoolkit.googleapis.com/v1"
        )
        self.FIREBASE_JWKS_URL = os.getenv(
            "FIREBASE_JWKS_URL",
            "https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com",
        )
        # Optional OAuth bearer used to delete identities by uid (admin scope)
        self.FIREBASE_ADMIN_ACCESS_TOKEN = os.getenv("FIREBASE_ADMIN_ACCESS_TOKEN", "")
        self.IDENTITY_HTTP_TIMEOUT_SECONDS = float(os.getenv("IDENTITY_HTTP_TIMEOUT_SECONDS", "10"))

        # Session cookie
        self.SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "access_token")
        self.SESSION_COOKIE_MAX_AGE_SECONDS = int(os.getenv("SESSION_COOKIE_MAX_AGE_SECONDS", "3600"))

        # Bootstrap owner (existing registered user promoted on startup)
        self.BOOTSTRAP_OWNER_EMAIL = os.getenv("BOOTSTRAP_OWNER_EMAIL", "")

        # Security
        self.ALLOWED_HOSTS: List[str] = _split_csv(os.getenv("ALLOWED_HOSTS", "*"))
        self.CORS_ORIGINS: List[str] = _split_csv(os.getenv("CORS_ORIGINS", "http://localhost:5173"))

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


# Create settings instance
settings = SimpleSettings()

# Derived settings
DATABASE_CONFIG = {
    "pool_size": settings.DB_POOL_SIZE,
    "max_overflow": settings.DB_MAX_OVERFLOW,
    "pool_timeout": settings.DB_POOL_TIMEOUT,
    "pool_recycle": settings.DB_POOL_RECYCLE,
    "pool_pre_ping": True,
}
