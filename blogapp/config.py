from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env if present
ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
if ENV_PATH.exists():
    load_dotenv(ENV_PATH)


class Config:
    SECRET_KEY: str = os.getenv("SECRET_KEY", os.urandom(32).hex())

    SITE_NAME = os.getenv("SITE_NAME", "Blog")

    # Database
    # Read from environment and then unset for security
    SQLALCHEMY_DATABASE_URI: str = os.environ.pop("DATABASE_URL", None) or "sqlite:///blog.db"
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False

    # Passwords
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # Bearer tokens
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "") or SECRET_KEY
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRES_MINUTES: int = int(os.getenv("JWT_EXPIRES_MINUTES", str(24 * 60)))

    # Uploads and limits
    UPLOAD_FOLDER: str = os.getenv(
        "UPLOAD_FOLDER", str(Path(__file__).resolve().parents[1] / "uploads")
    )
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(5 * 1024 * 1024)))

    # Listing
    POSTS_PER_PAGE = int(os.getenv("POSTS_PER_PAGE", "10"))
    MAX_POSTS_PER_PAGE = int(os.getenv("MAX_POSTS_PER_PAGE", "100"))

    # Rate limiting
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "100 per minute")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")

    # Security headers
    SECURITY_HSTS_SECONDS = 31536000
    SECURITY_CSP = "default-src 'none'; img-src 'self'; frame-ancestors 'none'"
    SECURITY_PERMISSIONS_POLICY = (
        "geolocation=(), microphone=(), camera=(), payment=(), usb=(), "
        "magnetometer=(), gyroscope=(), accelerometer=()"
    )

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Flask env
    ENV = os.getenv("FLASK_ENV", "production")
    DEBUG = ENV != "production"
