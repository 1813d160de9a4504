"""
Configuration settings for the youtube2txt transcript service.
"""

import os
from typing import Dict
from pathlib import Path
from dotenv import load_dotenv


# Ensure environment variables are loaded
load_dotenv()


class Config:
    """Base configuration class."""

    # Application info
    APP_NAME = "youtube2txt"
    APP_VERSION = "1.2.0"

    # Application root; temporary subtitle files never leave it
    BASE_DIR = Path(os.getenv("APP_ROOT", Path(__file__).resolve().parent.parent)).absolute()
    WORK_DIR = Path(os.getenv("WORK_DIR", BASE_DIR)).absolute()
    LOGS_DIR = BASE_DIR / "logs"

    # Server binding
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "3000"))

    # yt-dlp
    YTDLP_PATH = os.getenv("YTDLP_PATH")
    YTDLP_COOKIES = os.getenv("YTDLP_COOKIES")
    YTDLP_JS_RUNTIMES = os.getenv("YTDLP_JS_RUNTIMES")
    EXTRACTION_TIMEOUT = float(os.getenv("EXTRACTION_TIMEOUT", "120"))
    SUBTITLE_FORMAT = "vtt"
    DEFAULT_SUBTITLE_LANGUAGES = os.getenv("DEFAULT_SUBTITLE_LANGUAGES", "en,en-US,en-GB")

    # Watch page metadata
    METADATA_TIMEOUT = float(os.getenv("METADATA_TIMEOUT", "30"))
    USER_AGENT = os.getenv(
        "USER_AGENT",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    )

    PUBLIC_URL = os.getenv("PUBLIC_URL", "http://localhost:3000")

    @classmethod
    def initialize(cls):
        """Initialize the application configuration."""
        cls.WORK_DIR.mkdir(parents=True, exist_ok=True)
        cls.LOGS_DIR.mkdir(parents=True, exist_ok=True)

    @classmethod
    def get_paths(cls) -> Dict[str, Path]:
        """Get all application paths."""
        return {
            "base_dir": cls.BASE_DIR,
            "work_dir": cls.WORK_DIR,
            "logs_dir": cls.LOGS_DIR,
        }


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False
    LOG_LEVEL = "INFO"


# Determine which configuration to use based on environment
def get_config():
    """Get the appropriate configuration based on environment."""
    env = os.getenv("ENVIRONMENT", "development").lower()
    if env == "production":
        return ProductionConfig
    else:
        return DevelopmentConfig


# Create a config instance
config = get_config()
config.initialize()
