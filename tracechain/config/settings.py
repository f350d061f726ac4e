"""
Configuration settings for the TraceChain framework.

Settings are plain class attributes grouped per environment (development,
production, testing). The active class is selected by the TRC_ENV environment
variable, and a handful of keys can be overridden individually from the
environment.
"""

import os
from typing import Any


class Settings:
    """Framework configuration settings"""

    FRAMEWORK_NAME = "tracechain"

    # Identifier settings
    # "unique": "{seconds}_{random hex}"; "clock": legacy "{seconds}_{ns % 10000}"
    ID_STRATEGY = os.getenv("TRC_ID_STRATEGY", "unique")
    SUPPORTED_ID_STRATEGIES = ["unique", "clock"]

    # API settings
    API_VERSION = "v1"
    API_HOST = "localhost"
    API_PORT = int(os.getenv("TRC_API_PORT", "8000"))
    MAX_UPLOAD_SIZE = 1024 * 1024  # 1 MB
    CORS_ORIGINS = ["*"]

    # CLI settings
    CLI_BASE_URL = os.getenv("TRC_BASE_URL", "http://localhost:8000")
    CLI_TIMEOUT = 10.0

    # Logging settings
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @classmethod
    def get_api_config(cls) -> dict[str, Any]:
        """Get API configuration"""
        return {
            "version": cls.API_VERSION,
            "host": cls.API_HOST,
            "port": cls.API_PORT,
            "max_upload_size": cls.MAX_UPLOAD_SIZE,
            "cors_origins": cls.CORS_ORIGINS
        }

    @classmethod
    def get_ledger_config(cls) -> dict[str, Any]:
        """Get ledger configuration"""
        return {
            "id_strategy": cls.ID_STRATEGY
        }

    @classmethod
    def validate_config(cls) -> list[str]:
        """Validate configuration and return list of errors"""
        errors = []

        if cls.ID_STRATEGY not in cls.SUPPORTED_ID_STRATEGIES:
            errors.append(f"ID_STRATEGY must be one of: {', '.join(cls.SUPPORTED_ID_STRATEGIES)}")

        if cls.API_PORT <= 0 or cls.API_PORT > 65535:
            errors.append("API_PORT must be between 1 and 65535")

        if cls.MAX_UPLOAD_SIZE <= 0:
            errors.append("MAX_UPLOAD_SIZE must be positive")

        if cls.LOG_LEVEL.upper() not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            errors.append("LOG_LEVEL must be a standard logging level name")

        return errors


# Environment-specific settings
class DevelopmentSettings(Settings):
    """Development environment settings"""
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
    API_HOST = "localhost"


class ProductionSettings(Settings):
    """Production environment settings"""
    LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
    API_HOST = "0.0.0.0"


class TestingSettings(Settings):
    """Testing environment settings"""
    LOG_LEVEL = "DEBUG"
    API_HOST = "127.0.0.1"


def get_settings() -> Settings:
    """Get settings based on the TRC_ENV environment variable"""
    env = os.getenv("TRC_ENV", "development").lower()

    if env == "production":
        return ProductionSettings()
    elif env == "testing":
        return TestingSettings()
    else:
        return DevelopmentSettings()
