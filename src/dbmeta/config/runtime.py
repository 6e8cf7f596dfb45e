"""Runtime settings for dbmeta.

Loads settings from environment variables using python-dotenv.
"""
from __future__ import annotations
import os
from dotenv import load_dotenv

# Load .env file
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize settings from environment variables."""
        # Firebird server
        self.host = os.getenv("DBMETA_HOST", "localhost")
        port = os.getenv("DBMETA_PORT")
        self.port = int(port) if port else None
        self.charset = os.getenv("DBMETA_CHARSET", "UTF8")

        # Database creation (build-db)
        self.db_file_name = os.getenv("DBMETA_DB_FILE_NAME", "FBTASKGENERATED.fdb")
        page_size = os.getenv("DBMETA_PAGE_SIZE")
        self.page_size = int(page_size) if page_size else None
        self.credentials_file = os.getenv("DBMETA_CREDENTIALS_FILE", "config.json")

        # Default credentials for DSN-style connection strings
        self.user = os.getenv("ISC_USER")
        self.password = os.getenv("ISC_PASSWORD")

        # Logging
        self.log_level = os.getenv("DBMETA_LOG_LEVEL", "INFO").upper()
        self.log_format = os.getenv(
            "DBMETA_LOG_FORMAT",
            "%(asctime)s %(levelname)s %(name)s: %(message)s"
        )


# Global settings instance
settings = Settings()
