"""
saher.settings
==============

Configuration settings for the SAHER application.

Module-level constants cover the database and the local API server; the
pydantic :class:`Settings` model covers the snapshot storage keys, backup
naming and logging.  Everything can be overridden via environment
variables (``SAHER_*``) or a ``.env`` file.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

# ---------------------------------------------------------------------------
# Base directories
# ---------------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent

# Database settings
# ---------------------------------------------------------------------------
DB_FILE = os.environ.get("SAHER_DB_FILE", BASE_DIR / "saher.db")
DB_URL = f"sqlite:///{DB_FILE}"
DB_ECHO = os.environ.get("SAHER_DB_ECHO", "False").lower() == "true"

# API settings
# ---------------------------------------------------------------------------
API_HOST = os.environ.get("SAHER_API_HOST", "127.0.0.1")
API_PORT = int(os.environ.get("SAHER_API_PORT", "8000"))
API_DEBUG = os.environ.get("SAHER_API_DEBUG", "False").lower() == "true"


# ---------------------------------------------------------------------------
# Pydantic settings model
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Pydantic model for application settings, loaded from environment variables."""

    # Local snapshot storage
    storage_key: str = Field("SAHER_APP_DATA_V1", description="Key the full store snapshot is saved under")
    last_check_key: str = Field("lastEmailCheckDate", description="Key of the persisted notification check date")

    # Backups
    backup_prefix: str = Field("SAHER", description="Prefix of exported backup file names")

    # Logging
    log_level: str = Field("INFO", description="Root log level")
    log_file: Optional[str] = Field(None, description="Optional rotating log file")

    class Config:
        """Configuration for the settings model."""
        env_prefix = "SAHER_"
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


# Initialize settings
settings = Settings()
