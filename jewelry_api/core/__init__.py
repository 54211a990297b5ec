"""Core app configuration, database, security and uploads."""

from jewelry_api.core.config import get_settings, settings
from jewelry_api.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
