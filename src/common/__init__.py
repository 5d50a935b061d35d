# Common utilities and shared modules
"""
Shared components used by the estimator and the price history importer:
- Data models (Pydantic schemas)
- Database utilities
- Logging configuration
- Project configuration
- Exceptions
"""

from .config import settings, Settings, PROJECT_ROOT, DATA_DIR
from .database import get_connection, init_db
from .exceptions import ImportFileError, InvalidInputError, InvalidQueryError, PriceEngineError
from .logging import setup_logging

__all__ = [
    "settings",
    "Settings",
    "PROJECT_ROOT",
    "DATA_DIR",
    "get_connection",
    "init_db",
    "setup_logging",
    "PriceEngineError",
    "InvalidQueryError",
    "InvalidInputError",
    "ImportFileError",
]
