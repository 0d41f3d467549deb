"""
SQLAlchemy async database module.

Re-exports engine and model utilities for the FastAPI service.
"""

from services.api.db.engine import create_engine
from services.api.db.models import Base, UserPreference

__all__ = [
    "create_engine",
    "Base",
    "UserPreference",
]
