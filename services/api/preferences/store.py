"""
Session preference store — read contract only.

The preference CRUD (add city / remove city) lives in a separate service;
this module only reads a session's saved city list. An unknown session is
not an error: get_user_preferences() returns None and callers treat that
as "no cities".
"""

from __future__ import annotations

import logging
from typing import Mapping, Protocol, Sequence

from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from services.api.db.models import UserPreference

logger = logging.getLogger(__name__)


class UserPreferences(BaseModel):
    session_id: str
    cities: list[str] = Field(default_factory=list)


class PreferenceStore(Protocol):
    async def get_user_preferences(self, session_id: str) -> UserPreferences | None: ...


class SqlPreferenceStore:
    """Reads the user_preferences table through an SA async session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_user_preferences(self, session_id: str) -> UserPreferences | None:
        async with self._session_factory() as session:
            row = await session.scalar(
                select(UserPreference).where(UserPreference.sessionId == session_id)
            )
        if row is None:
            logger.debug("No preferences for session %s", session_id[:8])
            return None
        return UserPreferences(session_id=row.sessionId, cities=list(row.cities or []))


class MemoryPreferenceStore:
    """Dict-backed store for local development and tests."""

    def __init__(self, cities_by_session: Mapping[str, Sequence[str]] | None = None) -> None:
        self._data = {k: list(v) for k, v in (cities_by_session or {}).items()}

    async def get_user_preferences(self, session_id: str) -> UserPreferences | None:
        cities = self._data.get(session_id)
        if cities is None:
            return None
        return UserPreferences(session_id=session_id, cities=list(cities))
