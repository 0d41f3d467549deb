"""Session preference store (read side)."""

from services.api.preferences.store import (
    MemoryPreferenceStore,
    PreferenceStore,
    SqlPreferenceStore,
    UserPreferences,
)

__all__ = ["MemoryPreferenceStore", "PreferenceStore", "SqlPreferenceStore", "UserPreferences"]
