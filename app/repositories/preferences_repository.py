"""Repository for local display preferences."""
from typing import Optional

from .base import BaseRepository


class PreferencesRepository(BaseRepository):
    """Persists per-device preferences.

    Schema::

        {"dark_mode": true}

    A missing ``dark_mode`` key means "follow the default" (light).
    """

    def __init__(self, file_path: str = '.standapp_preferences.json') -> None:
        super().__init__(file_path)
        raw = self._load({})
        self.data: dict = raw if isinstance(raw, dict) else {}

    def get_dark_mode(self) -> Optional[bool]:
        value = self.data.get('dark_mode')
        return value if isinstance(value, bool) else None

    def set_dark_mode(self, enabled: bool) -> None:
        self.data['dark_mode'] = bool(enabled)
        self.save()

    def save(self) -> None:
        self._save(self.data)
