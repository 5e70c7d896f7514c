"""Dark-mode preference and background gradient selection."""
from typing import List

from ..models import Color, ThemeSettings
from ..repositories.preferences_repository import PreferencesRepository


class ThemeService:
    """Light/dark mode stored in :class:`PreferencesRepository`.

    With nothing stored the light theme is used.
    """

    def __init__(self, repository: PreferencesRepository) -> None:
        self._repo = repository

    @property
    def dark_mode(self) -> bool:
        return bool(self._repo.get_dark_mode())

    def toggle(self) -> bool:
        """Switch between light and dark; returns the new dark-mode flag."""
        new_value = not self.dark_mode
        self._repo.set_dark_mode(new_value)
        return new_value

    def set_light_mode(self) -> None:
        self._repo.set_dark_mode(False)

    def set_dark_mode(self) -> None:
        self._repo.set_dark_mode(True)

    def gradient(self, theme: ThemeSettings) -> List[Color]:
        return theme.gradient(dark_mode=self.dark_mode)

    def css_background(self, theme: ThemeSettings) -> str:
        """``linear-gradient`` CSS for the web GUI's page background."""
        start, end = self.gradient(theme)
        return f"linear-gradient(to bottom, {start.css}, {end.css})"
