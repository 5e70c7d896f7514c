"""Repository package: expose all concrete repositories from one import."""
from .session_repository import SessionRepository
from .preferences_repository import PreferencesRepository

__all__ = [
    'SessionRepository',
    'PreferencesRepository',
]
