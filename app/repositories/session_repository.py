"""Repository for the persisted login session."""
from typing import Optional

from ..models import Session
from .base import BaseRepository


class SessionRepository(BaseRepository):
    """Persists the server address, username, session cookie and role.

    Schema::

        {
          "server_address": "http://192.168.0.10:5000",
          "username":       "alice",
          "session_cookie": "session=eyJ...",
          "user_role":      "Administrator"
        }

    The password is never written to disk.
    """

    def __init__(self, file_path: str = '.standapp_session.json') -> None:
        super().__init__(file_path)
        raw = self._load({})
        self.data: Session = Session.from_json(raw if isinstance(raw, dict) else {})

    def get(self) -> Session:
        return self.data

    def save(self, session: Session) -> None:
        self.data = session
        self._save(session.to_json())

    def clear(self, keep_server: bool = True) -> None:
        """Forget cookie and role.  The server address and username are kept
        unless *keep_server* is ``False`` so the next login form is prefilled."""
        if keep_server:
            self.save(Session(server_address=self.data.server_address,
                              username=self.data.username))
        else:
            self.data = Session()
            self._delete()

    @property
    def server_address(self) -> Optional[str]:
        return self.data.server_address
