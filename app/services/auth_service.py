"""Login, logout and the authenticated client handed to every page."""
import logging
from dataclasses import dataclass
from typing import Optional

from stand_client import StandAPIClient, StandAuthError, StandConnectionError

from ..models import Session
from ..repositories.session_repository import SessionRepository

logger = logging.getLogger('standapp.auth')


@dataclass(frozen=True)
class LoginResult:
    ok: bool
    message: str
    redirect_to_setup: bool = False


class AuthService:
    """Owns the persisted session and the :class:`StandAPIClient` built from it.

    The client (cookie + role) is created once per session and injected into
    the page services; pages never read the session file themselves.
    """

    def __init__(self, repository: SessionRepository, timeout: int = 10) -> None:
        self._repo = repository
        self._timeout = timeout
        self._client: Optional[StandAPIClient] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def session(self) -> Session:
        return self._repo.get()

    def is_logged_in(self) -> bool:
        s = self.session
        return bool(s.server_address and s.session_cookie)

    def client(self, server_address: Optional[str] = None) -> Optional[StandAPIClient]:
        """Return the client for the current session.

        Args:
            server_address: Used when no session has been stored yet
                            (e.g. from ``config.json``).

        Returns:
            ``None`` when no server address is known at all.
        """
        if self._client is None:
            s = self.session
            address = s.server_address or server_address
            if not address:
                return None
            self._client = StandAPIClient(
                address,
                session_cookie=s.session_cookie,
                user_role=s.user_role,
                timeout=self._timeout,
            )
        return self._client

    def login(self, server_address: str, username: str, password: str) -> LoginResult:
        """Log in and persist cookie and role.

        Empty fields are rejected without contacting the server.
        """
        server_address = (server_address or '').strip()
        username = (username or '').strip()
        if not server_address or not username or not password:
            return LoginResult(False, 'Please enter server address, username and password.')

        client = StandAPIClient(server_address, timeout=self._timeout)
        try:
            resp = client.login(username, password)
        except StandAuthError as exc:
            logger.warning("Login for %s rejected: %s", username, exc)
            return LoginResult(False, str(exc))
        except StandConnectionError as exc:
            logger.error("Login request failed: %s", exc)
            return LoginResult(
                False,
                'Connection error: please check the server URL and your network '
                f'connection. ({exc})',
            )

        self._repo.save(Session(
            server_address=client.server_address,
            username=username,
            session_cookie=client.session_cookie,
            user_role=client.user_role,
        ))
        self._client = client
        return LoginResult(
            True,
            resp.message('Login successful.'),
            redirect_to_setup=resp.json().get('redirect_to_setup') is True,
        )

    def logout(self) -> bool:
        """Tell the server to end the session and forget it locally.

        The local session is cleared even when the server cannot be reached.

        Returns:
            ``True`` if the server acknowledged the logout.
        """
        acknowledged = False
        client = self.client()
        if client is not None and client.is_authenticated:
            try:
                acknowledged = client.logout()
            except StandConnectionError as exc:
                logger.warning("Logout request failed: %s", exc)
        self._repo.clear()
        self._client = None
        return acknowledged
