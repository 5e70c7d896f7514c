"""
stand_client.py
===============
Thin wrapper around the stand-evaluation server's REST API.

Every API call carries the session cookie obtained at login and a JSON
content type.  The server answers with JSON objects of the form::

    {"success": true,  "stands": [...]}          # payload on success
    {"success": false, "message": "Not allowed"}  # message on failure

The client does not interpret ``success``; it hands back an
:class:`ApiResponse` and leaves the decision to the page services in
``app/services``.  Transport problems (DNS, refused connection, timeouts)
and undecodable bodies are raised as :class:`StandConnectionError`.

Usage
-----
::

    from stand_client import StandAPIClient

    client = StandAPIClient("http://192.168.0.10:5000",
                            session_cookie="session=abc", user_role="Administrator")
    resp = client.get("/api/stands")
    if resp.status_code == 200 and resp.success:
        stands = resp.json()["stands"]
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, Optional

import requests

logger = logging.getLogger('standapp.client')

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
_DEFAULT_TIMEOUT = 10  # seconds
_LOGIN_PATH = "/login"
_LOGOUT_PATH = "/api/logout"


class StandAPIError(Exception):
    """Base class for errors raised by :class:`StandAPIClient`."""


class StandConnectionError(StandAPIError):
    """Raised when a request cannot be sent or its body cannot be decoded."""


class StandAuthError(StandAPIError):
    """Raised when the server rejects a login attempt."""


class ApiResponse:
    """Status, reason and lazily-decoded JSON body of one API response."""

    def __init__(self, status_code: int, reason: str, text: str) -> None:
        self.status_code = status_code
        self.reason = reason or ""
        self.text = text or ""
        self._data: Optional[Dict[str, Any]] = None

    def json(self) -> Dict[str, Any]:
        """Return the decoded body.

        Raises:
            StandConnectionError: The body is not a JSON object.
        """
        if self._data is None:
            try:
                data = json.loads(self.text)
            except ValueError as exc:
                raise StandConnectionError(f"Invalid JSON in response: {exc}") from exc
            if not isinstance(data, dict):
                raise StandConnectionError("Invalid JSON in response: expected an object")
            self._data = data
        return self._data

    @property
    def success(self) -> bool:
        """``True`` when the body decodes and carries ``"success": true``."""
        return self.json().get('success') is True

    def message(self, default: str) -> str:
        """Return the server's ``message`` or *default* when absent/empty."""
        msg = self.json().get('message')
        return msg if msg else default

    def __repr__(self) -> str:
        return f"ApiResponse(status_code={self.status_code}, reason={self.reason!r})"


class StandAPIClient:
    """Authenticated client for one stand-evaluation server.

    The client is built once per session (see
    :meth:`app.services.auth_service.AuthService.client`) and injected into
    the page services; it carries both the cookie replayed on every request
    and the role used for visibility checks.
    """

    def __init__(
        self,
        server_address: str,
        session_cookie: Optional[str] = None,
        user_role: Optional[str] = None,
        timeout: int = _DEFAULT_TIMEOUT,
    ) -> None:
        """
        Args:
            server_address: Base URL, e.g. ``http://localhost:5000``.
            session_cookie: ``name=value`` cookie from the login response.
            user_role:      Role name stored at login (e.g. ``Administrator``).
            timeout:        HTTP request timeout in seconds.
        """
        if not server_address:
            raise ValueError("server_address must not be empty")
        self.server_address = server_address.rstrip('/')
        self.session_cookie = session_cookie
        self.user_role = user_role
        self._timeout = timeout

    # ------------------------------------------------------------------
    # Role checks
    # ------------------------------------------------------------------

    def has_any_role(self, required_roles: Iterable[str]) -> bool:
        """Return ``True`` if the user's role is one of *required_roles*."""
        if self.user_role is None:
            return False
        return self.user_role in required_roles

    @property
    def is_authenticated(self) -> bool:
        return bool(self.session_cookie)

    # ------------------------------------------------------------------
    # HTTP verbs
    # ------------------------------------------------------------------

    def get(self, path: str) -> ApiResponse:
        return self._request('GET', path)

    def post(self, path: str, payload: Dict[str, Any]) -> ApiResponse:
        return self._request('POST', path, payload)

    def put(self, path: str, payload: Dict[str, Any]) -> ApiResponse:
        return self._request('PUT', path, payload)

    def delete(self, path: str) -> ApiResponse:
        return self._request('DELETE', path)

    # ------------------------------------------------------------------
    # Session endpoints
    # ------------------------------------------------------------------

    def login(self, username: str, password: str) -> ApiResponse:
        """POST the login form and remember the returned session cookie.

        The server expects ``application/x-www-form-urlencoded`` fields
        ``username`` and ``password``.  On HTTP 200 with ``success`` the
        ``name=value`` part of ``Set-Cookie`` becomes :attr:`session_cookie`
        and the role from the body (``role`` or ``user_role``) becomes
        :attr:`user_role`.

        Raises:
            StandConnectionError: Network failure or undecodable body.
            StandAuthError:       The server rejected the credentials.
        """
        url = self.server_address + _LOGIN_PATH
        try:
            resp = requests.post(
                url,
                data={'username': username, 'password': password},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise StandConnectionError(f"Could not reach {self.server_address}: {exc}") from exc

        result = ApiResponse(resp.status_code, resp.reason, resp.text)
        logger.debug("Login response status: %s", resp.status_code)

        if resp.status_code != 200:
            raise StandAuthError(
                result.message(f"Unexpected error. Status: {resp.status_code}")
            )
        if not result.success:
            raise StandAuthError(result.message("Login failed."))

        cookie_header = resp.headers.get('Set-Cookie') if resp.headers else None
        if cookie_header:
            self.session_cookie = cookie_header.split(';', 1)[0].strip()
        body = result.json()
        self.user_role = body.get('role') or body.get('user_role') or self.user_role
        logger.info("Logged in as %s (role: %s)", username, self.user_role)
        return result

    def logout(self) -> bool:
        """Call the logout endpoint and forget the cookie and role.

        Returns:
            ``True`` if the server acknowledged with HTTP 200.

        Raises:
            StandConnectionError: Network failure.
        """
        resp = self.get(_LOGOUT_PATH)
        self.session_cookie = None
        self.user_role = None
        return resp.status_code == 200

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _headers(self) -> Dict[str, str]:
        headers = {'Content-Type': 'application/json; charset=UTF-8'}
        if self.session_cookie:
            headers['Cookie'] = self.session_cookie
        return headers

    def _request(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> ApiResponse:
        """Send one request and wrap the result in an :class:`ApiResponse`."""
        url = self.server_address + path
        if payload is not None:
            logger.debug("%s %s payload=%s", method, path, payload)
        try:
            resp = requests.request(
                method,
                url,
                headers=self._headers(),
                json=payload,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise StandConnectionError(str(exc)) from exc

        logger.debug("%s %s -> %s", method, path, resp.status_code)
        return ApiResponse(resp.status_code, resp.reason, resp.text)
