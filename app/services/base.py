"""Shared machinery for the page services.

A page service owns the state of one screen.  ``load()`` fans out the
screen's GET requests, joins on all of them and then writes the results into
the state from the calling thread; mutations are single round trips that
re-run ``load()`` when they succeed.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from stand_client import ApiResponse, StandAPIClient, StandAPIError, StandConnectionError

from ..models import ThemeSettings

ACCESS_DENIED_TEXT = (
    "You need the {roles} role to access this page. "
    "Ask the organiser if you need it."
)

SETTINGS_PATH = '/api/admin_settings'

# Asks the user to confirm a destructive action: (title, message) -> bool
ConfirmCallback = Callable[[str, str], bool]


@dataclass(frozen=True)
class MutationResult:
    """Outcome of a create/edit/delete round trip, shown as a modal message."""
    ok: bool
    title: str
    message: str


@dataclass
class PageState:
    """State common to every screen."""
    loading: bool = False
    access_denied: bool = False
    errors: List[str] = field(default_factory=list)
    theme: ThemeSettings = field(default_factory=ThemeSettings)

    @property
    def error_message(self) -> Optional[str]:
        """All accumulated error texts joined, or ``None`` when there are none."""
        if not self.errors:
            return None
        return ' '.join(self.errors)


def http_error_text(resp: ApiResponse) -> str:
    return f"Error {resp.status_code}: {resp.reason}"


def connection_error_text(exc: Exception) -> str:
    return f"Connection error: {exc}"


def failure_text(resp: ApiResponse, default: str) -> str:
    """Server message of a failed mutation.

    A body that is not JSON (an HTML error page from a proxy, say) falls back
    to the status line.
    """
    try:
        return resp.message(default)
    except StandConnectionError:
        return http_error_text(resp)


class PageService:
    """Base class for the screens.

    Sub-classes set :attr:`required_roles` (``None`` = any role) and
    implement :meth:`_paths` and :meth:`_apply`.
    """

    required_roles: Optional[Sequence[str]] = None
    log_name = 'page'

    def __init__(self, client: StandAPIClient) -> None:
        """
        Args:
            client: The authenticated client built from the current session.
        """
        self._client = client
        self._log = logging.getLogger(f'standapp.{self.log_name}')
        self.state = self._new_state()

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def _new_state(self) -> PageState:
        return PageState()

    def _paths(self) -> List[str]:
        raise NotImplementedError

    def _apply(self, responses: Dict[str, ApiResponse]) -> None:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def client(self) -> StandAPIClient:
        return self._client

    def is_authorized(self) -> bool:
        if self.required_roles is None:
            return True
        return self._client.has_any_role(self.required_roles)

    def access_denied_text(self) -> str:
        roles = ' or '.join(self.required_roles or ())
        return ACCESS_DENIED_TEXT.format(roles=roles)

    def load(self) -> PageState:
        """Fetch everything the page shows and update :attr:`state`.

        Without the required role no request is sent and the state is
        flagged ``access_denied``.  Each endpoint writes its own field, so one
        failing endpoint leaves the others' results intact; its error text is
        appended to ``state.errors``.  A transport or decoding failure
        replaces the errors with a single connection-error message.
        """
        state = self.state
        state.loading = True
        state.errors = []

        if not self.is_authorized():
            self._log.info("Access denied for role %r", self._client.user_role)
            state.access_denied = True
            state.loading = False
            return state
        state.access_denied = False

        try:
            responses = self._fetch_concurrently(self._paths())
            self._apply(responses)
        except StandAPIError as exc:
            state.errors = [connection_error_text(exc)]
            self._log.error("Exception while fetching page data: %s", exc)
        except (KeyError, TypeError, ValueError) as exc:
            state.errors = [connection_error_text(f"unexpected response ({exc})")]
            self._log.error("Malformed page data: %s", exc)
        finally:
            state.loading = False
        return state

    # ------------------------------------------------------------------
    # Helpers for sub-classes
    # ------------------------------------------------------------------

    def _fetch_concurrently(self, paths: Iterable[str]) -> Dict[str, ApiResponse]:
        """GET every path in parallel and wait for all of them.

        Raises:
            StandAPIError: The first transport failure encountered.
        """
        paths = list(paths)
        results: Dict[str, ApiResponse] = {}
        errors: List[StandAPIError] = []
        with ThreadPoolExecutor(max_workers=max(len(paths), 1),
                                thread_name_prefix='standapp_fetch') as executor:
            future_map = {executor.submit(self._client.get, path): path for path in paths}
            for future in as_completed(future_map):
                path = future_map[future]
                try:
                    results[path] = future.result()
                except StandAPIError as exc:
                    self._log.debug("Fetch of %s failed: %s", path, exc)
                    errors.append(exc)
        if errors:
            raise errors[0]
        return results

    def _body(self, resp: ApiResponse, default_message: str,
              report: bool = True) -> Optional[Dict[str, Any]]:
        """Return the decoded body of a successful response, else record the error.

        HTTP 200 with ``success`` yields the body; HTTP 200 without it
        appends the server message (or *default_message*); any other status
        appends ``Error <status>: <reason>``.  With *report* off the error is
        only logged.
        """
        if resp.status_code != 200:
            error = http_error_text(resp)
        elif not resp.success:
            error = resp.message(default_message)
        else:
            return resp.json()
        if report:
            self.state.errors.append(error)
        self._log.warning("Request failed (%s): %s", error, resp.text[:200])
        return None

    def _payload(self, resp: ApiResponse, key: str, default_message: str,
                 report: bool = True) -> Optional[Any]:
        """Return ``body[key]`` for a successful response, else record the error."""
        body = self._body(resp, default_message, report)
        return body.get(key) if body is not None else None

    def _apply_settings(self, resp: ApiResponse, report: bool = True) -> None:
        settings = self._payload(resp, 'settings', 'Failed to load app settings.', report)
        if isinstance(settings, dict):
            self.state.theme = ThemeSettings.from_json(settings)

    def _mutate(
        self,
        send: Callable[[], ApiResponse],
        success_statuses: Sequence[int],
        default_error: str,
        action: str,
        success_message: str = 'Done.',
    ) -> MutationResult:
        """Run one mutation round trip and re-load the page on success.

        Args:
            send:             Issues the request.
            success_statuses: Status codes that count as success.
            default_error:    Message when the server sends none.
            action:           Phrase for connection errors, e.g.
                              ``"creating the stand"``.
            success_message:  Message when the server sends none.
        """
        self.state.loading = True
        self.state.errors = []
        try:
            resp = send()
            self._log.debug("Mutation response status: %s body: %s", resp.status_code, resp.text[:500])
            if resp.status_code in success_statuses and resp.success:
                result = MutationResult(True, 'Success', resp.message(success_message))
            else:
                result = MutationResult(False, 'Error', failure_text(resp, default_error))
        except StandConnectionError as exc:
            self._log.error("Exception while %s: %s", action, exc)
            result = MutationResult(False, 'Connection error', f"Error while {action}: {exc}")
        finally:
            self.state.loading = False

        if result.ok:
            self._after_mutation()
        return result

    def _after_mutation(self) -> None:
        """Refresh after a successful mutation; pages re-load everything."""
        self.load()

    @staticmethod
    def _confirmed(confirm: Optional[ConfirmCallback], title: str, message: str) -> bool:
        """A missing or dismissed confirmation counts as "no"."""
        if confirm is None:
            return False
        return bool(confirm(title, message))
