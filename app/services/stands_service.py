"""Business logic for the "manage stands" screen."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from stand_client import ApiResponse

from ..models import Room, Stand
from .base import SETTINGS_PATH, ConfirmCallback, MutationResult, PageService, PageState

STANDS_PATH = '/api/stands'
ROOMS_PATH = '/api/rooms'


@dataclass
class StandsPageState(PageState):
    stands: List[Stand] = field(default_factory=list)
    rooms: List[Room] = field(default_factory=list)


class ManageStandsService(PageService):
    """Lists, creates, edits and deletes stands.  Administrators only.

    ``load()`` fetches stands, rooms and the admin settings (for the
    background gradient) concurrently.  Every successful mutation triggers a
    full re-load, so :attr:`state` always mirrors the server.
    """

    required_roles = ('Administrator',)
    log_name = 'stands'

    state: StandsPageState

    def _new_state(self) -> StandsPageState:
        return StandsPageState()

    def _paths(self) -> List[str]:
        return [STANDS_PATH, ROOMS_PATH, SETTINGS_PATH]

    def _apply(self, responses: Dict[str, ApiResponse]) -> None:
        stands = self._payload(responses[STANDS_PATH], 'stands', 'Failed to load stands.')
        if stands is not None:
            self.state.stands = [Stand.from_json(s) for s in stands]

        rooms = self._payload(responses[ROOMS_PATH], 'rooms', 'Failed to load rooms.')
        if rooms is not None:
            self.state.rooms = [Room.from_json(r) for r in rooms]

        self._apply_settings(responses[SETTINGS_PATH])
        self._log.debug("Loaded %d stands and %d rooms",
                        len(self.state.stands), len(self.state.rooms))

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_stand(self, stand_id: int) -> Optional[Stand]:
        return next((s for s in self.state.stands if s.id == stand_id), None)

    def room_for(self, stand: Stand) -> Optional[Room]:
        """Room to pre-select in the edit form.

        A stand without a room gets no selection; a room id that is no longer
        in the list falls back to the first room.
        """
        if stand.room_id is None:
            return None
        for room in self.state.rooms:
            if room.id == stand.room_id:
                return room
        return self.state.rooms[0] if self.state.rooms else None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    @staticmethod
    def _stand_payload(name: str, description: Optional[str], room_id: Optional[int]) -> dict:
        return {
            'name': name,
            'description': (description or '').strip(),
            'room_id': room_id,
        }

    def create_stand(self, name: str, description: Optional[str] = None,
                     room_id: Optional[int] = None) -> MutationResult:
        """Create a stand.  An empty name is rejected without a request."""
        name = (name or '').strip()
        if not name:
            return MutationResult(False, 'Error', 'Please enter a stand name.')
        payload = self._stand_payload(name, description, room_id)
        self._log.debug("Creating stand: %s", payload)
        return self._mutate(
            lambda: self._client.post(STANDS_PATH, payload),
            (201,),
            'Failed to create the stand.',
            'creating the stand',
        )

    def edit_stand(self, stand_id: Optional[int], name: str, description: Optional[str] = None,
                   room_id: Optional[int] = None) -> MutationResult:
        """Update a stand.  A missing stand id or empty name is rejected locally."""
        if stand_id is None:
            return MutationResult(False, 'Error', 'No stand selected.')
        name = (name or '').strip()
        if not name:
            return MutationResult(False, 'Error', 'Please enter a stand name.')
        payload = self._stand_payload(name, description, room_id)
        self._log.debug("Updating stand %s: %s", stand_id, payload)
        return self._mutate(
            lambda: self._client.put(f"{STANDS_PATH}/{stand_id}", payload),
            (200,),
            'Failed to update the stand.',
            'updating the stand',
        )

    def delete_stand(self, stand_id: int, stand_name: str,
                     confirm: Optional[ConfirmCallback]) -> Optional[MutationResult]:
        """Delete a stand after *confirm* returns ``True``.

        Returns:
            ``None`` when the user declined (no request is sent), otherwise
            the outcome of the request.
        """
        if not self._confirmed(confirm, 'Delete stand',
                               f'Do you really want to delete the stand "{stand_name}"?'):
            self._log.debug("Deletion of stand %s cancelled", stand_id)
            return None
        return self._mutate(
            lambda: self._client.delete(f"{STANDS_PATH}/{stand_id}"),
            (200,),
            'Failed to delete the stand.',
            'deleting the stand',
        )
