"""Business logic for the "manage rooms" screen."""
from dataclasses import dataclass, field
from functools import partial
from typing import Dict, List, Optional

from stand_client import ApiResponse

from ..models import Room
from .base import SETTINGS_PATH, ConfirmCallback, MutationResult, PageService, PageState
from .stands_service import ROOMS_PATH


@dataclass
class RoomsPageState(PageState):
    rooms: List[Room] = field(default_factory=list)


class ManageRoomsService(PageService):
    """Lists, creates, renames and deletes rooms.  Administrators only."""

    required_roles = ('Administrator',)
    log_name = 'rooms'

    state: RoomsPageState

    def _new_state(self) -> RoomsPageState:
        return RoomsPageState()

    def _paths(self) -> List[str]:
        return [ROOMS_PATH, SETTINGS_PATH]

    def _apply(self, responses: Dict[str, ApiResponse]) -> None:
        rooms = self._payload(responses[ROOMS_PATH], 'rooms', 'Failed to load rooms.')
        if rooms is not None:
            self.state.rooms = [Room.from_json(r) for r in rooms]
        self._apply_settings(responses[SETTINGS_PATH])

    def save_room(self, name: str, room_id: Optional[int] = None) -> MutationResult:
        """Create a room, or rename it when *room_id* is given.

        The server answers 201 for a new room and 200 for an update; both
        count as success.
        """
        name = (name or '').strip()
        if not name:
            return MutationResult(False, 'Error', 'Please enter a room name.')
        payload = {'name': name}
        if room_id is None:
            send = partial(self._client.post, ROOMS_PATH, payload)
        else:
            send = partial(self._client.put, f"{ROOMS_PATH}/{room_id}", payload)
        return self._mutate(send, (200, 201), 'Failed to save the room.', 'saving the room')

    def delete_room(self, room_id: int, room_name: str,
                    confirm: Optional[ConfirmCallback]) -> Optional[MutationResult]:
        """Delete a room after confirmation; its stands lose their room."""
        if not self._confirmed(
                confirm, 'Delete room',
                f'Do you really want to delete the room "{room_name}"? '
                'All stands assigned to it will lose their room.'):
            return None
        return self._mutate(
            lambda: self._client.delete(f"{ROOMS_PATH}/{room_id}"),
            (200,),
            'Failed to delete the room.',
            'deleting the room',
        )
