"""Business logic for the start page summary."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from stand_client import ApiResponse

from ..models import RankingEntry
from .base import SETTINGS_PATH, PageService, PageState
from .evaluation_service import EVALUATION_ROLES
from .ranking_service import RANKING_PATH

MY_EVALUATIONS_PATH = '/api/my_evaluations'
ROOM_INSPECTIONS_PATH = '/api/room_inspections'

INSPECTION_ROLES = ('Administrator', 'Inspektor')


@dataclass
class DashboardState(PageState):
    my_evaluation_count: Optional[int] = None
    top_rankings: List[RankingEntry] = field(default_factory=list)
    open_room_count: Optional[int] = None


class DashboardService(PageService):
    """Counts and the top three stands for the start page.

    Visible to every role.  Failing endpoints are logged but not shown; the
    affected figure simply stays empty.
    """

    log_name = 'dashboard'

    state: DashboardState

    def _new_state(self) -> DashboardState:
        return DashboardState()

    def _paths(self) -> List[str]:
        return [SETTINGS_PATH, MY_EVALUATIONS_PATH, RANKING_PATH, ROOM_INSPECTIONS_PATH]

    def _apply(self, responses: Dict[str, ApiResponse]) -> None:
        state = self.state
        self._apply_settings(responses[SETTINGS_PATH], report=False)

        evaluations = self._payload(responses[MY_EVALUATIONS_PATH], 'evaluations',
                                    'Failed to load your evaluations.', report=False)
        if isinstance(evaluations, list):
            state.my_evaluation_count = len(evaluations)

        rankings = self._payload(responses[RANKING_PATH], 'rankings',
                                 'Failed to load the ranking.', report=False)
        if isinstance(rankings, list):
            state.top_rankings = [
                RankingEntry.from_json(raw, position=i)
                for i, raw in enumerate(rankings[:3], start=1)
            ]

        inspections = self._payload(responses[ROOM_INSPECTIONS_PATH], 'room_inspections',
                                    'Failed to load the room inspections.', report=False)
        if isinstance(inspections, list):
            state.open_room_count = sum(
                1 for room in inspections if room.get('inspection_timestamp') is None)

    @property
    def can_evaluate(self) -> bool:
        return self._client.has_any_role(EVALUATION_ROLES)

    @property
    def can_inspect(self) -> bool:
        return self._client.has_any_role(INSPECTION_ROLES)
