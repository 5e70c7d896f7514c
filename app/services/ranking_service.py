"""Business logic for the ranking screen."""
from dataclasses import dataclass, field
from typing import Dict, List

from stand_client import ApiResponse

from ..models import RankingEntry
from .base import SETTINGS_PATH, PageService, PageState

RANKING_PATH = '/api/ranking_data'


@dataclass
class RankingPageState(PageState):
    entries: List[RankingEntry] = field(default_factory=list)


class RankingService(PageService):
    """Leaderboard of stands by total achieved score.

    Visible to every logged-in role.  Entries keep the server's order; a
    missing ``rank`` is filled with the 1-based position.
    """

    log_name = 'ranking'

    state: RankingPageState

    def _new_state(self) -> RankingPageState:
        return RankingPageState()

    def _paths(self) -> List[str]:
        return [RANKING_PATH, SETTINGS_PATH]

    def _apply(self, responses: Dict[str, ApiResponse]) -> None:
        rankings = self._payload(responses[RANKING_PATH], 'rankings', 'Failed to load the ranking.')
        if isinstance(rankings, list):
            self.state.entries = [
                RankingEntry.from_json(raw, position=i)
                for i, raw in enumerate(rankings, start=1)
            ]
        self._apply_settings(responses[SETTINGS_PATH])

    def top(self, count: int = 3) -> List[RankingEntry]:
        """Return the first *count* entries (the start page shows three)."""
        return self.state.entries[:max(count, 0)]
