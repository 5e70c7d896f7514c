"""Business logic for the "manage criteria" screen."""
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Dict, List, Optional, Tuple

from stand_client import ApiResponse

from ..models import Criterion
from .base import SETTINGS_PATH, ConfirmCallback, MutationResult, PageService, PageState

CRITERIA_PATH = '/api/criteria'

_MISSING_FIELDS = 'Please enter a criterion name and a maximum score.'
_BAD_MAX_SCORE = 'The maximum score must be a valid number.'


@dataclass
class CriteriaPageState(PageState):
    criteria: List[Criterion] = field(default_factory=list)


def _parse_max_score(value: Any) -> Tuple[Optional[int], Optional[str]]:
    """Return ``(max_score, None)`` or ``(None, error_text)``."""
    text = '' if value is None else str(value).strip()
    if not text:
        return None, _MISSING_FIELDS
    try:
        return int(text), None
    except ValueError:
        return None, _BAD_MAX_SCORE


class ManageCriteriaService(PageService):
    """Lists, creates, edits and deletes scoring criteria.  Administrators only."""

    required_roles = ('Administrator',)
    log_name = 'criteria'

    state: CriteriaPageState

    def _new_state(self) -> CriteriaPageState:
        return CriteriaPageState()

    def _paths(self) -> List[str]:
        return [CRITERIA_PATH, SETTINGS_PATH]

    def _apply(self, responses: Dict[str, ApiResponse]) -> None:
        criteria = self._payload(responses[CRITERIA_PATH], 'criteria',
                                 'Failed to load the criteria.')
        if criteria is not None:
            self.state.criteria = [Criterion.from_json(c) for c in criteria]
        self._apply_settings(responses[SETTINGS_PATH])

    def find_criterion(self, criterion_id: int) -> Optional[Criterion]:
        return next((c for c in self.state.criteria if c.id == criterion_id), None)

    def _validated_body(self, name: str, max_score: Any,
                        description: Optional[str]) -> Tuple[Optional[dict], Optional[str]]:
        name = (name or '').strip()
        if not name:
            return None, _MISSING_FIELDS
        score, error = _parse_max_score(max_score)
        if error:
            return None, error
        return {
            'name': name,
            'max_score': score,
            'description': (description or '').strip(),
        }, None

    def create_criterion(self, name: str, max_score: Any,
                         description: Optional[str] = None) -> MutationResult:
        """Create a criterion.  *max_score* may be an int or the raw form text."""
        payload, error = self._validated_body(name, max_score, description)
        if error:
            return MutationResult(False, 'Error', error)
        self._log.debug("Creating criterion: %s", payload)
        return self._mutate(
            partial(self._client.post, CRITERIA_PATH, payload),
            (201,),
            'Failed to create the criterion.',
            'creating the criterion',
        )

    def edit_criterion(self, criterion_id: Optional[int], name: str, max_score: Any,
                       description: Optional[str] = None) -> MutationResult:
        if criterion_id is None:
            return MutationResult(False, 'Error', 'No criterion selected.')
        payload, error = self._validated_body(name, max_score, description)
        if error:
            return MutationResult(False, 'Error', error)
        self._log.debug("Updating criterion %s: %s", criterion_id, payload)
        return self._mutate(
            partial(self._client.put, f"{CRITERIA_PATH}/{criterion_id}", payload),
            (200,),
            'Failed to update the criterion.',
            'updating the criterion',
        )

    def delete_criterion(self, criterion_id: int, criterion_name: str,
                         confirm: Optional[ConfirmCallback]) -> Optional[MutationResult]:
        """Delete a criterion after confirmation; ``None`` when declined."""
        if not self._confirmed(confirm, 'Delete criterion',
                               f'Do you really want to delete the criterion "{criterion_name}"?'):
            return None
        return self._mutate(
            partial(self._client.delete, f"{CRITERIA_PATH}/{criterion_id}"),
            (200,),
            'Failed to delete the criterion.',
            'deleting the criterion',
        )
