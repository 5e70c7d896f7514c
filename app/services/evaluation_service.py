"""Business logic for the "evaluate a stand" screen.

An evaluator picks a stand, sees the scores they already gave it (if any)
and submits one score per criterion.  Submitting again overwrites the
previous evaluation on the server.
"""
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Dict, List, Mapping, Optional, Tuple

from stand_client import ApiResponse, StandAPIError

from ..models import Criterion, Stand
from .base import SETTINGS_PATH, MutationResult, PageService, PageState, connection_error_text

EVALUATE_DATA_PATH = '/api/evaluate_initial_data'
USER_SCORES_PATH = '/api/evaluations/user_scores'
# The submit endpoint lives outside /api on the server.
EVALUATE_PATH = '/evaluate'

# Role names as the server stores them.
EVALUATION_ROLES = ('Administrator', 'Bewerter')


@dataclass
class EvaluationPageState(PageState):
    stands: List[Stand] = field(default_factory=list)
    criteria: List[Criterion] = field(default_factory=list)
    selected_stand_id: Optional[int] = None
    existing_scores: Dict[int, int] = field(default_factory=dict)
    last_evaluation: Optional[str] = None
    rejected_criteria: List[str] = field(default_factory=list)


class EvaluationService(PageService):
    required_roles = EVALUATION_ROLES
    log_name = 'evaluation'

    state: EvaluationPageState

    def _new_state(self) -> EvaluationPageState:
        return EvaluationPageState()

    def _paths(self) -> List[str]:
        return [EVALUATE_DATA_PATH, SETTINGS_PATH]

    def _apply(self, responses: Dict[str, ApiResponse]) -> None:
        body = self._body(responses[EVALUATE_DATA_PATH], 'Failed to load the evaluation data.')
        if body is not None:
            self.state.stands = [Stand.from_json(s) for s in body.get('stands') or []]
            self.state.criteria = [Criterion.from_json(c) for c in body.get('criteria') or []]
        self._apply_settings(responses[SETTINGS_PATH])

    @property
    def selected_stand(self) -> Optional[Stand]:
        stand_id = self.state.selected_stand_id
        return next((s for s in self.state.stands if s.id == stand_id), None)

    def select_stand(self, stand_id: Optional[int]) -> EvaluationPageState:
        """Select a stand and fetch the scores this user already gave it.

        An id that is not among the loaded stands clears the selection
        without a request.
        """
        state = self.state
        state.existing_scores = {}
        state.last_evaluation = None
        state.rejected_criteria = []
        state.selected_stand_id = stand_id
        if self.selected_stand is None:
            state.selected_stand_id = None
            return state
        self._load_existing_scores()
        return state

    def _load_existing_scores(self) -> None:
        state = self.state
        state.loading = True
        state.errors = []
        try:
            resp = self._client.get(f"{USER_SCORES_PATH}/{state.selected_stand_id}")
            body = self._body(resp, 'Failed to load the existing scores.')
            state.existing_scores = {}
            state.last_evaluation = None
            if body is not None and body.get('exists'):
                scores = body.get('scores') or {}
                state.existing_scores = {
                    int(criterion_id): int(score)
                    for criterion_id, score in scores.items()
                    if score is not None
                }
                state.last_evaluation = body.get('timestamp')
        except StandAPIError as exc:
            self._log.error("Loading existing scores failed: %s", exc)
            state.errors = [connection_error_text(exc)]
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            self._log.error("Unexpected existing-scores response: %s", exc)
            state.errors = [connection_error_text(f"unexpected response ({exc})")]
        finally:
            state.loading = False

    def validate_scores(self, scores: Mapping[int, Any]) -> Tuple[Dict[int, int], List[str]]:
        """Split raw per-criterion input into accepted scores and rejected names.

        Blank entries are skipped.  Anything that is not a whole number in
        ``0..max_score`` is rejected.
        """
        accepted: Dict[int, int] = {}
        rejected: List[str] = []
        for criterion in self.state.criteria:
            raw = scores.get(criterion.id)
            text = '' if raw is None else str(raw).strip()
            if not text:
                continue
            try:
                value = int(text)
            except ValueError:
                rejected.append(criterion.name)
                continue
            if 0 <= value <= criterion.max_score:
                accepted[criterion.id] = value
            else:
                rejected.append(criterion.name)
        return accepted, rejected

    def submit(self, scores: Mapping[int, Any]) -> MutationResult:
        """Submit scores for the selected stand.

        Invalid entries are dropped (their criterion names end up in
        ``state.rejected_criteria``); the rest is sent.
        """
        stand = self.selected_stand
        if stand is None:
            return MutationResult(False, 'Error', 'Please select a stand first.')
        accepted, rejected = self.validate_scores(scores)
        self.state.rejected_criteria = rejected
        if rejected:
            self._log.info("Dropping invalid scores for: %s", ', '.join(rejected))
        payload = {
            'stand_id': stand.id,
            'scores': {str(criterion_id): value for criterion_id, value in accepted.items()},
        }
        self._log.debug("Submitting evaluation: %s", payload)
        return self._mutate(
            partial(self._client.post, EVALUATE_PATH, payload),
            (200,),
            'Evaluation failed.',
            'submitting the evaluation',
            success_message='Evaluation saved.',
        )

    def _after_mutation(self) -> None:
        self._load_existing_scores()
