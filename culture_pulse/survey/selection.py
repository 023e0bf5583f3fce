"""Selection and toggle operations on the form state

Every operation takes the current FormState and returns a partial update
for FormStateStore.update(). Operations that change a selection set run
reconcile() on the result, so per-entity map entries never outlive the
selection of their teammate or leader.
"""

from typing import Any, Dict, List, Sequence, Tuple
from loguru import logger

from ..data.catalog import (
    BLOCKER_TAGS,
    CULTURE_PULSE_QUESTIONS,
    LEADERSHIP_QUESTIONS,
    RATING_MAX,
    YEAR_IN_REVIEW_PULSE_QUESTIONS,
    YEAR_IN_REVIEW_RATING_MAX,
)
from ..memory.models import FormState, StopKeepStart, validate_entity_id
from .validators import is_valid_rating

Update = Dict[str, Any]

# Selection set -> per-entity maps keyed by its members
ENTITY_MAP_LINKS: Dict[str, Tuple[str, ...]] = {
    'selected_teammates': (
        'selected_blocker_tags_by_teammate',
        'teammate_specific_feedback',
    ),
    'shoutout_selected_teammates': (
        'selected_impact_by_teammate',
    ),
    'feedback_selected_leaders': (
        'feedback_leader_ratings',
        'feedback_leader_feedback',
        'feedback_leader_stop_keep_start',
    ),
    'year_in_review_people_who_helped': (
        'year_in_review_people_help_reasons',
    ),
    'year_in_review_selected_leaders': (
        'year_in_review_leader_ratings',
        'year_in_review_leader_feedback',
        'year_in_review_leader_stop_keep_start',
        'year_in_review_leader_next_year',
    ),
}

STOP_KEEP_START_FIELDS = ('stop', 'keep', 'start')


def _toggled(items: Sequence[str], item: str) -> List[str]:
    """Remove item if present, append it otherwise"""
    if item in items:
        return [existing for existing in items if existing != item]
    return [*items, item]


def reconcile(state: FormState) -> Update:
    """
    Prune per-entity map entries whose entity is no longer selected

    Args:
        state: Form state to check

    Returns:
        Partial update with the pruned maps (empty when nothing is orphaned)
    """
    updates: Update = {}
    for selection_field, map_fields in ENTITY_MAP_LINKS.items():
        selected = set(getattr(state, selection_field))
        for map_field in map_fields:
            current = getattr(state, map_field)
            orphaned = [entity_id for entity_id in current if entity_id not in selected]
            if orphaned:
                logger.debug(f"Pruning {orphaned} from {map_field}")
                updates[map_field] = {k: v for k, v in current.items() if k in selected}
    return updates


def _with_reconcile(state: FormState, updates: Update) -> Update:
    merged = state.model_copy(update=updates)
    return {**updates, **reconcile(merged)}


def _require_selected(entity_id: str, selected: Sequence[str], selection_field: str):
    if entity_id not in selected:
        raise ValueError(f"'{entity_id}' is not selected in {selection_field}")


# Wins

def toggle_quick_pick(state: FormState, pick_id: str) -> Update:
    return {'quick_picks': _toggled(state.quick_picks, pick_id)}


def toggle_learning_teammate(state: FormState, teammate_id: str) -> Update:
    teammate_id = validate_entity_id(teammate_id)
    return {'selected_learning_teammate_ids': _toggled(state.selected_learning_teammate_ids, teammate_id)}


def toggle_teaching_teammate(state: FormState, teammate_id: str) -> Update:
    teammate_id = validate_entity_id(teammate_id)
    return {'selected_teaching_teammate_ids': _toggled(state.selected_teaching_teammate_ids, teammate_id)}


def set_follow_up(state: FormState, learning: bool = None, teaching: bool = None) -> Update:
    """Set the learning/teaching follow-up flags; turning one off clears its teammates"""
    updates: Update = {}
    if learning is not None:
        updates['learning_follow_up'] = learning
        if not learning:
            updates['selected_learning_teammate_ids'] = []
    if teaching is not None:
        updates['teaching_follow_up'] = teaching
        if not teaching:
            updates['selected_teaching_teammate_ids'] = []
    return updates


# Blockers

def apply_blocker_quick_tag(state: FormState, tag_id: str) -> Update:
    """Append the tag's canned text to the blocker text and record the tag once"""
    if tag_id not in BLOCKER_TAGS:
        raise ValueError(f"Unknown blocker tag: {tag_id}")
    tag_text = BLOCKER_TAGS[tag_id]
    blocker_text = f"{state.blocker_text}\n\n{tag_text}" if state.blocker_text else tag_text
    selected_tags = state.selected_tags if tag_id in state.selected_tags else [*state.selected_tags, tag_id]
    return {'blocker_text': blocker_text, 'selected_tags': selected_tags}


def toggle_blocker_teammate(state: FormState, teammate_id: str) -> Update:
    teammate_id = validate_entity_id(teammate_id)
    return _with_reconcile(state, {'selected_teammates': _toggled(state.selected_teammates, teammate_id)})


def toggle_blocker_tag(state: FormState, teammate_id: str, tag_id: str) -> Update:
    _require_selected(teammate_id, state.selected_teammates, 'selected_teammates')
    tags_by_teammate = dict(state.selected_blocker_tags_by_teammate)
    tags_by_teammate[teammate_id] = _toggled(tags_by_teammate.get(teammate_id, []), tag_id)
    return {'selected_blocker_tags_by_teammate': tags_by_teammate}


def set_teammate_feedback(state: FormState, teammate_id: str, feedback: str) -> Update:
    _require_selected(teammate_id, state.selected_teammates, 'selected_teammates')
    return {'teammate_specific_feedback': {**state.teammate_specific_feedback, teammate_id: feedback}}


# Culture Pulse

def set_rating(state: FormState, question_id: str, value: int) -> Update:
    if question_id not in CULTURE_PULSE_QUESTIONS:
        raise ValueError(f"Unknown culture pulse question: {question_id}")
    if not is_valid_rating(value, RATING_MAX):
        raise ValueError(f"Rating for {question_id} must be an integer 1-{RATING_MAX}, got {value!r}")
    return {'ratings': {**state.ratings, question_id: value}}


def set_core_values(state: FormState, strongest: str = None, weakest: str = None) -> Update:
    updates: Update = {}
    if strongest is not None:
        updates['strongest_value'] = strongest
    if weakest is not None:
        updates['weakest_value'] = weakest
    return updates


# Shoutouts

def set_shoutout_teammates(state: FormState, teammate_ids: Sequence[str]) -> Update:
    """
    Replace the shoutout selection.

    Impact tags are kept only for teammates still selected that have at least
    one tag; the note is cleared when nobody is selected.
    """
    ids: List[str] = []
    for teammate_id in teammate_ids:
        teammate_id = validate_entity_id(teammate_id)
        if teammate_id not in ids:
            ids.append(teammate_id)
    pruned = {
        teammate_id: state.selected_impact_by_teammate[teammate_id]
        for teammate_id in ids
        if state.selected_impact_by_teammate.get(teammate_id)
    }
    return {
        'shoutout_selected_teammates': ids,
        'selected_impact_by_teammate': pruned,
        'note_text': state.note_text if ids else '',
    }


def toggle_impact_tag(state: FormState, teammate_id: str, tag_id: str) -> Update:
    _require_selected(teammate_id, state.shoutout_selected_teammates, 'shoutout_selected_teammates')
    current = state.selected_impact_by_teammate.get(teammate_id, [])
    return {'selected_impact_by_teammate': {**state.selected_impact_by_teammate, teammate_id: _toggled(current, tag_id)}}


# Feedback (leadership)

def add_leader(state: FormState, leader_id: str) -> Update:
    leader_id = validate_entity_id(leader_id)
    if leader_id in state.feedback_selected_leaders:
        return {}
    return {'feedback_selected_leaders': [*state.feedback_selected_leaders, leader_id]}


def remove_leader(state: FormState, leader_id: str) -> Update:
    """Deselect a leader and drop their ratings, feedback and stop/keep/start"""
    leaders = [existing for existing in state.feedback_selected_leaders if existing != leader_id]
    return _with_reconcile(state, {'feedback_selected_leaders': leaders})


def set_leader_rating(state: FormState, leader_id: str, question_id: str, value: int) -> Update:
    _require_selected(leader_id, state.feedback_selected_leaders, 'feedback_selected_leaders')
    if question_id not in LEADERSHIP_QUESTIONS:
        raise ValueError(f"Unknown leadership question: {question_id}")
    if not is_valid_rating(value, RATING_MAX):
        raise ValueError(f"Rating for {question_id} must be an integer 1-{RATING_MAX}, got {value!r}")
    ratings = {**state.feedback_leader_ratings.get(leader_id, {}), question_id: value}
    return {'feedback_leader_ratings': {**state.feedback_leader_ratings, leader_id: ratings}}


def set_leader_feedback(state: FormState, leader_id: str, feedback: str) -> Update:
    _require_selected(leader_id, state.feedback_selected_leaders, 'feedback_selected_leaders')
    return {'feedback_leader_feedback': {**state.feedback_leader_feedback, leader_id: feedback}}


def set_stop_keep_start(state: FormState, leader_id: str, field: str, value: str) -> Update:
    _require_selected(leader_id, state.feedback_selected_leaders, 'feedback_selected_leaders')
    if field not in STOP_KEEP_START_FIELDS:
        raise ValueError(f"Field must be one of {STOP_KEEP_START_FIELDS}, got {field!r}")
    current = state.feedback_leader_stop_keep_start.get(leader_id) or StopKeepStart()
    return {
        'feedback_leader_stop_keep_start': {
            **state.feedback_leader_stop_keep_start,
            leader_id: current.model_copy(update={field: value}),
        }
    }


# Year in Review

def set_year_in_review_pulse_rating(state: FormState, question_id: str, value: int) -> Update:
    if question_id not in YEAR_IN_REVIEW_PULSE_QUESTIONS:
        raise ValueError(f"Unknown year in review pulse question: {question_id}")
    if not is_valid_rating(value, YEAR_IN_REVIEW_RATING_MAX):
        raise ValueError(f"Rating for {question_id} must be an integer 1-{YEAR_IN_REVIEW_RATING_MAX}, got {value!r}")
    return {'year_in_review_pulse_ratings': {**state.year_in_review_pulse_ratings, question_id: value}}


def toggle_year_in_review_helper(state: FormState, teammate_id: str) -> Update:
    teammate_id = validate_entity_id(teammate_id)
    helpers = _toggled(state.year_in_review_people_who_helped, teammate_id)
    return _with_reconcile(state, {'year_in_review_people_who_helped': helpers})


def toggle_help_reason(state: FormState, teammate_id: str, reason_id: str) -> Update:
    _require_selected(teammate_id, state.year_in_review_people_who_helped, 'year_in_review_people_who_helped')
    current = state.year_in_review_people_help_reasons.get(teammate_id, [])
    return {
        'year_in_review_people_help_reasons': {
            **state.year_in_review_people_help_reasons,
            teammate_id: _toggled(current, reason_id),
        }
    }


def add_year_in_review_leader(state: FormState, leader_id: str) -> Update:
    leader_id = validate_entity_id(leader_id)
    if leader_id in state.year_in_review_selected_leaders:
        return {}
    return {'year_in_review_selected_leaders': [*state.year_in_review_selected_leaders, leader_id]}


def remove_year_in_review_leader(state: FormState, leader_id: str) -> Update:
    leaders = [existing for existing in state.year_in_review_selected_leaders if existing != leader_id]
    return _with_reconcile(state, {'year_in_review_selected_leaders': leaders})


def set_year_in_review_leader_rating(state: FormState, leader_id: str, question_id: str, value: int) -> Update:
    _require_selected(leader_id, state.year_in_review_selected_leaders, 'year_in_review_selected_leaders')
    if question_id not in LEADERSHIP_QUESTIONS:
        raise ValueError(f"Unknown leadership question: {question_id}")
    if not is_valid_rating(value, YEAR_IN_REVIEW_RATING_MAX):
        raise ValueError(f"Rating for {question_id} must be an integer 1-{YEAR_IN_REVIEW_RATING_MAX}, got {value!r}")
    ratings = {**state.year_in_review_leader_ratings.get(leader_id, {}), question_id: value}
    return {'year_in_review_leader_ratings': {**state.year_in_review_leader_ratings, leader_id: ratings}}
