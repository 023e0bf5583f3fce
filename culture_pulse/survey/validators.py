"""Section completion rules for the survey wizard

Each validator is a pure predicate over the form state. They gate the
"Continue" action of their page and feed the completion percentage.
"""

from typing import Any, Callable, Dict, Iterable, List, Mapping

from ..data.catalog import (
    CULTURE_PULSE_QUESTIONS,
    LEADERSHIP_QUESTIONS,
    RATING_MAX,
    RATING_MIN,
    YEAR_IN_REVIEW_PULSE_QUESTIONS,
    YEAR_IN_REVIEW_RATING_MAX,
)
from ..memory.models import FormState

SectionValidator = Callable[[FormState], bool]


def _has_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def is_valid_rating(value: Any, maximum: int = RATING_MAX, minimum: int = RATING_MIN) -> bool:
    """Integer within [minimum, maximum]; 0, booleans and out-of-range values count as unrated"""
    return isinstance(value, int) and not isinstance(value, bool) and minimum <= value <= maximum


def all_rated(
    ratings: Mapping[str, Any],
    question_ids: Iterable[str],
    maximum: int = RATING_MAX
) -> bool:
    """True when every question id has a valid rating"""
    return all(is_valid_rating(ratings.get(qid), maximum) for qid in question_ids)


def _every_selected_has_tags(selected: List[str], tags_by_id: Mapping[str, List[str]]) -> bool:
    return all(len(tags_by_id.get(entity_id) or []) > 0 for entity_id in selected)


def is_wins_complete(state: FormState) -> bool:
    if not _has_text(state.wins_text):
        return False
    if state.learning_follow_up and not state.selected_learning_teammate_ids:
        return False
    if state.teaching_follow_up and not state.selected_teaching_teammate_ids:
        return False
    return True


def is_blockers_complete(state: FormState) -> bool:
    """All three texts, at least one quick tag, and a challenge tag for every selected teammate"""
    has_texts = (
        _has_text(state.blocker_text)
        and _has_text(state.invent_text)
        and _has_text(state.people_blocker_text)
    )
    return (
        has_texts
        and len(state.selected_tags) > 0
        and _every_selected_has_tags(state.selected_teammates, state.selected_blocker_tags_by_teammate)
    )


def is_culture_pulse_complete(state: FormState) -> bool:
    """All 11 questions rated 1-10 plus the strongest and weakest values"""
    return (
        all_rated(state.ratings, CULTURE_PULSE_QUESTIONS)
        and _has_text(state.strongest_value)
        and _has_text(state.weakest_value)
    )


def is_shoutouts_complete(state: FormState) -> bool:
    return (
        len(state.shoutout_selected_teammates) > 0
        and _every_selected_has_tags(state.shoutout_selected_teammates, state.selected_impact_by_teammate)
    )


def is_feedback_complete(state: FormState) -> bool:
    """At least one leader, each rated on every leadership question"""
    if not state.feedback_selected_leaders:
        return False
    return all(
        all_rated(state.feedback_leader_ratings.get(leader_id) or {}, LEADERSHIP_QUESTIONS)
        for leader_id in state.feedback_selected_leaders
    )


def is_culture_protection_complete(state: FormState) -> bool:
    return _has_text(state.culture_text)


# Year in Review flow: most sections are optional, pulse is on a 1-5 scale

def is_year_in_review_wins_complete(state: FormState) -> bool:
    return _has_text(state.year_in_review_wins_text) or len(state.year_in_review_quick_picks) > 0


def is_year_in_review_blockers_complete(state: FormState) -> bool:
    return _has_text(state.year_in_review_blocker_text) or len(state.year_in_review_blocker_tags) > 0


def is_year_in_review_wish_more_complete(state: FormState) -> bool:
    return _has_text(state.year_in_review_wish_more_of)


def is_year_in_review_pulse_complete(state: FormState) -> bool:
    return all_rated(state.year_in_review_pulse_ratings, YEAR_IN_REVIEW_PULSE_QUESTIONS, YEAR_IN_REVIEW_RATING_MAX)


def is_year_in_review_people_complete(state: FormState) -> bool:
    return _every_selected_has_tags(state.year_in_review_people_who_helped, state.year_in_review_people_help_reasons)


def is_year_in_review_leadership_complete(state: FormState) -> bool:
    return all(
        all_rated(
            state.year_in_review_leader_ratings.get(leader_id) or {},
            LEADERSHIP_QUESTIONS,
            YEAR_IN_REVIEW_RATING_MAX,
        )
        for leader_id in state.year_in_review_selected_leaders
    )


SECTION_VALIDATORS: Dict[str, SectionValidator] = {
    'wins': is_wins_complete,
    'blockers': is_blockers_complete,
    'culture_pulse': is_culture_pulse_complete,
    'shoutouts': is_shoutouts_complete,
    'feedback': is_feedback_complete,
    'culture_protection': is_culture_protection_complete,
}

YEAR_IN_REVIEW_VALIDATORS: Dict[str, SectionValidator] = {
    'wins': is_year_in_review_wins_complete,
    'blockers': is_year_in_review_blockers_complete,
    'wish_more': is_year_in_review_wish_more_complete,
    'pulse': is_year_in_review_pulse_complete,
    'people': is_year_in_review_people_complete,
    'leadership': is_year_in_review_leadership_complete,
}


def completed_sections(
    state: FormState,
    validators: Mapping[str, SectionValidator] = SECTION_VALIDATORS
) -> List[str]:
    """Names of the sections whose validator passes, in wizard order"""
    return [name for name, validator in validators.items() if validator(state)]


def completion_percentage(
    state: FormState,
    validators: Mapping[str, SectionValidator] = SECTION_VALIDATORS
) -> int:
    """Share of completed sections, 0-100"""
    if not validators:
        return 0
    return round(len(completed_sections(state, validators)) * 100 / len(validators))
