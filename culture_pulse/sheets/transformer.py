"""Flatten survey form state into a spreadsheet-friendly row

The output schema is fixed apart from one documented exception: leader
ratings. Those are collected into a LeaderRatingTable keyed by
(leader name, question id) and only turned into
`feedback_{LeaderName}_{questionId}` column names at the record boundary.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union
from loguru import logger

from ..data.catalog import (
    BLOCKER_FEEDBACK_TAGS,
    BLOCKER_TAGS,
    CULTURE_PULSE_QUESTIONS,
    IMPACT_TAGS,
    LEADERSHIP_QUESTIONS,
    QUICK_PICKS,
    RATING_MAX,
    label_for,
)
from ..data.roster import Roster
from ..memory.archive import new_session_id, new_submission_id
from ..memory.models import FormState, StopKeepStart, SubmissionMetadata, coerce_form_state
from ..survey.validators import completion_percentage, is_valid_rating

FlatRecord = Dict[str, Union[str, int]]
LeaderRatingTable = Dict[Tuple[str, str], str]

ENTRY_SEPARATOR = ' | '
LEADER_RATING_PREFIX = 'feedback_'

BASE_COLUMNS: List[str] = [
    # Metadata
    'submissionId',
    'timestamp',
    'sessionId',
    'completionPercentage',

    # Wins
    'winsText',
    'quickPicks',
    'learningTeammates',
    'teachingTeammates',
    'learningFollowUp',
    'teachingFollowUp',

    # Blockers
    'blockerText',
    'blockerTags',
    'inventText',
    'peopleBlockerText',
    'blockedByTeammates',
    'teammateSpecificFeedback',
    'blockerTagsByTeammate',

    # Culture Pulse (11 questions)
    *[f"culturePulse_{qid}" for qid in CULTURE_PULSE_QUESTIONS],
    'strongestValue',
    'weakestValue',

    # Shoutouts
    'shoutoutTeammates',
    'impactTagsByTeammate',
    'shoutoutNotes',

    # Feedback; per-leader rating columns are added dynamically
    'feedbackLeaders',
    'leaderFeedback',
    'leaderStop',
    'leaderKeep',
    'leaderStart',

    # Culture Protection
    'cultureText',
]


def get_sheet_columns() -> List[str]:
    """Fixed column headers, without the dynamic leader rating columns"""
    return list(BASE_COLUMNS)


def format_ids_to_labels(ids: Sequence[str], labels: Optional[Mapping[str, str]] = None) -> str:
    """Comma-joined labels; unknown ids pass through as-is"""
    if not ids:
        return ''
    return ', '.join(label_for(tag_id, labels) for tag_id in ids)


def format_entity_entries(
    data: Mapping[str, Any],
    name_for: Callable[[str], str],
    format_value: Callable[[Any], str]
) -> str:
    """
    Render a per-entity map as 'Name: value | Name: value'

    Args:
        data: Entity id -> value
        name_for: Resolves an entity id to its display name
        format_value: Renders one value; empty results drop the entry

    Returns:
        Joined entries, or '' when no entry has content
    """
    entries = []
    for entity_id, value in data.items():
        formatted = format_value(value)
        if not formatted or not formatted.strip():
            continue
        entries.append(f"{name_for(entity_id)}: {formatted}")
    return ENTRY_SEPARATOR.join(entries)


def format_rating(value: Any, maximum: int = RATING_MAX) -> str:
    """'{value}/10', or '' when unrated"""
    return f"{value}/{maximum}" if is_valid_rating(value, maximum) else ''


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ''


def _tags(labels: Mapping[str, str]) -> Callable[[Any], str]:
    def render(tags: Any) -> str:
        if not isinstance(tags, list) or not tags:
            return ''
        return format_ids_to_labels(tags, labels)
    return render


def _stop_keep_start(field: str) -> Callable[[Any], str]:
    def render(value: Any) -> str:
        if not isinstance(value, StopKeepStart):
            return ''
        return getattr(value, field).strip()
    return render


def _yes_no(flag: bool) -> str:
    return 'Yes' if flag else 'No'


def _unique(ids: Sequence[str]) -> List[str]:
    seen: List[str] = []
    for entity_id in ids:
        if entity_id not in seen:
            seen.append(entity_id)
    return seen


def build_leader_rating_table(state: FormState, roster: Roster) -> LeaderRatingTable:
    """
    Leader ratings for the selected leaders only, keyed by (leader name, question id)

    Every leadership question gets a cell for every selected leader; unrated
    questions hold ''.
    """
    table: LeaderRatingTable = {}
    for leader_id in _unique(state.feedback_selected_leaders):
        leader_name = roster.leader_name(leader_id)
        ratings = state.feedback_leader_ratings.get(leader_id) or {}
        for question_id in LEADERSHIP_QUESTIONS:
            table[(leader_name, question_id)] = format_rating(ratings.get(question_id))
    return table


def leader_rating_columns(table: LeaderRatingTable) -> Dict[str, str]:
    """Serialize the wide table into `feedback_{LeaderName}_{questionId}` columns"""
    return {
        f"{LEADER_RATING_PREFIX}{leader_name}_{question_id}": value
        for (leader_name, question_id), value in table.items()
    }


def is_leader_rating_column(column: str) -> bool:
    return column.startswith(LEADER_RATING_PREFIX) and column not in BASE_COLUMNS


def _new_metadata(state: FormState) -> SubmissionMetadata:
    return SubmissionMetadata(
        submission_id=new_submission_id(),
        session_id=new_session_id(),
        completion_percentage=completion_percentage(state),
    )


def transform(
    form_data: Any,
    metadata: Optional[SubmissionMetadata] = None,
    roster: Optional[Roster] = None
) -> FlatRecord:
    """
    Transform form state into a flat spreadsheet row.

    Never raises on missing or malformed fields: raw mappings are coerced
    field by field and absent values become '' (or 'No' for flags).

    Args:
        form_data: FormState or raw mapping of form fields
        metadata: Submission ids to stamp on the row (generated when omitted)
        roster: Teammate/leader lookups (default roster when omitted)

    Returns:
        Ordered mapping of column name -> display value
    """
    state = coerce_form_state(form_data)
    roster = roster or Roster()
    metadata = metadata or _new_metadata(state)

    culture_pulse = {
        f"culturePulse_{qid}": format_rating(state.ratings.get(qid))
        for qid in CULTURE_PULSE_QUESTIONS
    }
    leader_ratings = leader_rating_columns(build_leader_rating_table(state, roster))

    record: FlatRecord = {
        # Metadata
        'submissionId': metadata.submission_id,
        'timestamp': metadata.timestamp,
        'sessionId': metadata.session_id,
        'completionPercentage': metadata.completion_percentage,

        # Wins
        'winsText': state.wins_text,
        'quickPicks': format_ids_to_labels(state.quick_picks, QUICK_PICKS),
        'learningTeammates': ', '.join(roster.teammate_names(state.selected_learning_teammate_ids)),
        'teachingTeammates': ', '.join(roster.teammate_names(state.selected_teaching_teammate_ids)),
        'learningFollowUp': _yes_no(state.learning_follow_up),
        'teachingFollowUp': _yes_no(state.teaching_follow_up),

        # Blockers
        'blockerText': state.blocker_text,
        'blockerTags': format_ids_to_labels(state.selected_tags, BLOCKER_TAGS),
        'inventText': state.invent_text,
        'peopleBlockerText': state.people_blocker_text,
        'blockedByTeammates': ', '.join(roster.teammate_names(state.selected_teammates)),
        'teammateSpecificFeedback': format_entity_entries(
            state.teammate_specific_feedback, roster.teammate_name, _text),
        'blockerTagsByTeammate': format_entity_entries(
            state.selected_blocker_tags_by_teammate, roster.teammate_name, _tags(BLOCKER_FEEDBACK_TAGS)),

        # Culture Pulse
        **culture_pulse,
        'strongestValue': state.strongest_value,
        'weakestValue': state.weakest_value,

        # Shoutouts
        'shoutoutTeammates': ', '.join(roster.teammate_names(state.shoutout_selected_teammates)),
        'impactTagsByTeammate': format_entity_entries(
            state.selected_impact_by_teammate, roster.teammate_name, _tags(IMPACT_TAGS)),
        'shoutoutNotes': state.note_text,

        # Feedback
        'feedbackLeaders': ', '.join(roster.leader_name_with_role(lid) for lid in state.feedback_selected_leaders),
        **leader_ratings,
        'leaderFeedback': format_entity_entries(
            state.feedback_leader_feedback, roster.leader_name_with_role, _text),
        'leaderStop': format_entity_entries(
            state.feedback_leader_stop_keep_start, roster.leader_name_with_role, _stop_keep_start('stop')),
        'leaderKeep': format_entity_entries(
            state.feedback_leader_stop_keep_start, roster.leader_name_with_role, _stop_keep_start('keep')),
        'leaderStart': format_entity_entries(
            state.feedback_leader_stop_keep_start, roster.leader_name_with_role, _stop_keep_start('start')),

        # Culture Protection
        'cultureText': state.culture_text,
    }

    logger.debug(
        f"Transformed submission {metadata.submission_id}: {len(record)} columns "
        f"({len(leader_ratings)} leader rating columns)"
    )
    return record
