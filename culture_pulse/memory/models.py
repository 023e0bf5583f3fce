"""Data models for the survey form state and the local submission archive"""

from typing import Annotated, Any, Dict, List, Mapping, Optional, get_args, get_origin
from datetime import datetime, timezone
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StringConstraints, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel


# Stable slug identifying a teammate or leader, e.g. 'tashfeen-sara'
EntityId = Annotated[str, StringConstraints(min_length=1, pattern=r'^[A-Za-z0-9][A-Za-z0-9_.-]*$')]

# Booleans and numeric strings are not ratings
Rating = StrictInt

_ENTITY_ID = TypeAdapter(EntityId)


def validate_entity_id(value: str) -> str:
    """Validate an entity id, raising ValueError when it is not a slug"""
    try:
        return _ENTITY_ID.validate_python(value)
    except ValidationError as e:
        raise ValueError(f"Invalid entity id: {value!r}") from e


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase in storage and on the wire"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StopKeepStart(CamelModel):
    """Stop / keep / start suggestions for one leader"""
    stop: str = ''
    keep: str = ''
    start: str = ''


class FormState(CamelModel):
    """Full in-progress answer set across every survey section"""

    # Wins
    wins_text: str = ''
    quick_picks: List[str] = Field(default_factory=list)
    selected_learning_teammate_ids: List[EntityId] = Field(default_factory=list)
    selected_teaching_teammate_ids: List[EntityId] = Field(default_factory=list)
    learning_follow_up: bool = False
    teaching_follow_up: bool = False

    # Blockers
    blocker_text: str = ''
    selected_tags: List[str] = Field(default_factory=list)
    invent_text: str = ''
    people_blocker_text: str = ''
    selected_teammates: List[EntityId] = Field(default_factory=list)
    teammate_specific_feedback: Dict[EntityId, str] = Field(default_factory=dict)
    selected_blocker_tags_by_teammate: Dict[EntityId, List[str]] = Field(default_factory=dict)

    # Culture Pulse
    ratings: Dict[str, Rating] = Field(default_factory=dict)
    strongest_value: str = ''
    weakest_value: str = ''

    # Shoutouts
    shoutout_selected_teammates: List[EntityId] = Field(default_factory=list)
    selected_impact_by_teammate: Dict[EntityId, List[str]] = Field(default_factory=dict)
    note_text: str = ''

    # Feedback (yearly feedback for leaders)
    feedback_selected_leaders: List[EntityId] = Field(default_factory=list)
    feedback_leader_ratings: Dict[EntityId, Dict[str, Rating]] = Field(default_factory=dict)
    feedback_leader_feedback: Dict[EntityId, str] = Field(default_factory=dict)
    feedback_leader_stop_keep_start: Dict[EntityId, StopKeepStart] = Field(default_factory=dict)
    # Legacy feedback fields, kept so older saved forms still hydrate
    feedback_anonymous: bool = False
    feedback_ratings: Dict[str, Rating] = Field(default_factory=dict)
    feedback_focus_areas: List[str] = Field(default_factory=list)
    feedback_stop_feedback: str = ''
    feedback_keep_doing_feedback: str = ''
    feedback_start_feedback: str = ''
    actionable: bool = False

    # Culture Protection
    culture_text: str = ''

    # Year in Review
    year_in_review_wins_text: str = ''
    year_in_review_quick_picks: List[str] = Field(default_factory=list)
    year_in_review_blocker_text: str = ''
    year_in_review_blocker_tags: List[str] = Field(default_factory=list)
    year_in_review_wish_more_of: str = ''
    year_in_review_pulse_ratings: Dict[str, Rating] = Field(default_factory=dict)
    year_in_review_people_who_helped: List[EntityId] = Field(default_factory=list)
    year_in_review_people_help_reasons: Dict[EntityId, List[str]] = Field(default_factory=dict)
    year_in_review_selected_leaders: List[EntityId] = Field(default_factory=list)
    year_in_review_leader_ratings: Dict[EntityId, Dict[str, Rating]] = Field(default_factory=dict)
    year_in_review_leader_feedback: Dict[EntityId, str] = Field(default_factory=dict)
    year_in_review_leader_stop_keep_start: Dict[EntityId, StopKeepStart] = Field(default_factory=dict)
    year_in_review_leader_next_year: Dict[EntityId, str] = Field(default_factory=dict)

    def to_storage(self) -> Dict[str, Any]:
        """Serializable camelCase mapping"""
        return self.model_dump(by_alias=True)


# Accept both 'cultureText' and 'culture_text'
_FIELD_NAMES: Dict[str, str] = {}
for _name, _field in FormState.model_fields.items():
    _FIELD_NAMES[_name] = _name
    _FIELD_NAMES[_field.alias or _name] = _name

_FIELD_ADAPTERS: Dict[str, TypeAdapter] = {
    name: TypeAdapter(field.annotation) for name, field in FormState.model_fields.items()
}


def resolve_field_name(key: str) -> Optional[str]:
    """Map a snake_case or camelCase key to its FormState field name"""
    return _FIELD_NAMES.get(key)


def validate_field(field_name: str, value: Any) -> Any:
    """Validate a single FormState field value (raises ValidationError)"""
    return _FIELD_ADAPTERS[field_name].validate_python(value)


def _is_valid(annotation: Any, value: Any) -> bool:
    try:
        TypeAdapter(annotation).validate_python(value)
        return True
    except ValidationError:
        return False


def salvage_entries(annotation: Any, value: Any) -> Optional[Any]:
    """
    Keep the valid entries of a list or dict value that failed validation as a whole

    Nested containers (e.g. one leader's ratings) are salvaged recursively, so a
    single bad rating drops only that rating.

    Args:
        annotation: Container type the value should have, e.g. Dict[str, Rating]
        value: Raw value

    Returns:
        The pruned raw value, or None when the value is not a salvageable container
    """
    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin is list and isinstance(value, list):
        item_type = args[0] if args else Any
        return [item for item in value if _is_valid(item_type, item)]

    if origin is dict and isinstance(value, Mapping):
        key_type, value_type = args if args else (Any, Any)
        kept: Dict[Any, Any] = {}
        for key, entry in value.items():
            if not _is_valid(key_type, key):
                continue
            if _is_valid(value_type, entry):
                kept[key] = entry
                continue
            nested = salvage_entries(value_type, entry)
            if nested is not None:
                kept[key] = nested
        return kept

    return None


def coerce_form_state(data: Any) -> FormState:
    """
    Build a FormState from untrusted data, field by field.

    Unknown keys are ignored. A list or map field with bad entries keeps its
    valid entries; any other field whose value fails validation keeps its
    default, so partial or stale data never prevents hydration.

    Args:
        data: FormState instance or mapping of field name/alias to value

    Returns:
        FormState with defaults for every missing or invalid field
    """
    if isinstance(data, FormState):
        return data.model_copy(deep=True)
    if not isinstance(data, Mapping):
        logger.warning(f"Expected form data mapping, got {type(data).__name__} - using defaults")
        return FormState()

    values: Dict[str, Any] = {}
    for key, value in data.items():
        field_name = resolve_field_name(key) if isinstance(key, str) else None
        if field_name is None:
            continue
        try:
            values[field_name] = validate_field(field_name, value)
            continue
        except ValidationError as e:
            error_count = e.error_count()

        salvaged = salvage_entries(FormState.model_fields[field_name].annotation, value)
        if salvaged is None:
            logger.warning(f"Dropping invalid form field '{key}': {error_count} validation error(s)")
            continue
        try:
            values[field_name] = validate_field(field_name, salvaged)
            logger.warning(f"Dropped invalid entries from form field '{key}': {error_count} validation error(s)")
        except ValidationError:
            logger.warning(f"Dropping invalid form field '{key}': {error_count} validation error(s)")
    return FormState(**values)


class SubmissionMetadata(CamelModel):
    """Identifiers stamped on a finalized submission"""
    submission_id: str
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    session_id: str
    completion_percentage: int = 100


class SubmissionData(SubmissionMetadata):
    """Archived submission: metadata plus the raw (pre-flatten) form snapshot"""
    form: FormState = Field(default_factory=FormState)

    @property
    def metadata(self) -> SubmissionMetadata:
        return SubmissionMetadata(
            submission_id=self.submission_id,
            timestamp=self.timestamp,
            session_id=self.session_id,
            completion_percentage=self.completion_percentage,
        )


class StorageResponse(BaseModel):
    """Result of a local archive operation"""
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    submission_id: Optional[str] = None
