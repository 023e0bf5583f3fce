"""Persisted form state store"""

import json
from typing import Any, Dict, Mapping, Optional
from loguru import logger
from pydantic import ValidationError

from .models import FormState, coerce_form_state, resolve_field_name, validate_field
from .storage import LocalStorage
from ..config import FORM_STATE_KEY


class FormStateStore:
    """In-progress survey answers, mirrored to a local storage slot on every update"""

    def __init__(self, storage: LocalStorage, key: str = FORM_STATE_KEY):
        """
        Initialize form state store

        Args:
            storage: Local durable storage
            key: Slot holding the serialized form state
        """
        self.storage = storage
        self.key = key
        self._state = FormState()
        logger.info(f"Form state store initialized (slot: {key})")

    @property
    def state(self) -> FormState:
        """Copy of the current form state"""
        return self._state.model_copy(deep=True)

    def load(self) -> FormState:
        """
        Hydrate the form state from storage.

        Stored values are merged over defaults field by field, so fields added
        since the data was saved get their defaults. Malformed JSON falls back
        to defaults entirely.

        Returns:
            The hydrated form state
        """
        try:
            saved = self.storage.get_item(self.key)
        except Exception as e:
            logger.error(f"Error reading form data from slot '{self.key}': {e}")
            saved = None

        if not saved:
            self._state = FormState()
            return self.state

        try:
            parsed = json.loads(saved)
        except json.JSONDecodeError as e:
            logger.error(f"Error loading form data, falling back to defaults: {e}")
            self._state = FormState()
            return self.state

        if not isinstance(parsed, dict):
            logger.error(f"Stored form data is {type(parsed).__name__}, expected object - using defaults")
            self._state = FormState()
            return self.state

        self._state = coerce_form_state(parsed)
        logger.info(f"Loaded form data ({len(parsed)} stored fields)")
        return self.state

    def update(self, partial: Mapping[str, Any]) -> FormState:
        """
        Shallow-merge a partial update and persist it

        Args:
            partial: Field name (snake_case or camelCase) -> new value

        Returns:
            The updated form state
        """
        values: Dict[str, Any] = {}
        for key, value in partial.items():
            field_name = resolve_field_name(key)
            if field_name is None:
                logger.warning(f"Ignoring unknown form field '{key}'")
                continue
            try:
                values[field_name] = validate_field(field_name, value)
            except ValidationError as e:
                logger.error(f"Rejected update to form field '{key}': {e.error_count()} validation error(s)")

        if values:
            self._state = self._state.model_copy(update=values)
            self._persist()
        return self.state

    def clear(self):
        """Reset to defaults and remove the stored slot"""
        self._state = FormState()
        try:
            self.storage.remove_item(self.key)
            logger.info("Cleared form data")
        except Exception as e:
            logger.error(f"Error clearing form data: {e}")

    def _persist(self):
        """Write the current state; failures are logged, the in-memory state stays authoritative"""
        try:
            self.storage.set_item(self.key, json.dumps(self._state.to_storage()))
        except Exception as e:
            logger.error(f"Error saving form data: {e}")

    def replace(self, data: Optional[Mapping[str, Any]]) -> FormState:
        """Replace the whole state with coerced data (e.g. a form loaded from a file) and persist it"""
        self._state = coerce_form_state(data or {})
        self._persist()
        return self.state
