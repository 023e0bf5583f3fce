"""Local archive of finalized survey submissions"""

import json
import random
import string
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from loguru import logger
from pydantic import ValidationError

from .models import StorageResponse, SubmissionData, coerce_form_state
from .storage import LocalStorage
from ..config import MAX_SUBMISSIONS, SUBMISSIONS_KEY

_BASE36 = string.digits + string.ascii_lowercase


def new_submission_id() -> str:
    """Timestamp plus random base36 suffix, e.g. 'qpt-1735550000000-k3j9x0a1b'"""
    suffix = ''.join(random.choices(_BASE36, k=9))
    return f"qpt-{int(time.time() * 1000)}-{suffix}"


def new_session_id() -> str:
    return f"session-{int(time.time() * 1000)}"


class SubmissionArchive:
    """Append-only archive of submissions, newest first, capped at MAX_SUBMISSIONS"""

    def __init__(
        self,
        storage: LocalStorage,
        key: str = SUBMISSIONS_KEY,
        max_submissions: int = MAX_SUBMISSIONS
    ):
        self.storage = storage
        self.key = key
        self.max_submissions = max_submissions
        logger.info(f"Submission archive initialized (slot: {key})")

    def _read_raw(self) -> List[Dict[str, Any]]:
        """Stored entries as-is; raises when the slot cannot be read or parsed"""
        stored = self.storage.get_item(self.key)
        if not stored:
            return []
        raw = json.loads(stored)
        if not isinstance(raw, list):
            raise ValueError(f"Archived submissions is {type(raw).__name__}, expected list")
        return raw

    def get_all_submissions(self) -> List[SubmissionData]:
        """All archived submissions, newest first; unreadable entries are skipped"""
        try:
            raw = self._read_raw()
        except Exception as e:
            logger.error(f"Error reading submissions from storage: {e}")
            return []

        submissions = []
        for item in raw:
            try:
                submissions.append(SubmissionData.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping unreadable archived submission: {e.error_count()} validation error(s)")
        return submissions

    def _write(self, entries: List[Dict[str, Any]]):
        self.storage.set_item(self.key, json.dumps(entries))

    def save_submission(self, form_data: Any, completion_percentage: int = 100) -> StorageResponse:
        """
        Archive a finalized form snapshot

        Existing entries are kept verbatim. When the stored archive cannot be
        read the save fails instead of overwriting it.

        Args:
            form_data: FormState or raw mapping of form fields
            completion_percentage: Share of completed sections at submission time

        Returns:
            StorageResponse carrying the new submission id on success
        """
        try:
            entries = self._read_raw()

            submission = SubmissionData(
                submission_id=new_submission_id(),
                session_id=new_session_id(),
                completion_percentage=completion_percentage,
                form=coerce_form_state(form_data),
            )

            entries.insert(0, submission.model_dump(by_alias=True))
            if len(entries) > self.max_submissions:
                del entries[self.max_submissions:]

            self._write(entries)

            logger.success(
                f"📁 Submission saved locally: {submission.submission_id} "
                f"(total: {len(entries)})"
            )
            return StorageResponse(
                success=True,
                message='Form submitted successfully and saved locally!',
                submission_id=submission.submission_id,
            )

        except Exception as e:
            logger.error(f"Error saving submission: {e}")
            return StorageResponse(success=False, error=str(e) or 'Failed to save submission locally')

    def get_submission(self, submission_id: str) -> Optional[SubmissionData]:
        for submission in self.get_all_submissions():
            if submission.submission_id == submission_id:
                return submission
        return None

    def delete_submission(self, submission_id: str) -> StorageResponse:
        try:
            entries = self._read_raw()
            remaining = [
                entry for entry in entries
                if not (isinstance(entry, dict) and entry.get('submissionId') == submission_id)
            ]
            self._write(remaining)
            return StorageResponse(success=True, message='Submission deleted successfully')
        except Exception as e:
            logger.error(f"Error deleting submission {submission_id}: {e}")
            return StorageResponse(success=False, error=str(e) or 'Failed to delete submission')

    def clear_all_submissions(self) -> StorageResponse:
        try:
            self.storage.remove_item(self.key)
            return StorageResponse(success=True, message='All submissions cleared')
        except Exception as e:
            logger.error(f"Error clearing submissions: {e}")
            return StorageResponse(success=False, error=str(e) or 'Failed to clear submissions')

    def export_submissions(self) -> str:
        """All submissions as pretty-printed JSON (for backup/download)"""
        try:
            return json.dumps([s.model_dump(by_alias=True) for s in self.get_all_submissions()], indent=2)
        except Exception as e:
            logger.error(f"Error exporting submissions: {e}")
            return '[]'

    def get_storage_stats(self) -> Dict[str, Any]:
        """
        Archive statistics

        Returns:
            Dictionary with submission count, serialized size and the oldest/newest timestamps
        """
        submissions = self.get_all_submissions()
        storage_size = len(json.dumps([s.model_dump(by_alias=True) for s in submissions]).encode('utf-8'))
        return {
            'total_submissions': len(submissions),
            'storage_size': storage_size,
            'storage_size_kb': f"{storage_size / 1024:.2f}",
            'storage_size_mb': f"{storage_size / (1024 * 1024):.2f}",
            'oldest_submission': submissions[-1].timestamp if submissions else None,
            'newest_submission': submissions[0].timestamp if submissions else None,
            'generated_at': datetime.now(timezone.utc).isoformat(),
        }
