"""Final survey submission: local archive first, spreadsheet second"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from loguru import logger
from pydantic import BaseModel

from ..config import COMPLETED_KEY, COMPLETION_DATE_KEY, SUBMISSION_ID_KEY
from ..data.roster import Roster
from ..memory.archive import SubmissionArchive
from ..memory.store import FormStateStore
from ..sheets.client import DeliveryOutcome, SheetsClient, SubmissionResult
from ..sheets.transformer import transform
from .validators import completion_percentage


class SubmissionStatus(str, Enum):
    SUBMITTED = 'submitted'  # archived locally and sent to the sheet
    SAVED_LOCALLY = 'saved_locally'  # archived locally, remote pending
    FAILED = 'failed'  # local archive failed; nothing was sent


class SubmissionOutcome(BaseModel):
    """What the respondent is told after pressing submit"""
    status: SubmissionStatus
    title: str
    description: str
    submission_id: Optional[str] = None
    remote: Optional[SubmissionResult] = None
    error: Optional[str] = None


class SurveySubmitter:
    """Orchestrates archival, transformation and remote submission of the form"""

    def __init__(
        self,
        store: FormStateStore,
        archive: SubmissionArchive,
        client: SheetsClient,
        roster: Optional[Roster] = None,
        clear_on_success: bool = True
    ):
        """
        Initialize survey submitter

        Args:
            store: Form state store holding the answers to submit
            archive: Local submission archive (written before any remote call)
            client: Spreadsheet endpoint client
            roster: Teammate/leader lookups used by the transformer
            clear_on_success: Clear the form store once the answers are archived
        """
        self.store = store
        self.archive = archive
        self.client = client
        self.roster = roster or Roster()
        self.clear_on_success = clear_on_success

    async def submit(self) -> SubmissionOutcome:
        """
        Archive the current answers, then submit them to the spreadsheet.

        A local archive failure is the only hard error: the remote call is not
        attempted. A remote failure after archival is reported as a soft
        warning because the answers are safe locally.
        """
        snapshot = self.store.state
        percentage = completion_percentage(snapshot)

        local_result = self.archive.save_submission(snapshot, completion_percentage=percentage)
        if not local_result.success:
            logger.error(f"Submission aborted, local save failed: {local_result.error}")
            return SubmissionOutcome(
                status=SubmissionStatus.FAILED,
                title='Submission Error',
                description=local_result.error or 'Local save failed',
                error=local_result.error,
            )

        submission_id = local_result.submission_id
        remote_result = await self._send(submission_id)

        self._mark_completed(submission_id)
        if self.clear_on_success:
            self.store.clear()

        logger.info(
            f"Form submitted (local: {submission_id}, sheets: {remote_result.outcome.value})"
        )
        if remote_result.success:
            return SubmissionOutcome(
                status=SubmissionStatus.SUBMITTED,
                title='Success! 🎉',
                description='Your culture pulse has been saved and submitted successfully!',
                submission_id=submission_id,
                remote=remote_result,
            )
        return SubmissionOutcome(
            status=SubmissionStatus.SAVED_LOCALLY,
            title='Partially Saved',
            description='Saved locally, but Google Sheets submission failed. Your answers are safe and can be resent.',
            submission_id=submission_id,
            remote=remote_result,
            error=remote_result.error,
        )

    async def resend(self, submission_id: str) -> SubmissionResult:
        """Transform an archived submission again and send it to the spreadsheet"""
        return await self._send(submission_id)

    async def _send(self, submission_id: str) -> SubmissionResult:
        archived = self.archive.get_submission(submission_id)
        if archived is None:
            logger.error(f"Archived submission {submission_id} not found")
            return SubmissionResult(
                success=False,
                outcome=DeliveryOutcome.TRANSPORT_FAILED,
                error=f"Submission {submission_id} not found in archive",
            )
        try:
            record = transform(archived.form, metadata=archived.metadata, roster=self.roster)
        except Exception as e:
            logger.error(f"Error transforming submission {submission_id}: {e}")
            return SubmissionResult(success=False, outcome=DeliveryOutcome.TRANSPORT_FAILED, error=str(e))
        return await self.client.submit(record)

    def _mark_completed(self, submission_id: str):
        storage = self.archive.storage
        try:
            storage.set_item(COMPLETED_KEY, 'true')
            storage.set_item(COMPLETION_DATE_KEY, datetime.now(timezone.utc).isoformat())
            storage.set_item(SUBMISSION_ID_KEY, submission_id)
        except Exception as e:
            logger.error(f"Error storing completion markers for {submission_id}: {e}")
