"""Unit tests for the survey submission flow"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from culture_pulse.config import COMPLETED_KEY, COMPLETION_DATE_KEY, SUBMISSION_ID_KEY
from culture_pulse.memory.models import StorageResponse
from culture_pulse.sheets.client import DeliveryOutcome, SubmissionResult
from culture_pulse.survey.submission import SubmissionStatus, SurveySubmitter

SENT = SubmissionResult(success=True, outcome=DeliveryOutcome.SENT_UNCONFIRMED, message="ok")
FAILED = SubmissionResult(
    success=False,
    outcome=DeliveryOutcome.TRANSPORT_FAILED,
    error="Unable to submit to Google Sheets: offline",
)


def _client(result: SubmissionResult) -> MagicMock:
    client = MagicMock()
    client.submit = AsyncMock(return_value=result)
    return client


@pytest.fixture
def filled_store(store, complete_state):
    store.update(complete_state.model_dump())
    return store


class TestSubmit:
    """Test local-first submission"""

    @pytest.mark.asyncio
    async def test_success_archives_then_sends(self, filled_store, archive, storage):
        """Test the archived submission is what gets sent"""
        client = _client(SENT)
        submitter = SurveySubmitter(filled_store, archive, client)

        outcome = await submitter.submit()

        assert outcome.status == SubmissionStatus.SUBMITTED
        assert outcome.title == "Success! 🎉"

        archived = archive.get_submission(outcome.submission_id)
        assert archived is not None
        assert archived.completion_percentage == 100

        record = client.submit.call_args.args[0]
        assert record["submissionId"] == outcome.submission_id
        assert record["sessionId"] == archived.session_id
        assert record["feedbackLeaders"] == "Fahim (HOD)"

    @pytest.mark.asyncio
    async def test_success_clears_store_and_sets_markers(self, filled_store, archive, storage):
        submitter = SurveySubmitter(filled_store, archive, _client(SENT))

        outcome = await submitter.submit()

        assert filled_store.load().wins_text == ""
        assert storage.get_item(COMPLETED_KEY) == "true"
        assert storage.get_item(COMPLETION_DATE_KEY)
        assert storage.get_item(SUBMISSION_ID_KEY) == outcome.submission_id

    @pytest.mark.asyncio
    async def test_remote_failure_is_soft(self, filled_store, archive):
        """Test a remote failure after archival reports SAVED_LOCALLY"""
        submitter = SurveySubmitter(filled_store, archive, _client(FAILED))

        outcome = await submitter.submit()

        assert outcome.status == SubmissionStatus.SAVED_LOCALLY
        assert outcome.title == "Partially Saved"
        assert outcome.error == FAILED.error
        assert archive.get_submission(outcome.submission_id) is not None
        assert filled_store.state.wins_text == ""

    @pytest.mark.asyncio
    async def test_local_failure_skips_remote(self, filled_store):
        """Test no remote call is made when the archive write fails"""
        archive = MagicMock()
        archive.save_submission.return_value = StorageResponse(success=False, error="quota exceeded")
        client = _client(SENT)
        submitter = SurveySubmitter(filled_store, archive, client)

        outcome = await submitter.submit()

        assert outcome.status == SubmissionStatus.FAILED
        assert outcome.title == "Submission Error"
        assert outcome.error == "quota exceeded"
        client.submit.assert_not_called()
        assert filled_store.state.wins_text == "Shipped the billing revamp"

    @pytest.mark.asyncio
    async def test_store_kept_when_clearing_disabled(self, filled_store, archive):
        submitter = SurveySubmitter(filled_store, archive, _client(SENT), clear_on_success=False)

        await submitter.submit()

        assert filled_store.state.wins_text == "Shipped the billing revamp"

    @pytest.mark.asyncio
    async def test_partial_form_records_completion(self, store, archive):
        store.update({"cultureText": "trust"})
        submitter = SurveySubmitter(store, archive, _client(SENT))

        outcome = await submitter.submit()

        assert archive.get_submission(outcome.submission_id).completion_percentage == 17


class TestResend:
    """Test resending archived submissions"""

    @pytest.mark.asyncio
    async def test_resend_uses_archived_ids(self, filled_store, archive):
        client = _client(FAILED)
        submitter = SurveySubmitter(filled_store, archive, client)
        outcome = await submitter.submit()

        client.submit = AsyncMock(return_value=SENT)
        result = await submitter.resend(outcome.submission_id)

        assert result.success is True
        record = client.submit.call_args.args[0]
        assert record["submissionId"] == outcome.submission_id
        assert record["winsText"] == "Shipped the billing revamp"

    @pytest.mark.asyncio
    async def test_resend_unknown_id(self, store, archive):
        client = _client(SENT)
        submitter = SurveySubmitter(store, archive, client)

        result = await submitter.resend("qpt-missing")

        assert result.success is False
        assert "not found in archive" in result.error
        client.submit.assert_not_called()
