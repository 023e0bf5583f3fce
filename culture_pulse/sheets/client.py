"""Spreadsheet endpoint submission client"""

import asyncio
import json
from enum import Enum
from typing import Any, Dict, Mapping, Optional
import requests
from loguru import logger
from pydantic import BaseModel

from ..config import get_endpoint_url


class DeliveryOutcome(str, Enum):
    """
    What the transport can tell us about a submission.

    The endpoint's response is not relied upon, so a call that does not raise
    is only "sent": the row may or may not have landed in the sheet.
    """
    SENT_UNCONFIRMED = 'sent_unconfirmed'
    SENT_UNCONFIRMED_FALLBACK = 'sent_unconfirmed_fallback'
    TRANSPORT_FAILED = 'transport_failed'


class SubmissionResult(BaseModel):
    """Result of a best-effort remote submission"""
    success: bool
    outcome: DeliveryOutcome
    message: Optional[str] = None
    error: Optional[str] = None


def encode_form_value(value: Any) -> str:
    """Form-encoded rendering: objects as JSON, booleans lowercase, everything else str()"""
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if value is None:
        return ''
    return str(value)


class SheetsClient:
    """Submit flattened records to the spreadsheet endpoint"""

    def __init__(self, endpoint_url: Optional[str] = None):
        """
        Initialize sheets client

        Args:
            endpoint_url: Apps Script web app URL (defaults to CULTURE_PULSE_ENDPOINT_URL)
        """
        self.endpoint_url = endpoint_url or get_endpoint_url()
        logger.info("Sheets client initialized")

    def _post_json(self, record: Mapping[str, Any]) -> requests.Response:
        return requests.post(
            self.endpoint_url,
            data=json.dumps(record),
            headers={'Content-Type': 'application/json'},
        )

    def _post_form(self, record: Mapping[str, Any]) -> requests.Response:
        form_body: Dict[str, str] = {key: encode_form_value(value) for key, value in record.items()}
        return requests.post(
            self.endpoint_url,
            data=form_body,
            headers={'Content-Type': 'application/x-www-form-urlencoded'},
        )

    async def submit(self, record: Mapping[str, Any]) -> SubmissionResult:
        """
        Submit a flat record: JSON first, form-encoded fallback on transport failure

        Args:
            record: Flattened submission (column name -> value)

        Returns:
            SubmissionResult; success means the request went out, not that the row was written
        """
        submission_id = record.get('submissionId', 'N/A')
        logger.info(f"Submitting {submission_id} to sheets endpoint ({len(record)} columns)")

        try:
            response = await asyncio.to_thread(self._post_json, record)
            logger.debug(f"JSON submission sent for {submission_id} (status: {getattr(response, 'status_code', 'n/a')})")
            return SubmissionResult(
                success=True,
                outcome=DeliveryOutcome.SENT_UNCONFIRMED,
                message='Form submitted successfully to Google Sheets!',
            )
        except Exception as e:
            logger.error(f"❌ JSON submission failed for {submission_id}: {e}")

        try:
            logger.info("🔄 Attempting form-encoded fallback...")
            response = await asyncio.to_thread(self._post_form, record)
            logger.debug(f"Form-encoded submission sent for {submission_id} (status: {getattr(response, 'status_code', 'n/a')})")
            return SubmissionResult(
                success=True,
                outcome=DeliveryOutcome.SENT_UNCONFIRMED_FALLBACK,
                message='Form submitted successfully via fallback method!',
            )
        except Exception as e:
            logger.error(f"❌ All submission methods failed for {submission_id}: {e}")
            return SubmissionResult(
                success=False,
                outcome=DeliveryOutcome.TRANSPORT_FAILED,
                error=f"Unable to submit to Google Sheets: {e}",
            )
