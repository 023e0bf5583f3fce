"""Runtime settings for the culture pulse survey"""

import os

# Google Apps Script web app that appends submissions to the responses sheet
DEFAULT_ENDPOINT_URL = (
    'https://script.google.com/macros/s/'
    'AKfycbwpW-GbLMqojth0o3NE75DQsPAfxzvdXvP1TBr60PllbmiWW6oS9S4SozzJGlvURMJOQg/exec'
)
DEFAULT_DATA_DIR = '.culture_pulse'

# Storage slots
FORM_STATE_KEY = 'qpt-form-data'
SUBMISSIONS_KEY = 'qpt-submissions'
COMPLETED_KEY = 'qpt-pulse-completed'
COMPLETION_DATE_KEY = 'qpt-pulse-completion-date'
SUBMISSION_ID_KEY = 'qpt-submission-id'

MAX_SUBMISSIONS = 1000


def get_endpoint_url() -> str:
    """Spreadsheet endpoint, overridable through CULTURE_PULSE_ENDPOINT_URL"""
    return os.getenv('CULTURE_PULSE_ENDPOINT_URL') or DEFAULT_ENDPOINT_URL


def get_data_dir() -> str:
    """Local storage directory, overridable through CULTURE_PULSE_DATA_DIR"""
    return os.getenv('CULTURE_PULSE_DATA_DIR') or DEFAULT_DATA_DIR
