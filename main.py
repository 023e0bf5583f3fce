#!/usr/bin/env python3
"""Operator entry point for the culture pulse survey archive and submissions"""

import asyncio
import sys
import argparse
import json
from pathlib import Path
from loguru import logger
from dotenv import load_dotenv

LOG_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"


def configure_logging(debug: bool = False):
    """stderr sink plus a serialized JSON file sink"""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if debug else "INFO", format=LOG_FORMAT)
    logger.add("logs/culture_pulse_json_{time}.log", rotation="1 day", retention="7 days", level="DEBUG", serialize=True)


# Load environment variables
load_dotenv()

from culture_pulse.config import get_data_dir, get_endpoint_url
from culture_pulse.memory.storage import LocalStorage
from culture_pulse.memory.store import FormStateStore
from culture_pulse.memory.archive import SubmissionArchive
from culture_pulse.sheets.client import SheetsClient
from culture_pulse.sheets.table import SheetTable
from culture_pulse.sheets.transformer import transform
from culture_pulse.survey.submission import SubmissionStatus, SurveySubmitter
from culture_pulse.survey.validators import SECTION_VALIDATORS


def export_csv(archive: SubmissionArchive, path: str) -> int:
    """Render every archived submission through the sheet table, oldest first"""
    table = SheetTable()
    submissions = archive.get_all_submissions()
    for submission in reversed(submissions):
        table.append(transform(submission.form, metadata=submission.metadata))
    table.to_csv(path)
    return len(submissions)


async def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(description='Culture Pulse survey archive and submission tool')
    parser.add_argument('--data-dir', type=str, help='Local storage directory (default: CULTURE_PULSE_DATA_DIR or .culture_pulse)')
    parser.add_argument('--endpoint', type=str, help='Spreadsheet endpoint URL (default: CULTURE_PULSE_ENDPOINT_URL)')
    parser.add_argument('--stats', action='store_true', help='Show archive statistics')
    parser.add_argument('--export', type=str, metavar='PATH', help='Export archived submissions as JSON')
    parser.add_argument('--export-csv', type=str, metavar='PATH', help='Export archived submissions as a spreadsheet-shaped CSV')
    parser.add_argument('--submit', type=str, metavar='FILE', help='Load a form-state JSON file and submit it')
    parser.add_argument('--resend', type=str, metavar='SUBMISSION_ID', help='Resend an archived submission to the spreadsheet')
    parser.add_argument('--debug', action='store_true', help='Enable verbose logging')
    args = parser.parse_args()

    configure_logging(args.debug)

    storage = LocalStorage(args.data_dir or get_data_dir())
    archive = SubmissionArchive(storage)

    if args.stats:
        print(json.dumps(archive.get_storage_stats(), indent=2))
        return 0

    if args.export:
        Path(args.export).write_text(archive.export_submissions(), encoding='utf-8')
        logger.success(f"Exported submissions to {args.export}")
        return 0

    if args.export_csv:
        count = export_csv(archive, args.export_csv)
        logger.success(f"Exported {count} submissions to {args.export_csv}")
        return 0

    store = FormStateStore(storage)
    submitter = SurveySubmitter(store, archive, SheetsClient(args.endpoint or get_endpoint_url()))

    if args.resend:
        result = await submitter.resend(args.resend)
        if not result.success:
            logger.error(result.error)
            return 1
        logger.success(result.message)
        return 0

    if args.submit:
        try:
            form_data = json.loads(Path(args.submit).read_text(encoding='utf-8'))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read form data from {args.submit}: {e}")
            return 1

        state = store.replace(form_data)
        for section, validator in SECTION_VALIDATORS.items():
            if not validator(state):
                logger.warning(f"Section '{section}' is incomplete")

        outcome = await submitter.submit()
        print(f"{outcome.title}: {outcome.description}")
        if outcome.submission_id:
            print(f"Submission ID: {outcome.submission_id}")
        return 1 if outcome.status == SubmissionStatus.FAILED else 0

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
