"""Tabular model of the spreadsheet endpoint's storage contract

Mirrors what the Apps Script handler does with an incoming record: seed the
base header row on first write, widen the header with previously-unseen
leader rating columns, render values, append the row.
"""

import csv
import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union
from loguru import logger

from .transformer import get_sheet_columns, is_leader_rating_column

Cell = Union[str, int, float]


def render_value(value: Any) -> Cell:
    """Cell rendering: booleans Yes/No, lists comma-joined, objects as JSON, None empty"""
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'Yes' if value else 'No'
    if isinstance(value, (list, tuple)):
        return ', '.join(str(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value)
    return value


def decode_form_payload(params: Mapping[str, str]) -> Dict[str, Any]:
    """Decode a form-encoded body: JSON where a value parses, raw string otherwise"""
    data: Dict[str, Any] = {}
    for key, raw in params.items():
        try:
            data[key] = json.loads(raw)
        except (TypeError, ValueError):
            data[key] = raw
    return data


class SheetTable:
    """Header row plus data rows, widened lazily for dynamic leader rating columns"""

    def __init__(self, base_columns: Optional[Sequence[str]] = None):
        self.base_columns = list(base_columns) if base_columns is not None else get_sheet_columns()
        self.headers: List[str] = []
        self.rows: List[List[Cell]] = []

    def _ensure_headers(self, record: Mapping[str, Any]) -> List[str]:
        if not self.headers:
            self.headers = list(self.base_columns)
            logger.info(f"Initialized sheet headers ({len(self.headers)} columns)")

        new_columns = [
            key for key in record
            if is_leader_rating_column(key) and key not in self.headers
        ]
        if new_columns:
            self.headers.extend(new_columns)
            for row in self.rows:
                row.extend([''] * len(new_columns))
            logger.info(f"Added {len(new_columns)} dynamic columns: {new_columns}")
        return new_columns

    def append(self, record: Mapping[str, Any]) -> List[Cell]:
        """
        Append a record as a row in header order

        Args:
            record: Column name -> value; keys matching no header (other than new
                leader rating columns) are ignored

        Returns:
            The appended row
        """
        self._ensure_headers(record)
        row = [render_value(record[header]) if header in record else '' for header in self.headers]
        self.rows.append(row)
        return row

    def to_csv(self, path: Union[str, Path]) -> Path:
        """Write header and rows as CSV"""
        path = Path(path)
        with open(path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(self.headers or self.base_columns)
            writer.writerows(self.rows)
        logger.info(f"Wrote {len(self.rows)} rows to {path}")
        return path
