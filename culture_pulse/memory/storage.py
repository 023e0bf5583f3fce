"""File-backed key-value slots for local durable storage"""

import os
import re
from pathlib import Path
from typing import Optional, Union
from loguru import logger


class LocalStorage:
    """Durable string slots addressed by fixed keys, one file per key"""

    def __init__(self, data_dir: Union[str, Path]):
        """
        Initialize local storage

        Args:
            data_dir: Directory holding one file per storage key (created if missing)
        """
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Local storage at {self.data_dir}")

    def _path_for(self, key: str) -> Path:
        if not key:
            raise ValueError("Storage key must not be empty")
        safe_key = re.sub(r'[^A-Za-z0-9_.-]', '_', key)
        return self.data_dir / f"{safe_key}.json"

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored string, or None when the slot is empty"""
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding='utf-8')

    def set_item(self, key: str, value: str):
        """Write a slot; the previous value stays intact if the write fails"""
        path = self._path_for(key)
        tmp_path = path.with_suffix('.json.tmp')
        with open(tmp_path, 'w', encoding='utf-8') as f:
            f.write(value)
        os.replace(tmp_path, path)

    def remove_item(self, key: str):
        path = self._path_for(key)
        if path.exists():
            path.unlink()
