"""
JSON file backed store for local runs and demos.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from ..config import AppConfig
from ..domain.exceptions import InvalidRecordError
from .memory_store import MemoryStore

logger = logging.getLogger(__name__)


class JsonFileStore(MemoryStore):
    """
    Loads appointments and staff from a JSON document of the form
    ``{"appointments": [...], "staff": [...]}``.
    """

    def __init__(self, data_file: Path, config: Optional[AppConfig] = None):
        """
        Initialize the store from a data file.

        Raises:
            FileNotFoundError: If the data file doesn't exist
            InvalidRecordError: If the file or any record in it is malformed
        """
        self.data_file = data_file
        data = self._load_data(data_file)
        super().__init__(
            config=config,
            appointments=data.get("appointments", []),
            staff=data.get("staff", []),
        )
        logger.info("Loaded store data from %s", data_file)

    @staticmethod
    def _load_data(data_file: Path) -> dict:
        if not data_file.exists():
            raise FileNotFoundError(f"Data file not found: {data_file}")

        try:
            with open(data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise InvalidRecordError(f"Invalid JSON in {data_file}: {exc}") from exc

        if not isinstance(data, dict):
            raise InvalidRecordError("Data file must contain an object at the root level.")

        for key in ("appointments", "staff"):
            records = data.get(key, [])
            if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
                raise InvalidRecordError(f"'{key}' must be a list of objects in {data_file}")

        return data
