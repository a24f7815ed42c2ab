from __future__ import annotations

import json
import logging
import os
import tempfile
from typing import Any, Dict, List, Sequence

logger = logging.getLogger(__name__)

TABLE_SUFFIX = ".json"


class RowStore:
    """One JSON file per table, replaced atomically on every save."""

    def __init__(self, directory: str):
        self.directory = directory
        os.makedirs(directory, exist_ok=True)

    def table_path(self, table: str) -> str:
        return os.path.join(self.directory, f"{table}{TABLE_SUFFIX}")

    def load(self, table: str) -> List[Dict[str, Any]]:
        path = self.table_path(table)
        if not os.path.exists(path):
            logger.debug("Table %s has no file yet; treating as empty", table)
            return []

        with open(path, "r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Corrupt table file for {table}: {exc}") from exc

        if not isinstance(data, list) or not all(isinstance(row, dict) for row in data):
            raise ValueError(f"Table file for {table} must hold a JSON list of objects")
        logger.debug("Loaded %d row(s) from %s", len(data), path)
        return data

    def save(self, table: str, rows: Sequence[Dict[str, Any]]) -> None:
        path = self.table_path(table)
        fd, tmp_path = tempfile.mkstemp(prefix=f".{table}.", suffix=".tmp", dir=self.directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(list(rows), handle, indent=2)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        logger.debug("Saved %d row(s) to %s", len(rows), path)

    def tables(self) -> List[str]:
        names = [
            name[: -len(TABLE_SUFFIX)]
            for name in os.listdir(self.directory)
            if name.endswith(TABLE_SUFFIX) and not name.startswith(".")
        ]
        return sorted(names)
