"""
Local key-value store backed by a single JSON file.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from ...config_models import LocalStoreConfig
from ...interfaces.local_store import KeyValueStoreInterface
from ...utils.logging_config import get_logger


class JsonFileStore(KeyValueStoreInterface):
    """
    Every key lives in one JSON object on disk.

    Writes go through a temp file and ``os.replace`` so a crash never leaves
    half-written state behind. An unreadable file is treated as empty.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        settings = LocalStoreConfig(**(config or {}))
        self.path = Path(settings.path)
        self.indent = settings.indent
        self.logger = get_logger("local_store")
        self._state: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self.logger.warning(f"Could not read {self.path}, starting empty: {e}")
            return {}
        if not isinstance(data, dict):
            self.logger.warning(f"{self.path} does not hold a JSON object, starting empty")
            return {}
        return data

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".barberpro-", suffix=".json")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(self._state, f, indent=self.indent, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self._state.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._state[key] = value
        self._save()

    def remove(self, key: str) -> None:
        if key in self._state:
            del self._state[key]
            self._save()

    def reload(self) -> None:
        """Re-read the file, discarding in-memory state."""
        self._state = self._load()
