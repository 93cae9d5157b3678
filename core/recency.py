"""Recently shown words, used to avoid immediate repeats."""

import json
import logging
import time

from .config import HISTORY_KEY, RETENTION_WINDOW_MS
from .interfaces import KeyValueStorage
from .models import RecencyRecord

logger = logging.getLogger(__name__)


class RecencyStore:
    """Time-windowed word history on top of a key-value storage.

    Records older than the retention window are dropped on read. Storage
    problems never reach the caller: a broken history reads as empty and
    a failed write is only logged.
    """

    def __init__(self, storage: KeyValueStorage, window_ms: int = RETENTION_WINDOW_MS,
                 key: str = HISTORY_KEY, clock=time.time):
        self.storage = storage
        self.window_ms = window_ms
        self.key = key
        self.clock = clock

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    def _load(self) -> list[RecencyRecord]:
        raw = self.storage.get(self.key)
        if not raw:
            return []
        data = json.loads(raw)
        if not isinstance(data, list):
            raise ValueError(f"History is not a list: {type(data).__name__}")
        return [RecencyRecord.from_dict(item) for item in data]

    def _save(self, records: list[RecencyRecord]) -> None:
        self.storage.set(self.key, json.dumps([r.to_dict() for r in records], ensure_ascii=False))

    def get_exclusions(self) -> list[str]:
        """Words seen within the retention window, oldest first, without duplicates."""
        try:
            records = self._load()
        except Exception as e:
            logger.warning(f"Could not read word history, ignoring it: {e}")
            return []

        now = self._now_ms()
        valid = [r for r in records if not r.is_expired(now, self.window_ms)]

        if len(valid) != len(records):
            logger.debug(f"Pruned {len(records) - len(valid)} expired history records")
            try:
                self._save(valid)
            except Exception as e:
                logger.warning(f"Could not write pruned word history: {e}")

        return list(dict.fromkeys(r.word for r in valid))

    def record(self, word: str) -> None:
        """Remember that word was just shown."""
        try:
            try:
                records = self._load()
            except (ValueError, KeyError, TypeError) as e:
                logger.warning(f"Word history is corrupt, starting a new one: {e}")
                records = []
            records.append(RecencyRecord(word, self._now_ms()))
            self._save(records)
        except Exception as e:
            logger.error(f"Storage error while recording '{word}': {e}")
