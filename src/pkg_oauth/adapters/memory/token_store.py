from __future__ import annotations

import threading
from typing import Dict, Optional

import structlog

from ...domain.entities import OpaqueTokenRecord
from ...domain.ports import Clock, TokenStore

logger = structlog.get_logger(__name__)


class InMemoryTokenStore(TokenStore):
    """
    Process-local opaque token store.

    A single lock guards the dict; records are frozen dataclasses, so a
    reader either sees a complete record or none at all. Expired records are
    kept until `purge_expired()` runs; `get` never filters them.
    """

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._records: Dict[str, OpaqueTokenRecord] = {}
        self._lock = threading.Lock()

    def put(self, value: str, record: OpaqueTokenRecord) -> None:
        with self._lock:
            self._records[value] = record

    def put_if_absent(self, value: str, record: OpaqueTokenRecord) -> bool:
        with self._lock:
            if value in self._records:
                return False
            self._records[value] = record
            return True

    def get(self, value: str) -> Optional[OpaqueTokenRecord]:
        with self._lock:
            return self._records.get(value)

    def remove(self, value: str) -> None:
        with self._lock:
            self._records.pop(value, None)

    def purge_expired(self) -> int:
        """Drop records whose expiry has passed. Returns how many were removed."""
        now = self._clock.now()
        with self._lock:
            expired = [k for k, r in self._records.items() if not r.is_active(now)]
            for key in expired:
                del self._records[key]

        if expired:
            logger.debug("opaque_tokens_purged", count=len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
