"""Per-session store of the latest correlation analysis."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Optional

from corrguide.correlation import CorrelationAnalysisResult
from corrguide.exceptions import ConfigurationError, InvalidInputError, NoAnalysisAvailableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Entry:
    result: CorrelationAnalysisResult
    stored_at: float


@dataclass
class _LockSlot:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class AnalysisSessionCache:
    """
    Thread-safe mapping of session id to its most recent analysis.

    Writes and reads for one session are serialized by a lock dedicated
    to that session, so different sessions never contend.  A ``put``
    replaces the previous result wholesale; results are immutable and
    are never merged.  With a ``ttl_seconds`` set, entries older than
    the TTL are treated as expired session state and dropped on access.
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            ttl_seconds: Lifetime of an entry, or None to keep entries
                until deleted
            clock: Monotonic time source (injectable for tests)
        """
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ConfigurationError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self._entries: dict[str, _Entry] = {}
        self._locks: dict[str, _LockSlot] = {}
        self._registry_lock = threading.Lock()
        self._ttl = ttl_seconds
        self._clock = clock

    @property
    def ttl_seconds(self) -> Optional[float]:
        return self._ttl

    @staticmethod
    def _check_session(session_id: str) -> str:
        if not isinstance(session_id, str) or not session_id.strip():
            raise InvalidInputError("session_id must be a non-empty string")
        return session_id

    @contextmanager
    def _session_lock(self, session_id: str) -> Iterator[None]:
        # slots are dropped once no thread holds or waits on them
        with self._registry_lock:
            slot = self._locks.setdefault(session_id, _LockSlot())
            slot.users += 1
        try:
            with slot.lock:
                yield
        finally:
            with self._registry_lock:
                slot.users -= 1
                if slot.users == 0:
                    del self._locks[session_id]

    def _expired(self, entry: _Entry) -> bool:
        return self._ttl is not None and self._clock() - entry.stored_at >= self._ttl

    def put(self, session_id: str, result: CorrelationAnalysisResult) -> None:
        """
        Store *result* as the session's current analysis.

        Args:
            session_id: Owning session
            result: Analysis replacing any previous one
        """
        self._check_session(session_id)
        with self._session_lock(session_id):
            replaced = session_id in self._entries
            self._entries[session_id] = _Entry(result, self._clock())
        logger.debug(
            f"{'Replaced' if replaced else 'Stored'} analysis for session {session_id} "
            f"({len(result.tickers)} tickers)"
        )

    def peek(self, session_id: str) -> Optional[CorrelationAnalysisResult]:
        """
        Return the session's analysis, or None when absent or expired.
        """
        self._check_session(session_id)
        with self._session_lock(session_id):
            entry = self._entries.get(session_id)
            if entry is None:
                return None
            if self._expired(entry):
                del self._entries[session_id]
                logger.info(f"Analysis for session {session_id} expired")
                return None
            return entry.result

    def get(self, session_id: str) -> CorrelationAnalysisResult:
        """
        Return the session's analysis.

        Raises:
            NoAnalysisAvailableError: If no analysis was stored, it was
                deleted, or it expired
        """
        result = self.peek(session_id)
        if result is None:
            raise NoAnalysisAvailableError(
                f"no correlation analysis available for session {session_id!r}; "
                "run an analysis first"
            )
        return result

    def delete(self, session_id: str) -> bool:
        """
        Remove the session's analysis.

        Returns:
            True if an entry was removed
        """
        self._check_session(session_id)
        with self._session_lock(session_id):
            removed = self._entries.pop(session_id, None) is not None
        if removed:
            logger.debug(f"Deleted analysis for session {session_id}")
        return removed

    def purge_expired(self) -> int:
        """
        Drop every expired entry.

        Returns:
            Number of entries removed
        """
        if self._ttl is None:
            return 0
        with self._registry_lock:
            sessions = list(self._entries)
        purged = 0
        for session_id in sessions:
            with self._session_lock(session_id):
                entry = self._entries.get(session_id)
                if entry is not None and self._expired(entry):
                    del self._entries[session_id]
                    purged += 1
        if purged:
            logger.info(f"Purged {purged} expired session analyses")
        return purged

    def clear(self) -> None:
        """Remove all entries."""
        with self._registry_lock:
            sessions = list(self._entries)
        for session_id in sessions:
            with self._session_lock(session_id):
                self._entries.pop(session_id, None)

    def __contains__(self, session_id: object) -> bool:
        entry = self._entries.get(session_id)  # type: ignore[arg-type]
        return entry is not None and not self._expired(entry)

    def __len__(self) -> int:
        return sum(1 for entry in list(self._entries.values()) if not self._expired(entry))
