"""In-process store for CSV import sessions.

A session lives from upload until commit, cancel or idle expiry. One store is
created per process and handed to the services that need it.
"""

import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, UTC
from typing import Callable, Optional, TYPE_CHECKING

import structlog

from bankimport.domain.column_mapping import ColumnMapping
from bankimport.domain.errors import (
    ErrorKind,
    MappingError,
    SessionExpiredError,
    SessionNotFoundError,
    session_expired,
    session_not_found,
)

if TYPE_CHECKING:
    from bankimport.domain.import_models import PreviewResult

logger = structlog.get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class RawRow:
    """One data row as tokenized; ``row_index`` is 0-based."""

    row_index: int
    cells: tuple[str, ...]

    def cell(self, index: int) -> str:
        """Return the cell at ``index``, or "" when the row is too short."""
        if 0 <= index < len(self.cells):
            return self.cells[index]
        return ""


@dataclass
class ImportSession:
    """Server-side state for one uploaded file."""

    session_id: str
    account_id: int
    file_name: str
    raw_headers: tuple[str, ...]
    raw_rows: tuple[RawRow, ...]
    created_at: datetime
    expires_at: datetime
    column_mapping: Optional[ColumnMapping] = None
    # Latest preview snapshot, replaced on every preview run
    preview: Optional["PreviewResult"] = None

    @property
    def total_rows(self) -> int:
        return len(self.raw_rows)


class ImportSessionStore:
    """Thread-safe registry of import sessions with idle expiry."""

    def __init__(
        self,
        ttl: timedelta = timedelta(minutes=30),
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize session store.

        Args:
            ttl: Idle lifetime; every access extends the session by this much
            clock: Returns the current time (injectable for tests)
        """
        self.ttl = ttl
        self.clock = clock
        self._sessions: dict[str, ImportSession] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(
        self,
        headers: tuple[str, ...],
        rows: tuple[tuple[str, ...], ...],
        account_id: int,
        file_name: str,
    ) -> ImportSession:
        """Create a session for freshly tokenized rows.

        Returns:
            The new session
        """
        now = self.clock()
        session = ImportSession(
            session_id=secrets.token_urlsafe(24),
            account_id=account_id,
            file_name=file_name,
            raw_headers=tuple(headers),
            raw_rows=tuple(RawRow(row_index=i, cells=tuple(row)) for i, row in enumerate(rows)),
            created_at=now,
            expires_at=now + self.ttl,
        )
        with self._lock:
            self._purge_expired_locked(now)
            self._sessions[session.session_id] = session

        logger.info("session_created", session_id=session.session_id, rows=session.total_rows)
        return session

    def get(self, session_id: str) -> ImportSession:
        """Fetch a live session and extend its lifetime.

        Raises:
            SessionNotFoundError: If the id is unknown
            SessionExpiredError: If the session was idle too long
        """
        with self._lock:
            return self._get_locked(session_id)

    def bind_mapping(self, session_id: str, mapping: ColumnMapping) -> ImportSession:
        """Attach a column mapping to a session (once).

        Raises:
            SessionNotFoundError: If the session is unknown or expired
            MappingError: MAPPING_ALREADY_SET if the session is already mapped
        """
        with self._lock:
            session = self._get_locked(session_id)
            if session.column_mapping is not None:
                raise MappingError(
                    ErrorKind.MAPPING_ALREADY_SET,
                    "This session is already mapped; upload the file again to change the mapping",
                )
            session.column_mapping = mapping
            return session

    def store_preview(self, session_id: str, preview: "PreviewResult") -> None:
        """Cache the latest preview result on the session."""
        with self._lock:
            self._get_locked(session_id).preview = preview

    def take(self, session_id: str) -> ImportSession:
        """Remove a live session from the store and return it.

        Only one caller can take a given session.

        Raises:
            SessionNotFoundError: If the id is unknown or already taken
            SessionExpiredError: If the session was idle too long
        """
        with self._lock:
            session = self._get_locked(session_id)
            del self._sessions[session_id]
        logger.info("session_taken", session_id=session_id)
        return session

    def remove(self, session_id: str) -> bool:
        """Drop a session. Returns True if it existed."""
        with self._lock:
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info("session_removed", session_id=session_id)
        return removed

    def purge_expired(self) -> int:
        """Drop every expired session. Returns the number dropped."""
        with self._lock:
            return self._purge_expired_locked(self.clock())

    def _get_locked(self, session_id: str) -> ImportSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_not_found(session_id))

        now = self.clock()
        if now >= session.expires_at:
            del self._sessions[session_id]
            logger.info("session_expired", session_id=session_id)
            raise SessionExpiredError(session_expired(session_id))

        session.expires_at = now + self.ttl
        return session

    def _purge_expired_locked(self, now: datetime) -> int:
        expired = [sid for sid, s in self._sessions.items() if now >= s.expires_at]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info("sessions_purged", count=len(expired))
        return len(expired)
