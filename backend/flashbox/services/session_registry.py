"""
In-process registry of live review sessions.

Review sessions are ephemeral and never written to the database; the registry
only lets the HTTP layer find a session again between requests. Sync FastAPI
endpoints run in a thread pool, so the map is guarded by a lock and each entry
carries its own lock to serialise actions on one session.
"""
import logging
import threading
import time
import uuid
from dataclasses import dataclass, field

from flashbox.core.exceptions import NotFoundError
from flashbox.domain.review.session import ReviewSession

logger = logging.getLogger(__name__)


@dataclass
class SessionEntry:
    session: ReviewSession
    owner_id: uuid.UUID
    last_used: float
    lock: threading.Lock = field(default_factory=threading.Lock)


class SessionRegistry:
    def __init__(self, ttl_seconds: float, clock=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[uuid.UUID, SessionEntry] = {}
        self._lock = threading.Lock()

    def add(self, session: ReviewSession, owner_id: uuid.UUID) -> uuid.UUID:
        session_id = uuid.uuid4()
        with self._lock:
            self._evict_expired()
            self._entries[session_id] = SessionEntry(
                session=session,
                owner_id=owner_id,
                last_used=self._clock(),
            )
        return session_id

    def get(self, session_id: uuid.UUID, owner_id: uuid.UUID) -> SessionEntry:
        with self._lock:
            self._evict_expired()
            entry = self._entries.get(session_id)
            # other owners' sessions are reported as missing
            if entry is None or entry.owner_id != owner_id:
                raise NotFoundError(f"review session {session_id} not found")
            entry.last_used = self._clock()
            return entry

    def discard(self, session_id: uuid.UUID, owner_id: uuid.UUID) -> None:
        with self._lock:
            entry = self._entries.get(session_id)
            if entry is None or entry.owner_id != owner_id:
                raise NotFoundError(f"review session {session_id} not found")
            del self._entries[session_id]

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def _evict_expired(self):
        now = self._clock()
        expired = [sid for sid, e in self._entries.items() if now - e.last_used > self.ttl_seconds]
        for sid in expired:
            logger.info("Evicting idle review session %s", sid)
            del self._entries[sid]
