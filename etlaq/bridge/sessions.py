"""
In-flight bridge sessions.

Each ``/agent`` request registers a session holding a cancellation token and,
once the studio answers, the live upstream response. ``/abort/<id>`` sets the
token and closes the upstream, which ends the relay loop. Sessions are
removed when their stream ends; anything older than the TTL is cancelled and
evicted on the next registration or explicit ``sweep()``.
"""
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class BridgeSession:
    session_id: str
    created_at: float
    cancelled: threading.Event = field(default_factory=threading.Event)
    upstream: Optional[Any] = None

    def attach(self, upstream):
        self.upstream = upstream
        # Abort may have landed while the upstream was still connecting
        if self.cancelled.is_set():
            upstream.close()

    def cancel(self):
        self.cancelled.set()
        if self.upstream is not None:
            self.upstream.close()


class SessionRegistry:
    def __init__(self, ttl: float = 600, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._sessions: Dict[str, BridgeSession] = {}
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id):
        with self._lock:
            return session_id in self._sessions

    def register(self, session_id: str) -> BridgeSession:
        self.sweep()
        session = BridgeSession(session_id=session_id, created_at=self._clock())
        with self._lock:
            previous = self._sessions.get(session_id)
            self._sessions[session_id] = session
        if previous is not None:
            logger.info("Session %s reused, cancelling the previous stream", session_id)
            previous.cancel()
        return session

    def get(self, session_id: str) -> Optional[BridgeSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def abort(self, session_id: str) -> bool:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.cancel()
        logger.info("Session %s aborted", session_id)
        return True

    def remove(self, session_id: str, session: Optional[BridgeSession] = None):
        """Drop a finished session; a newer session under the same id is left alone."""
        with self._lock:
            current = self._sessions.get(session_id)
            if current is not None and (session is None or current is session):
                del self._sessions[session_id]

    def sweep(self) -> int:
        deadline = self._clock() - self.ttl
        with self._lock:
            expired = [s for s in self._sessions.values() if s.created_at <= deadline]
            for session in expired:
                del self._sessions[session.session_id]
        for session in expired:
            session.cancel()
        if expired:
            logger.info("Evicted %d expired session(s)", len(expired))
        return len(expired)
