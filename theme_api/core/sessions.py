"""In-memory session store (one orchestrator per browser session, nothing persisted)"""

import asyncio
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from theme_api.core.config import settings
from theme_api.core.orchestrator import GenerationOrchestrator
from theme_api.models.errors import ApplicationError, ErrorCode

logger = logging.getLogger(__name__)


class Session:
    def __init__(self, session_id: str, orchestrator: GenerationOrchestrator):
        self.session_id = session_id
        self.orchestrator = orchestrator
        self.last_access = datetime.now(timezone.utc)

    def touch(self) -> None:
        self.last_access = datetime.now(timezone.utc)


class SessionStore:
    """Maps session ids to orchestrators"""

    def __init__(self, factory: Callable[[], GenerationOrchestrator] = GenerationOrchestrator):
        self.factory = factory
        self._sessions: Dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def create(self, session_id: Optional[str] = None) -> Session:
        session_id = session_id or str(uuid.uuid4())
        session = Session(session_id, self.factory())
        self._sessions[session_id] = session
        logger.info(f"[Sessions] Created session {session_id}")
        return session

    def get(self, session_id: str) -> Session:
        """
        Raises:
            ApplicationError: NOT_FOUND when the session does not exist
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise ApplicationError(f"Session not found: {session_id}", code=ErrorCode.NOT_FOUND)
        session.touch()
        return session

    def get_or_create(self, session_id: Optional[str]) -> Session:
        if session_id and session_id in self._sessions:
            return self.get(session_id)
        return self.create(session_id)

    def remove_idle(self, max_age: timedelta) -> int:
        """Drop sessions that are idle (not running) and untouched for ``max_age``"""
        cutoff = datetime.now(timezone.utc) - max_age
        stale = [
            sid for sid, s in self._sessions.items()
            if s.orchestrator.run.is_terminal() and s.last_access < cutoff
        ]
        for sid in stale:
            del self._sessions[sid]
            logger.info(f"[Sessions] Cleaned up idle session: {sid}")
        return len(stale)


session_store = SessionStore()


async def cleanup_idle_sessions() -> None:
    """Periodically drop idle sessions every 5 minutes"""
    while True:
        try:
            await asyncio.sleep(300)
            removed = session_store.remove_idle(timedelta(minutes=settings.session_ttl_minutes))
            if removed:
                logger.info(f"[Sessions] Cleaned up {removed} idle sessions")
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Error in cleanup_idle_sessions: {e}", exc_info=True)
