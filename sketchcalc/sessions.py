import logging
import threading
from collections import OrderedDict
from typing import Optional

import requests

from .config import Settings, load_settings
from .board.judgment.client import AnalysisClient
from .board.session import BoardSession
from .board.surface import ContainerBox

logger = logging.getLogger("sessions")


class SessionRegistry:
    """
    In-memory board sessions for the HTTP layer; nothing survives a restart.
    Holds at most settings.max_sessions; creating one more closes the least
    recently used session.
    """

    def __init__(self, settings: Optional[Settings] = None, http: Optional[requests.Session] = None):
        self.settings = settings or load_settings()
        self._http = http
        self._client: Optional[AnalysisClient] = None
        self._sessions: "OrderedDict[str, BoardSession]" = OrderedDict()
        self._lock = threading.Lock()

    def get_client(self) -> AnalysisClient:
        if self._client is None:
            self._client = AnalysisClient(
                self.settings.api_url,
                timeout=self.settings.api_timeout,
                http=self._http,
            )
            logger.info("Analysis client targets %s", self._client.endpoint)
        return self._client

    def create(self, container: Optional[ContainerBox] = None, device_scale: float = 1.0) -> BoardSession:
        session = BoardSession(self.get_client(), container=container, device_scale=device_scale)
        evicted = []
        with self._lock:
            while len(self._sessions) >= self.settings.max_sessions:
                evicted.append(self._sessions.popitem(last=False)[1])
            self._sessions[session.id] = session
        for old in evicted:
            old.close()
            logger.warning("Session limit %d reached, closed %s", self.settings.max_sessions, old.id)
        logger.info("Created session %s", session.id)
        return session

    def get(self, session_id: str) -> Optional[BoardSession]:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                self._sessions.move_to_end(session_id)
            return session

    def close(self, session_id: str) -> bool:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        logger.info("Closed session %s", session_id)
        return True

    def __len__(self) -> int:
        return len(self._sessions)
