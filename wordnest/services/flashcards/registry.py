from __future__ import annotations

import random
import threading
from collections import OrderedDict

from .session import FlashcardSession

MAX_SESSIONS = 64


class SessionRegistry:
    """In-memory study sessions, oldest dropped first once full."""

    def __init__(self, max_sessions: int = MAX_SESSIONS, rng: random.Random | None = None):
        self.max_sessions = max_sessions
        self.rng = rng
        self._sessions: OrderedDict[str, FlashcardSession] = OrderedDict()
        self._lock = threading.Lock()

    def create(self) -> FlashcardSession:
        session = FlashcardSession(rng=self.rng)
        with self._lock:
            self._sessions[session.id] = session
            while len(self._sessions) > self.max_sessions:
                self._sessions.popitem(last=False)
        return session

    def get(self, session_id: str) -> FlashcardSession | None:
        with self._lock:
            return self._sessions.get(session_id)

    def discard(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)
