"""In-memory registry of browsing sessions."""

from __future__ import annotations

import logging
import uuid
from collections import OrderedDict
from typing import Any

from moviemax.services.browsing import CatalogSession


logger = logging.getLogger(__name__)


class SessionRegistry:
    """High level access helpers for live catalog sessions.

    Holds at most ``max_sessions`` sessions; creating one more evicts the
    session that was used least recently.
    """

    def __init__(self, max_sessions: int | None = None) -> None:
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, CatalogSession] = OrderedDict()

    def create(self, **kwargs: Any) -> tuple[str, CatalogSession]:
        session_id = uuid.uuid4().hex
        session = CatalogSession(**kwargs)
        self._sessions[session_id] = session
        if self.max_sessions is not None:
            while len(self._sessions) > self.max_sessions:
                evicted_id, _ = self._sessions.popitem(last=False)
                logger.info("Evicted idle catalog session %s", evicted_id)
        return session_id, session

    def get(self, session_id: str) -> CatalogSession | None:
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
        return session

    def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)
