from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Callable, Generic

from pagewalk.core.engine import PaginationEngine
from pagewalk.utils.types import T

logger = logging.getLogger(__name__)


class EngineRegistry(Generic[T]):
    """One PaginationEngine per session key.

    Engines hold per-session cursors and loading state, so they are never
    shared. The least recently used session is closed once more than
    ``max_sessions`` are open.
    """

    def __init__(self, factory: Callable[[], PaginationEngine[T]], *, max_sessions: int = 1000) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be >= 1")
        self._factory = factory
        self._max_sessions = max_sessions
        self._engines: OrderedDict[str, PaginationEngine[T]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._engines)

    def __contains__(self, session_key: str) -> bool:
        return session_key in self._engines

    def get(self, session_key: str) -> PaginationEngine[T]:
        """Return the session's engine, creating it on first use."""
        engine = self._engines.get(session_key)
        if engine is not None:
            self._engines.move_to_end(session_key)
            return engine

        engine = self._factory()
        self._engines[session_key] = engine
        logger.debug(f"Opened browsing session '{session_key}'")
        while len(self._engines) > self._max_sessions:
            evicted_key, evicted = self._engines.popitem(last=False)
            evicted.close()
            logger.debug(f"Evicted browsing session '{evicted_key}'")
        return engine

    def discard(self, session_key: str) -> None:
        engine = self._engines.pop(session_key, None)
        if engine is not None:
            engine.close()

    def clear(self) -> None:
        for engine in self._engines.values():
            engine.close()
        self._engines.clear()
