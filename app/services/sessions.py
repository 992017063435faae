import time
import uuid
from collections.abc import Callable

from app.config import settings
from app.interfaces.book_search import BookSearchClient
from app.log import log
from app.services.controller import SearchController


class SessionStore:
    """One search controller per open session.

    Sessions untouched for longer than ``ttl_seconds`` are closed the next
    time a session is opened, and opening one past ``max_sessions`` closes
    the least recently used.
    """

    def __init__(
        self,
        client: BookSearchClient,
        *,
        ttl_seconds: float | None = None,
        max_sessions: int | None = None,
        clock: Callable[[], float] = time.monotonic,
        **controller_options,
    ) -> None:
        self._client = client
        self._ttl = settings.session_ttl_seconds if ttl_seconds is None else ttl_seconds
        self._max_sessions = max_sessions or settings.max_sessions
        self._clock = clock
        self._options = controller_options
        self._controllers: dict[str, SearchController] = {}
        self._last_used: dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._controllers)

    def create(self) -> str:
        self._expire()
        while len(self._controllers) >= self._max_sessions:
            oldest = min(self._last_used, key=self._last_used.__getitem__)
            log.info("Session limit reached, closing %s", oldest)
            self.close(oldest)

        session_id = uuid.uuid4().hex
        self._controllers[session_id] = SearchController(self._client, **self._options)
        self._last_used[session_id] = self._clock()
        log.debug("Opened search session %s", session_id)
        return session_id

    def get(self, session_id: str) -> SearchController:
        controller = self._controllers[session_id]
        self._last_used[session_id] = self._clock()
        return controller

    def close(self, session_id: str) -> None:
        controller = self._controllers.pop(session_id)
        del self._last_used[session_id]
        controller.close()
        log.debug("Closed search session %s", session_id)

    def close_all(self) -> None:
        for session_id in list(self._controllers):
            self.close(session_id)

    def _expire(self) -> None:
        cutoff = self._clock() - self._ttl
        for session_id, last_used in list(self._last_used.items()):
            if last_used < cutoff:
                log.debug("Search session %s expired", session_id)
                self.close(session_id)
