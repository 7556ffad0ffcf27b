"""Page service: one PageController per session, cycles run as background jobs."""

import asyncio
import logging
import threading
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Any, Callable, TYPE_CHECKING

from ....models import Language, PageState, PageStatus
from ....pipeline import FETCHING_MESSAGE, PageController
from .job_manager import JobManager, JobType

if TYPE_CHECKING:
    from ..websocket.manager import WebSocketManager

logger = logging.getLogger(__name__)


class SessionNotFoundError(KeyError):
    """No controller exists for the session."""

    pass


class PageService:
    """Service for translation cycles.

    Wraps PageController without modifying it: sessions are created lazily
    with ``controller_factory`` and each submission runs on the job manager.
    At most ``max_sessions`` sessions are kept; creating one more evicts the
    least recently used, and sessions idle for ``idle_seconds`` are evicted
    whenever a new session is created.
    """

    def __init__(
        self,
        job_manager: JobManager,
        controller_factory: Callable[[], PageController],
        max_sessions: int = 1000,
        idle_seconds: float = 3600,
    ):
        """Initialize the page service.

        Args:
            job_manager: Job manager for background tasks.
            controller_factory: Builds a controller for a new session.
            max_sessions: Upper bound on sessions held in memory.
            idle_seconds: Sessions unused for longer than this are evicted.
        """
        if max_sessions <= 0:
            raise ValueError("max_sessions must be positive")
        self.job_manager = job_manager
        self.controller_factory = controller_factory
        self.max_sessions = max_sessions
        self.idle_seconds = idle_seconds
        # Least recently used first
        self._controllers: OrderedDict[str, PageController] = OrderedDict()
        self._last_used: dict[str, datetime] = {}
        self._lock = threading.Lock()
        self._ws_manager: "WebSocketManager | None" = None
        self._loop: asyncio.AbstractEventLoop | None = None

    def set_websocket_manager(self, ws_manager: "WebSocketManager") -> None:
        """Set the WebSocket manager for broadcasting page updates."""
        self._ws_manager = ws_manager

    def set_event_loop(self, loop: asyncio.AbstractEventLoop) -> None:
        """Set the event loop for async callbacks."""
        self._loop = loop

    def get_controller(self, session_id: str) -> PageController:
        """Get the session's controller, creating it on first use."""
        evicted: list[tuple[str, PageController]] = []
        with self._lock:
            controller = self._controllers.get(session_id)
            if controller is not None:
                self._touch(session_id)
                return controller
            evicted.extend(self._pop_idle(self.idle_seconds))
            while len(self._controllers) >= self.max_sessions:
                oldest, oldest_controller = self._controllers.popitem(last=False)
                del self._last_used[oldest]
                evicted.append((oldest, oldest_controller))
            controller = self.controller_factory()
            controller.subscribe(lambda state: self._broadcast_page(session_id, state))
            self._controllers[session_id] = controller
            self._touch(session_id)
        self._retire(evicted)
        return controller

    def evict_idle(self, max_idle_seconds: float | None = None) -> int:
        """Evict sessions unused for longer than ``max_idle_seconds``.

        Defaults to ``idle_seconds``. Active jobs of evicted sessions are
        cancelled.

        Returns:
            Number of sessions evicted.
        """
        if max_idle_seconds is None:
            max_idle_seconds = self.idle_seconds
        with self._lock:
            evicted = self._pop_idle(max_idle_seconds)
        self._retire(evicted)
        return len(evicted)

    def _touch(self, session_id: str) -> None:
        # Caller holds the lock.
        self._controllers.move_to_end(session_id)
        self._last_used[session_id] = datetime.now()

    def _pop_idle(self, max_idle_seconds: float) -> list[tuple[str, PageController]]:
        # Caller holds the lock.
        cutoff = datetime.now() - timedelta(seconds=max_idle_seconds)
        idle = [sid for sid, used in self._last_used.items() if used < cutoff]
        popped = []
        for sid in idle:
            del self._last_used[sid]
            popped.append((sid, self._controllers.pop(sid)))
        return popped

    def _retire(self, evicted: list[tuple[str, PageController]]) -> None:
        for session_id, controller in evicted:
            self.job_manager.cancel_session_jobs(session_id)
            # Bumps the request id so an in-flight cycle cannot apply its result.
            controller.reset()
            logger.info("Session %s evicted", session_id)

    def has_session(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._controllers

    def get_state(self, session_id: str) -> PageState:
        """Get the current page state of an existing session.

        Raises:
            SessionNotFoundError: If the session has never submitted anything.
        """
        with self._lock:
            controller = self._controllers.get(session_id)
            if controller is not None:
                self._touch(session_id)
        if controller is None:
            raise SessionNotFoundError(session_id)
        return controller.state

    def peek_state(self, session_id: str) -> PageState:
        """Get a session's state, or a fresh Idle state for unknown sessions."""
        try:
            return self.get_state(session_id)
        except SessionNotFoundError:
            return PageState()

    def submit(self, session_id: str, url: str, language: Language) -> tuple[str, int]:
        """Start a translation cycle for a session.

        Any still-active job of the session is cancelled. Its cycle can no
        longer change the page state because the new request id supersedes it.

        Args:
            session_id: Session submitting the URL.
            url: Page to translate.
            language: Target language.

        Returns:
            (job_id, request_id)

        Raises:
            ValueError: If the URL is empty.
        """
        if not (url or "").strip():
            raise ValueError("URL must not be empty")
        controller = self.get_controller(session_id)
        request_id = controller.begin(url, language)
        cancelled = self.job_manager.cancel_session_jobs(session_id)
        if cancelled:
            logger.info("Session %s: superseded %d running job(s)", session_id, cancelled)

        def task(job_manager: JobManager, job_id: str) -> dict[str, Any]:
            job_manager.update_progress(job_id, 0.1, FETCHING_MESSAGE)
            state = controller.execute(request_id, url, language)
            if not controller.is_current(request_id):
                return {"request_id": request_id, "discarded": True}
            if state.status == PageStatus.FAILED:
                raise RuntimeError(state.message)
            return {
                "request_id": request_id,
                "discarded": False,
                "status": state.status.value,
                "title": state.title,
                "truncated": state.truncated,
            }

        job_id = self.job_manager.submit_job(JobType.TRANSLATION, session_id, task)
        return job_id, request_id

    def reset(self, session_id: str) -> PageState:
        """Return a session to Idle and cancel its jobs.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        with self._lock:
            controller = self._controllers.get(session_id)
        if controller is None:
            raise SessionNotFoundError(session_id)
        self.job_manager.cancel_session_jobs(session_id)
        controller.reset()
        return controller.state

    def list_sessions(self) -> list[str]:
        with self._lock:
            return sorted(self._controllers)

    def _broadcast_page(self, session_id: str, state: PageState) -> None:
        if self._ws_manager and self._loop:
            try:
                asyncio.run_coroutine_threadsafe(
                    self._ws_manager.broadcast_page_update(session_id, state),
                    self._loop,
                )
            except RuntimeError:
                # Event loop already closed
                logger.debug("Dropped page update for session %s", session_id)
