# src/nova_client/core/session_manager.py
"""
Thread-local requests.Session management.

Each thread issuing calls through one HTTPClient gets its own Session,
so concurrent retry loops never share connection state.
"""
import threading
import weakref
from typing import Callable, Set

import requests


class ThreadSafeSessionManager:
    """
    Lazily creates one Session per thread and closes them all on shutdown.

    Example:
        >>> manager = ThreadSafeSessionManager(session_factory)
        >>> session = manager.get_session()
        >>> manager.close_all()
    """

    def __init__(self, session_factory: Callable[[], requests.Session]):
        self._session_factory = session_factory
        self._local = threading.local()
        self._all_sessions: Set[weakref.ref] = set()
        self._sessions_lock = threading.RLock()

    def get_session(self) -> requests.Session:
        """Return the current thread's session, creating it on first use."""
        session = getattr(self._local, 'session', None)
        if session is None:
            session = self._session_factory()
            self._local.session = session
            with self._sessions_lock:
                self._all_sessions.add(weakref.ref(session, self._forget))
        return session

    def _forget(self, ref: weakref.ref) -> None:
        with self._sessions_lock:
            self._all_sessions.discard(ref)

    def close_all(self) -> None:
        """Close sessions of all threads. Safe to call multiple times."""
        self._local.session = None

        with self._sessions_lock:
            refs = list(self._all_sessions)
            self._all_sessions.clear()

        for ref in refs:
            session = ref()
            if session is not None:
                session.close()

    def get_active_sessions_count(self) -> int:
        """Number of sessions still alive across all threads."""
        with self._sessions_lock:
            return sum(1 for ref in self._all_sessions if ref() is not None)
