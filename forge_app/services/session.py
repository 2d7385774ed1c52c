"""
forge_app/services/session.py -- Process session lifecycle.

A ``ProcessSession`` is created once per process.  It owns every piece of
mutable state and hands it explicitly to the library:

    - the ``ContentLibrary`` for the locale resolved at startup
    - the ``StateStore`` (persistence toggle and state.json location)
    - the single ``SessionState`` loaded (and merged) at startup

Handles:
    - State loading on start
    - Access logging for retrieval operations
    - Flush on graceful shutdown (idempotent), including SIGINT/SIGTERM
"""

from __future__ import annotations

import logging
import signal
import sys

from forge.content import ContentLibrary
from forge.models.state import AccessLogEntry, ProgressEntry, utc_now
from forge.state_store import StateStore
from forge_app.config import Settings

logger = logging.getLogger(__name__)


class ProcessSession:
    """Owns the library, the store and the session state for one process."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings.from_env()
        self.library = ContentLibrary(self.settings.content_root, self.settings.locale)
        self.store = StateStore(self.settings.state_path, persist=self.settings.persist)
        self.state = self.store.load()
        self._closed = False
        logger.debug(
            "Session started (locale=%s, persist=%s)",
            self.library.locale, self.store.persist,
        )

    @property
    def manifest(self):
        return self.library.manifest

    # ------------------------------------------------------------------
    # State operations
    # ------------------------------------------------------------------

    def record_access(self, uri: str, phase_id: int, section: str | None = None) -> AccessLogEntry:
        entry = AccessLogEntry(timestamp=utc_now(), uri=uri, phase_id=phase_id, section=section)
        return self.store.record_access(self.state, entry)

    def mark_progress(self, phase_id: int, status: str, note: str | None = None) -> ProgressEntry:
        return self.store.set_progress(self.state, phase_id, status, note)

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def shutdown(self) -> None:
        """Flush the state once; later calls do nothing."""
        if self._closed:
            return
        self._closed = True
        try:
            self.store.save(self.state)
        except OSError:
            logger.exception("Failed to save state on shutdown")

    def install_signal_handlers(self) -> None:
        """Flush and exit on SIGINT/SIGTERM."""
        def _handle_exit(signum, frame):
            logger.info("Received signal %s, shutting down", signum)
            self.shutdown()
            sys.exit(0)

        signal.signal(signal.SIGINT, _handle_exit)
        signal.signal(signal.SIGTERM, _handle_exit)
