"""
forge/state_store.py -- Session progress and access-log persistence.

The store never holds the session state itself: a ``SessionState`` is
created (or loaded) once per process and handed to every operation by the
session that owns it.  The store provides the operations on that object
and the write-through persistence to ``state.json``.

Persistence is opt-in.  With it disabled ``save`` does nothing and ``load``
always returns a fresh state.  With it enabled:

    - ``save`` trims the access log to its cap and atomically rewrites the
      whole document (temp file + ``os.replace``).
    - ``load`` merges saved progress into the defaults (phases missing from
      the file keep their default entry, unknown ids are dropped) and keeps
      only the most recent 1000 access-log entries.  An unreadable or
      malformed file is discarded and a fresh state is returned.

Usage::

    from forge.state_store import StateStore

    store = StateStore(state_path, persist=True)
    state = store.load()
    store.set_progress(state, 1, "in-progress", "drafting scope")
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from forge.errors import PersistenceReadError
from forge.models.manifest import PHASE_COUNT
from forge.models.state import (
    ACCESS_LOG_MAX,
    AccessLog,
    AccessLogEntry,
    PhaseStatus,
    ProgressEntry,
    SessionState,
    utc_now,
)
from forge.utils import read_json, safe_write_json

logger = logging.getLogger(__name__)


class _PersistedState(BaseModel):
    """Shape check for a saved document before it is merged."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    progress: dict[str, ProgressEntry] = Field(default_factory=dict)
    access_log: AccessLog = Field(default_factory=AccessLog)


class StateStore:
    """Operations on a ``SessionState`` plus its optional persistence.

    Parameters
    ----------
    state_path : str or pathlib.Path
        Location of the persisted document.
    persist : bool
        When False, ``save`` is a no-op and ``load`` ignores the file.
    log_limit : int
        Maximum number of access-log entries kept.
    """

    def __init__(self, state_path, persist: bool = False, log_limit: int = ACCESS_LOG_MAX):
        self.state_path = Path(state_path)
        self.persist = persist
        self.log_limit = log_limit
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Creation and loading
    # ------------------------------------------------------------------

    @staticmethod
    def create_initial() -> SessionState:
        """Return a state with every phase ``not-started`` and an empty log."""
        now = utc_now()
        return SessionState(
            progress={i: ProgressEntry(updated_at=now) for i in range(PHASE_COUNT)},
            access_log=AccessLog(),
        )

    def load(self) -> SessionState:
        """Return the persisted state merged into the defaults.

        Never raises for a missing, unreadable or malformed file; those
        cases yield a fresh initial state.
        """
        state = self.create_initial()
        if not self.persist or not self.state_path.exists():
            return state

        try:
            saved = self._read_saved()
        except PersistenceReadError as exc:
            logger.warning("Discarding persisted state at %s: %s", self.state_path, exc)
            return state

        for phase_id in range(PHASE_COUNT):
            entry = saved.progress.get(str(phase_id))
            if entry is not None:
                state.progress[phase_id] = entry

        state.access_log.entries = list(saved.access_log.entries)
        state.access_log.trim(self.log_limit)
        logger.debug(
            "Loaded state from %s (%d access-log entries)",
            self.state_path, len(state.access_log.entries),
        )
        return state

    def _read_saved(self) -> _PersistedState:
        try:
            raw = read_json(self.state_path)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise PersistenceReadError(f"cannot read state file: {exc}") from exc
        if not isinstance(raw, dict):
            raise PersistenceReadError("state document is not a JSON object")
        try:
            return _PersistedState.model_validate(raw)
        except ValidationError as exc:
            raise PersistenceReadError(
                f"state document has an unexpected shape ({exc.error_count()} errors)"
            ) from exc

    # ------------------------------------------------------------------
    # Mutations (write-through)
    # ------------------------------------------------------------------

    def record_access(self, state: SessionState, entry: AccessLogEntry) -> AccessLogEntry:
        """Append *entry* to the access log, evicting the oldest beyond the cap."""
        with self._lock:
            state.access_log.entries.append(entry)
            state.access_log.trim(self.log_limit)
            self.save(state)
        return entry

    def set_progress(
        self,
        state: SessionState,
        phase_id: int,
        status: PhaseStatus | str,
        note: str | None = "",
    ) -> ProgressEntry:
        """Overwrite the progress entry of *phase_id* and stamp it with now.

        The phase id is expected to be validated by the caller.
        """
        entry = ProgressEntry(status=PhaseStatus(status), note=note or "", updated_at=utc_now())
        with self._lock:
            state.progress[phase_id] = entry
            self.save(state)
        return entry

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, state: SessionState) -> None:
        """Write the full state to disk if persistence is enabled."""
        if not self.persist:
            return
        with self._lock:
            state.access_log.trim(self.log_limit)
            safe_write_json(self.state_path, state.to_document())
        logger.debug("Saved state to %s", self.state_path)
