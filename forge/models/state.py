"""
forge/models/state.py -- Session state models.

The persisted document uses camelCase keys::

    {
      "progress": {"0": {"status": "...", "note": "...", "updatedAt": "..."}},
      "accessLog": {"entries": [{"timestamp": "...", "uri": "...",
                                 "phaseId": 0, "section": "..."}]}
    }

Models accept both the camelCase aliases and the snake_case field names.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ACCESS_LOG_MAX = 1000


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PhaseStatus(str, Enum):
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProgressEntry(_CamelModel):
    status: PhaseStatus = PhaseStatus.NOT_STARTED
    note: str = ""
    updated_at: datetime = Field(default_factory=utc_now)


class AccessLogEntry(_CamelModel):
    timestamp: datetime = Field(default_factory=utc_now)
    uri: str
    phase_id: int
    section: Optional[str] = None


class AccessLog(_CamelModel):
    entries: list[AccessLogEntry] = Field(default_factory=list)

    def trim(self, limit: int = ACCESS_LOG_MAX) -> None:
        """Drop the oldest entries so that at most *limit* remain."""
        if len(self.entries) > limit:
            del self.entries[: len(self.entries) - limit]

    def count_for(self, phase_id: int) -> int:
        return sum(1 for e in self.entries if e.phase_id == phase_id)


class SessionState(_CamelModel):
    """Progress for every phase plus the bounded access log."""

    progress: dict[int, ProgressEntry]
    access_log: AccessLog = Field(default_factory=AccessLog)

    def to_document(self) -> dict:
        """Serialise to the persisted JSON document shape."""
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        progress = sorted(data["progress"].items(), key=lambda kv: int(kv[0]))
        data["progress"] = {str(k): v for k, v in progress}
        return data
