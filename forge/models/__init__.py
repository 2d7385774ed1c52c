"""
forge/models/ -- Pydantic v2 models for the process library.

Submodules:
    manifest    Manifest, PhaseDescriptor and SectionDescriptor.
    state       ProgressEntry, AccessLogEntry, AccessLog and SessionState.
"""

from forge.models.manifest import (
    OVERVIEW_SECTION,
    PHASE_COUNT,
    Manifest,
    PhaseDescriptor,
    SectionDescriptor,
)
from forge.models.state import (
    ACCESS_LOG_MAX,
    AccessLog,
    AccessLogEntry,
    PhaseStatus,
    ProgressEntry,
    SessionState,
)

__all__ = [
    "ACCESS_LOG_MAX",
    "OVERVIEW_SECTION",
    "PHASE_COUNT",
    "AccessLog",
    "AccessLogEntry",
    "Manifest",
    "PhaseDescriptor",
    "PhaseStatus",
    "ProgressEntry",
    "SectionDescriptor",
    "SessionState",
]
