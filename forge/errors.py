"""
forge/errors.py -- Error types raised by the process library.

Every error carries its own structured payload.  The numeric ``code`` is
only consulted at the boundary (tool dispatch, resource reads, CLI) where
errors are rendered for a caller:

    NOT_FOUND       -32002  unknown phase id, section or resource
    INVALID_PARAMS  -32602  tool arguments that fail their schema
    INTERNAL_ERROR  -32603  manifest/corpus mismatch, unexpected failures
"""

from __future__ import annotations

from typing import Any

NOT_FOUND = -32002
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class ForgeError(Exception):
    """Base class for all process library errors."""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str, data: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.data = data or {}

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data:
            payload["data"] = self.data
        return payload


class InvalidPhaseId(ForgeError):
    """Phase id outside 0-8 or not an integer."""

    code = NOT_FOUND

    def __init__(self, phase_id: Any, *, batch: bool = False):
        where = " in batch request" if batch else ""
        super().__init__(f"Phase {phase_id} does not exist{where}. Valid range: 0-8")
        self.phase_id = phase_id


class SectionNotFound(ForgeError):
    """Unknown section name for an otherwise valid phase."""

    code = NOT_FOUND

    def __init__(
        self,
        phase_id: int,
        section_name: str,
        available_sections: list[str],
        suggestion: str | None = None,
    ):
        data: dict[str, Any] = {"availableSections": list(available_sections)}
        if suggestion:
            data["suggestion"] = f"Did you mean '{suggestion}'?"
        super().__init__(
            f"Section '{section_name}' not found in Phase {phase_id}. "
            f"Available: {', '.join(available_sections)}",
            data,
        )
        self.phase_id = phase_id
        self.section_name = section_name
        self.available_sections = list(available_sections)
        self.suggestion = suggestion


class HeadingIntegrityError(ForgeError):
    """The manifest declares a heading that its phase document lacks."""

    code = INTERNAL_ERROR

    def __init__(self, phase_id: int, marker: str):
        super().__init__(f"Section heading not found in phase file: {marker}")
        self.phase_id = phase_id
        self.marker = marker


class PersistenceReadError(ForgeError):
    """Persisted state could not be read or did not have the expected shape.

    Raised and absorbed inside ``StateStore.load``; callers never see it.
    """

    code = INTERNAL_ERROR


class InvalidToolArguments(ForgeError):
    code = INVALID_PARAMS


class UnknownResource(ForgeError):
    code = NOT_FOUND

    def __init__(self, uri: str):
        super().__init__(f"Resource {uri} not found")
        self.uri = uri
