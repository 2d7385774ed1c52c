"""
forge_app/services/resources.py -- Addressable read access to the corpus.

Addressing scheme:

    process://manifest                          manifest JSON
    process://phase/{id}                        full phase document
    process://phase/{id}/section/{name}         one section of a phase
    process://phases/{id,id,...}                several full documents

Every phase or section read is recorded in the session's access log; the
manifest is not.  Errors are raised as ``ForgeError`` subclasses for the
caller to render.
"""

from __future__ import annotations

import json
import logging
import re
from urllib.parse import unquote

from forge.content import parse_phase_ids, validate_phase_id
from forge.errors import UnknownResource

logger = logging.getLogger(__name__)

SCHEME = "process://"
MANIFEST_URI = "process://manifest"

_PHASE_RE = re.compile(r"^process://phase/([^/]+)$")
_SECTION_RE = re.compile(r"^process://phase/([^/]+)/section/(.+)$")
_BATCH_RE = re.compile(r"^process://phases/(.+)$")


def phase_uri(phase_id: int) -> str:
    return f"{SCHEME}phase/{phase_id}"


def section_uri(phase_id: int, section_name: str) -> str:
    return f"{SCHEME}phase/{phase_id}/section/{section_name}"


def _content(uri: str, text: str, mime_type: str = "text/markdown") -> dict:
    return {"uri": uri, "mimeType": mime_type, "text": text}


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

RESOURCE_TEMPLATES: list[dict] = [
    {
        "name": "section-by-name",
        "uriTemplate": "process://phase/{phaseId}/section/{sectionName}",
        "title": "Get Section",
        "description": (
            "Retrieve a specific section within a phase. phaseId: 0-8, "
            "sectionName: manifest phases[N].sections[].name"
        ),
        "mimeType": "text/markdown",
    },
    {
        "name": "phases-batch",
        "uriTemplate": "process://phases/{phaseIds}",
        "title": "Batch Phase Retrieval",
        "description": (
            "Retrieve multiple phases at once using comma-separated phase IDs. "
            "Example: process://phases/1,2,3"
        ),
        "mimeType": "text/markdown",
    },
]


def list_resources(session) -> list[dict]:
    """Return the static resources: the manifest and one entry per phase."""
    resources = [{
        "name": "manifest",
        "uri": MANIFEST_URI,
        "title": "Skill Creation Process -- Full Index",
        "description": (
            "List of all 9 phases. Overview, dependencies, and section structure "
            "for each phase. Read this first to understand the overall picture."
        ),
        "mimeType": "application/json",
    }]
    for phase in session.manifest.phases:
        resources.append({
            "name": f"phase-{phase.id}",
            "uri": phase_uri(phase.id),
            "title": f"Phase {phase.id}: {phase.name}",
            "description": phase.description,
            "mimeType": "text/markdown",
        })
    return resources


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------

def read_resource(session, uri: str) -> list[dict]:
    """Resolve *uri* and return its contents as a list of content dicts.

    Raises
    ------
    InvalidPhaseId, SectionNotFound, HeadingIntegrityError, UnknownResource
    """
    if uri == MANIFEST_URI:
        text = json.dumps(session.library.manifest_document(), ensure_ascii=False)
        return [_content(uri, text, "application/json")]

    match = _SECTION_RE.match(uri)
    if match:
        phase_id = validate_phase_id(unquote(match.group(1)))
        section_name = unquote(match.group(2))
        text = session.library.extract_section(phase_id, section_name)
        session.record_access(uri, phase_id, section_name)
        return [_content(uri, text)]

    match = _PHASE_RE.match(uri)
    if match:
        phase_id = validate_phase_id(unquote(match.group(1)))
        text = session.library.load_phase_content(phase_id)
        session.record_access(uri, phase_id)
        return [_content(uri, text)]

    match = _BATCH_RE.match(uri)
    if match:
        ids = parse_phase_ids(unquote(match.group(1)))
        contents = [_content(phase_uri(i), session.library.load_phase_content(i)) for i in ids]
        for phase_id in ids:
            session.record_access(phase_uri(phase_id), phase_id)
        return contents

    raise UnknownResource(uri)
