"""
forge/sections.py -- Section extraction from phase documents.

A phase document is split by level-3 heading lines (``### <heading>``).
Everything before the first such line is the implicit ``overview``
section; every other section starts at the line ``### <heading>`` declared
for it in the manifest and runs up to the next level-3 heading line or the
end of the document.

Usage::

    from forge.sections import extract_section

    text = extract_section(document, "frontmatter", manifest.phase(0))
"""

from __future__ import annotations

import re

from forge.errors import HeadingIntegrityError, SectionNotFound
from forge.models.manifest import OVERVIEW_SECTION, PhaseDescriptor
from forge.suggestions import find_suggestion

HEADING_PREFIX = "### "

_HEADING_LINE_RE = re.compile(r"^### ", re.MULTILINE)


def heading_of(line: str) -> str | None:
    """Return the heading text if *line* is a level-3 heading line."""
    if line.startswith(HEADING_PREFIX):
        return line[len(HEADING_PREFIX):].strip()
    return None


def extract_overview(document: str) -> str:
    """Return the text before the first level-3 heading line, trimmed."""
    match = _HEADING_LINE_RE.search(document)
    if match is None:
        return document.strip()
    return document[: match.start()].strip()


def _find_marker(document: str, heading: str) -> re.Match | None:
    pattern = re.compile(r"^" + re.escape(HEADING_PREFIX + heading), re.MULTILINE)
    return pattern.search(document)


def extract_section(document: str, section_name: str, phase: PhaseDescriptor) -> str:
    """Return the text of *section_name* within *document*.

    Parameters
    ----------
    document : str
        Full text of the phase document.
    section_name : str
        ``"overview"`` or one of the section names declared for *phase*.
    phase : PhaseDescriptor
        Manifest entry of the phase the document belongs to.

    Raises
    ------
    SectionNotFound
        *section_name* is not declared for the phase.  The error lists the
        declared names and, when one is close enough, a suggestion.
    HeadingIntegrityError
        The declared heading does not occur in the document.
    """
    if section_name == OVERVIEW_SECTION:
        return extract_overview(document)

    section = phase.find_section(section_name)
    if section is None:
        available = phase.section_names
        raise SectionNotFound(
            phase.id,
            section_name,
            available,
            find_suggestion(section_name, available),
        )

    start = _find_marker(document, section.heading)
    if start is None:
        raise HeadingIntegrityError(phase.id, section.marker)

    following = _HEADING_LINE_RE.search(document, start.end())
    end = following.start() if following else len(document)
    return document[start.start(): end].strip()


def missing_markers(document: str, phase: PhaseDescriptor) -> list[str]:
    """Return every declared heading marker absent from *document*."""
    return [s.marker for s in phase.sections if _find_marker(document, s.heading) is None]
