"""
forge/search.py -- Keyword search across all phase documents.

A line-oriented scan, not an index: every phase document is read in phase
order and each line is checked for a case-insensitive substring match.
Each hit is attributed to the section in effect at that line.  A heading
line belongs to the section it introduces.

Usage::

    from forge.search import search_all_phases, format_search_results

    hits = search_all_phases(library, "frontmatter", max_results=5)
    print(format_search_results("frontmatter", hits))
"""

from __future__ import annotations

from dataclasses import dataclass

from forge.models.manifest import OVERVIEW_SECTION
from forge.sections import heading_of


@dataclass(frozen=True)
class SearchHit:
    phase_id: int
    section_name: str
    line_number: int
    line_text: str

    def to_dict(self) -> dict:
        return {
            "phaseId": self.phase_id,
            "sectionName": self.section_name,
            "lineNumber": self.line_number,
            "lineText": self.line_text,
        }


def search_all_phases(library, query: str, max_results: int) -> list[SearchHit]:
    """Return up to *max_results* lines containing *query*.

    Parameters
    ----------
    library : ContentLibrary
        Corpus and manifest of the active locale.
    query : str
        Case-insensitive substring to look for.  A blank query returns an
        empty list without reading any document.
    max_results : int
        Global cap across all phases.
    """
    if not query.strip() or max_results <= 0:
        return []

    needle = query.lower()
    hits: list[SearchHit] = []

    for phase, document in library.iter_documents():
        current_section = OVERVIEW_SECTION
        for index, line in enumerate(document.split("\n")):
            heading = heading_of(line)
            if heading is not None:
                section = phase.section_for_heading(heading)
                if section is not None:
                    current_section = section.name

            if needle in line.lower():
                hits.append(SearchHit(
                    phase_id=phase.id,
                    section_name=current_section,
                    line_number=index + 1,
                    line_text=line.strip(),
                ))
                if len(hits) >= max_results:
                    return hits

    return hits


def format_search_results(query: str, hits: list[SearchHit]) -> str:
    """Render hits as the numbered plain-text listing shown to callers."""
    if not hits:
        return f"No matches found for '{query}'."
    blocks = [
        f"{i}. [Phase {h.phase_id} > {h.section_name}] line {h.line_number}\n"
        f"   \"{h.line_text}\""
        for i, h in enumerate(hits, start=1)
    ]
    return f"Found {len(hits)} matches for '{query}':\n\n" + "\n\n".join(blocks)
