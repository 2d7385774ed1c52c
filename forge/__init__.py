"""
Skill Forge process library.

Retrieval, search and progress tracking over a fixed corpus of nine
instructional phase documents:

    content         Manifest and corpus access per locale (ContentLibrary).
    sections        Section extraction by level-3 heading.
    suggestions     Levenshtein "did you mean" matching.
    search          Line-oriented keyword search with section attribution.
    state_store     Progress and bounded access log, atomic persistence.
    status          Tabular progress summary.
"""

__version__ = "1.0.0"
