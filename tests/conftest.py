"""
Shared pytest fixtures for the Skill Forge test suite.

Provides:
    - library: ContentLibrary over the bundled English corpus
    - temp_corpus: a small synthetic corpus written to a temp directory
    - store / state: a StateStore with persistence disabled and a fresh state
    - persistent_store: a StateStore writing to a temp state.json
    - session: a ProcessSession over the bundled corpus, no persistence
"""

import json
import os
import sys
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Ensure forge/ and forge_app/ are importable regardless of where pytest is invoked
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from forge.content import ContentLibrary  # noqa: E402
from forge.state_store import StateStore  # noqa: E402


# ---------------------------------------------------------------------------
# Synthetic corpus helpers
# ---------------------------------------------------------------------------

def make_manifest(sections=None):
    """Return a 9-phase manifest dict; every phase gets *sections*."""
    if sections is None:
        sections = [
            {"name": "alpha", "heading": "Alpha"},
            {"name": "beta", "heading": "Beta"},
        ]
    return {
        "phases": [
            {
                "id": i,
                "name": f"Test Phase {i}",
                "description": f"Synthetic phase {i}",
                "sections": list(sections),
            }
            for i in range(9)
        ]
    }


def make_document(phase_id):
    """Return a small phase document with an overview and two sections."""
    return "\n".join([
        f"# Phase {phase_id}",
        "",
        "Intro text mentions the needle once.",
        "",
        "### Alpha",
        "",
        "Alpha body with a Needle.",
        "#### Alpha detail",
        "still alpha",
        "",
        "### Beta",
        "beta body",
        "",
    ])


def write_corpus(root, locale="en", manifest=None, documents=None):
    """Write a manifest and phase documents under ``root/locale``.

    *documents* maps phase id to text and defaults to ``make_document``
    for all nine phases.  Pass a partial dict to build a sparse locale.
    """
    locale_dir = Path(root) / locale
    locale_dir.mkdir(parents=True, exist_ok=True)
    if manifest is not None:
        with open(locale_dir / "manifest.json", "w", encoding="utf-8") as fh:
            json.dump(manifest, fh, indent=2, ensure_ascii=False)
    documents = documents if documents is not None else {i: make_document(i) for i in range(9)}
    for phase_id, text in documents.items():
        with open(locale_dir / f"phase_{phase_id}.md", "w", encoding="utf-8") as fh:
            fh.write(text)
    return str(root)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def library():
    """ContentLibrary over the bundled English corpus."""
    return ContentLibrary(locale="en")


@pytest.fixture
def temp_corpus(tmp_path):
    """Root of a synthetic corpus with a complete English locale."""
    return write_corpus(tmp_path / "content", manifest=make_manifest())


@pytest.fixture
def temp_library(temp_corpus):
    return ContentLibrary(temp_corpus, locale="en")


@pytest.fixture
def store(tmp_path):
    """A StateStore with persistence disabled."""
    return StateStore(tmp_path / "state" / "state.json", persist=False)


@pytest.fixture
def state(store):
    return store.create_initial()


@pytest.fixture
def persistent_store(tmp_path):
    """A StateStore that writes to a temp state.json."""
    return StateStore(tmp_path / "state" / "state.json", persist=True)


@pytest.fixture
def session(tmp_path):
    """A ProcessSession over the bundled English corpus, no persistence."""
    from forge_app.config import Settings
    from forge_app.services.session import ProcessSession

    settings = Settings(
        locale="en",
        persist=False,
        state_path=os.path.join(str(tmp_path), "state.json"),
    )
    return ProcessSession(settings)
