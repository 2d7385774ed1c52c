"""
forge/content.py -- Manifest and corpus access for one locale.

The corpus lives in one directory per locale::

    <content_root>/
        en/manifest.json
        en/phase_0.md ... en/phase_8.md
        ja/manifest.json
        ja/phase_0.md ...

A locale that lacks a phase document falls back to the default locale's
document for that phase.  The locale is resolved once, when the library is
constructed, and never re-read from the environment afterwards.

Usage::

    from forge.content import ContentLibrary

    library = ContentLibrary(locale="en")
    text = library.load_phase_content(0)
    section = library.extract_section(0, "frontmatter")
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Iterator

from forge.errors import InvalidPhaseId
from forge.models.manifest import PHASE_COUNT, Manifest, PhaseDescriptor
from forge.sections import extract_section, missing_markers
from forge.utils import read_json, read_text

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"
SUPPORTED_LOCALES = ("en", "ja")

BUNDLED_CONTENT_ROOT = Path(__file__).resolve().parent / "corpus"

_DECIMAL_RE = re.compile(r"-?[0-9]+")


def resolve_locale(tag: str | None) -> str:
    """Map a locale tag to a supported locale, defaulting to ``en``."""
    value = (tag or DEFAULT_LOCALE).strip().lower()
    return value if value in SUPPORTED_LOCALES else DEFAULT_LOCALE


def validate_phase_id(value: Any, *, batch: bool = False) -> int:
    """Return *value* as a phase id in 0-8, or raise ``InvalidPhaseId``.

    Integers and decimal strings (``"3"``, ``" 3 "``) are accepted.  Bools,
    floats with a fractional part and anything else are rejected.
    """
    if isinstance(value, bool):
        raise InvalidPhaseId(value, batch=batch)
    if isinstance(value, int):
        phase_id = value
    elif isinstance(value, float) and value.is_integer():
        phase_id = int(value)
    elif isinstance(value, str) and _DECIMAL_RE.fullmatch(value.strip()):
        phase_id = int(value.strip())
    else:
        raise InvalidPhaseId(value, batch=batch)
    if not 0 <= phase_id < PHASE_COUNT:
        raise InvalidPhaseId(value, batch=batch)
    return phase_id


def parse_phase_ids(value: str) -> list[int]:
    """Parse a comma-separated id list such as ``"1,2,3"``.

    Every id is validated before any is returned, so a single bad id fails
    the whole batch.
    """
    return [validate_phase_id(part, batch=True) for part in value.split(",")]


class ContentLibrary:
    """Read-only access to the manifest and phase documents of one locale.

    Parameters
    ----------
    content_root : str or pathlib.Path, optional
        Directory holding one sub-directory per locale.  Defaults to the
        corpus bundled with the package.
    locale : str
        Locale tag; unsupported values resolve to the default locale.
    """

    def __init__(self, content_root=None, locale: str = DEFAULT_LOCALE):
        self.root = Path(content_root) if content_root else BUNDLED_CONTENT_ROOT
        self.locale = resolve_locale(locale)
        self._manifest: Manifest | None = None

    # ------------------------------------------------------------------
    # Manifest
    # ------------------------------------------------------------------

    def _locale_dir(self, locale: str) -> Path:
        return self.root / locale

    @property
    def manifest(self) -> Manifest:
        """The locale's manifest, parsed and validated on first access."""
        if self._manifest is None:
            path = self._locale_dir(self.locale) / "manifest.json"
            if not path.exists():
                path = self._locale_dir(DEFAULT_LOCALE) / "manifest.json"
            logger.debug("Loading manifest %s", path)
            self._manifest = Manifest.model_validate(read_json(path))
        return self._manifest

    def manifest_document(self) -> dict:
        """The manifest as a plain JSON-compatible dict."""
        return self.manifest.model_dump(mode="json")

    def phase(self, phase_id: Any) -> PhaseDescriptor:
        return self.manifest.phase(validate_phase_id(phase_id))

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def phase_path(self, phase_id: Any) -> Path:
        """Return the document path for *phase_id*, after locale fallback."""
        phase_id = validate_phase_id(phase_id)
        filename = f"phase_{phase_id}.md"
        path = self._locale_dir(self.locale) / filename
        if not path.exists():
            logger.debug("No %s document for phase %d, using %s", self.locale, phase_id, DEFAULT_LOCALE)
            path = self._locale_dir(DEFAULT_LOCALE) / filename
        return path

    def load_phase_content(self, phase_id: Any) -> str:
        """Return the full document of a phase."""
        return read_text(self.phase_path(phase_id))

    def extract_section(self, phase_id: Any, section_name: str) -> str:
        phase = self.phase(phase_id)
        return extract_section(self.load_phase_content(phase.id), section_name, phase)

    def iter_documents(self) -> Iterator[tuple[PhaseDescriptor, str]]:
        """Yield ``(phase, document)`` pairs in ascending phase id order."""
        for phase in self.manifest.phases:
            yield phase, self.load_phase_content(phase.id)

    # ------------------------------------------------------------------
    # Authoring checks
    # ------------------------------------------------------------------

    def check_integrity(self) -> dict[int, list[str]]:
        """Return ``{phase_id: [missing markers]}`` for every broken phase.

        An empty dict means every manifest heading occurs in its document.
        """
        problems: dict[int, list[str]] = {}
        for phase, document in self.iter_documents():
            missing = missing_markers(document, phase)
            if missing:
                problems[phase.id] = missing
        return problems
