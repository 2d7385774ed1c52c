"""
forge_app/config.py -- Runtime settings resolved once at startup.

Environment variables:

    SKILL_FORGE_LANG         locale tag ("en", "ja"); anything else -> "en"
    SKILL_FORGE_PERSIST      "true" (any case) enables persistence
    SKILL_FORGE_STATE_DIR    directory for state.json (default: user data dir)
    SKILL_FORGE_CONTENT_DIR  corpus root (default: bundled corpus)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping

from forge.content import resolve_locale
from forge_app.paths import get_state_path

ENV_LANG = "SKILL_FORGE_LANG"
ENV_PERSIST = "SKILL_FORGE_PERSIST"
ENV_STATE_DIR = "SKILL_FORGE_STATE_DIR"
ENV_CONTENT_DIR = "SKILL_FORGE_CONTENT_DIR"


def is_persist_enabled(value: str | None) -> bool:
    """Only the string "true", in any letter case, enables persistence."""
    return (value or "").lower() == "true"


@dataclass(frozen=True)
class Settings:
    locale: str = "en"
    persist: bool = False
    state_path: str = ""
    content_root: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        return cls(
            locale=resolve_locale(env.get(ENV_LANG)),
            persist=is_persist_enabled(env.get(ENV_PERSIST)),
            state_path=get_state_path(env.get(ENV_STATE_DIR) or None),
            content_root=env.get(ENV_CONTENT_DIR) or None,
        )

    def override(self, *, locale=None, persist=None, state_dir=None) -> Settings:
        """Return a copy with CLI overrides applied (None keeps the value)."""
        changes = {}
        if locale is not None:
            changes["locale"] = resolve_locale(locale)
        if persist is not None:
            changes["persist"] = persist
        if state_dir is not None:
            changes["state_path"] = get_state_path(state_dir)
        return replace(self, **changes)
