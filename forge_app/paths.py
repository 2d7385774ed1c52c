"""
forge_app/paths.py -- Path resolution for state files.

Uses platformdirs for the per-user data directory that holds state.json.
"""

from __future__ import annotations

import os

from platformdirs import user_data_dir

_APP_NAME = "SkillForge"
_APP_AUTHOR = "SkillForge"

STATE_FILENAME = "state.json"


def get_user_data_dir() -> str:
    """Return the platform-appropriate user data directory (not created)."""
    return user_data_dir(_APP_NAME, _APP_AUTHOR)


def get_state_path(state_dir: str | None = None) -> str:
    """Return the path of state.json inside *state_dir* or the user data dir."""
    return os.path.join(state_dir or get_user_data_dir(), STATE_FILENAME)
