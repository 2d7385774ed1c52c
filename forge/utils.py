"""
forge/utils.py -- Shared file helpers for the Skill Forge process library.

All JSON writes use atomic temp-file-then-os.replace() so that a crash in
the middle of a save never leaves a truncated state file behind.
"""

import json
import logging
import os
import tempfile

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# JSON I/O (atomic writes)
# ---------------------------------------------------------------------------

def read_json(path):
    """Read and parse a JSON file, letting every failure propagate.

    Parameters
    ----------
    path : str or pathlib.Path
        Absolute path to the JSON file.

    Raises
    ------
    FileNotFoundError, OSError, json.JSONDecodeError, UnicodeDecodeError
    """
    with open(path, "r", encoding="utf-8") as fh:
        return json.load(fh)


def safe_write_json(path, data, *, indent=2):
    """Atomically write *data* as JSON to *path*.

    Uses a temporary file in the same directory followed by
    ``os.replace()`` so that readers never see a partially-written file.
    Parent directories are created if they do not exist.

    Parameters
    ----------
    path : str or pathlib.Path
        Absolute path to the target JSON file.
    data
        JSON-serialisable object to write.
    indent : int, optional
        JSON indentation level (default 2).
    """
    path = str(path)
    parent = os.path.dirname(path)
    os.makedirs(parent, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=indent, ensure_ascii=False)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any failure.
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def read_text(path):
    """Return the contents of a UTF-8 text file."""
    with open(path, "r", encoding="utf-8") as fh:
        return fh.read()
