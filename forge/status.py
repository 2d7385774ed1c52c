"""
forge/status.py -- Progress summary across all phases.
"""

from __future__ import annotations

from forge.models.manifest import Manifest
from forge.models.state import SessionState


def phase_status_rows(state: SessionState, manifest: Manifest) -> list[dict]:
    """Return one ``{phaseId, name, status, reads}`` dict per phase."""
    rows = []
    for phase in manifest.phases:
        entry = state.progress[phase.id]
        rows.append({
            "phaseId": phase.id,
            "name": phase.name,
            "status": entry.status.value,
            "reads": state.access_log.count_for(phase.id),
        })
    return rows


def format_status_table(state: SessionState, manifest: Manifest) -> str:
    """Render the status rows as a markdown table."""
    lines = [
        "| Phase | Name | Status | Reads |",
        "|-------|------|--------|-------|",
    ]
    for row in phase_status_rows(state, manifest):
        lines.append(f"| {row['phaseId']} | {row['name']} | {row['status']} | {row['reads']} |")
    return "\n".join(lines)
