"""
forge_app/services/tools.py -- Tool definitions for agent integration.

Defines the tools an agent can call, each wrapping library functionality.
Tool arguments are validated against each tool's JSON Schema before the
executor runs.

Tools:
    search_process   - Keyword search across every phase
    mark_progress    - Record the status of a phase
    get_status       - Progress and read counts for all phases
"""

from __future__ import annotations

import logging
from typing import Any

import jsonschema

from forge.errors import ForgeError, InvalidToolArguments
from forge.models.state import PhaseStatus
from forge.search import format_search_results, search_all_phases
from forge.status import format_status_table, phase_status_rows

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 5


# --------------------------------------------------------------------------
# Tool definitions
# --------------------------------------------------------------------------

TOOL_DEFINITIONS: list[dict] = [
    {
        "name": "search_process",
        "title": "Search Process",
        "description": (
            "Search all phases of the skill creation process by keyword. "
            "Case-insensitive partial match. Returns matching phase IDs, "
            "section names, and matched lines."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Search keyword (case-insensitive partial match)",
                },
                "maxResults": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": 50,
                    "default": DEFAULT_MAX_RESULTS,
                    "description": "Maximum number of results to return",
                },
            },
            "required": ["query"],
        },
        "annotations": {"readOnlyHint": True, "idempotentHint": True},
    },
    {
        "name": "mark_progress",
        "title": "Mark Progress",
        "description": (
            "Record progress status for a phase. "
            "status: 'not-started' | 'in-progress' | 'completed'."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "phaseId": {
                    "type": "integer",
                    "minimum": 0,
                    "maximum": 8,
                    "description": "Phase ID (0-8)",
                },
                "status": {
                    "type": "string",
                    "enum": [s.value for s in PhaseStatus],
                    "description": "Phase status",
                },
                "note": {
                    "type": "string",
                    "description": "Optional note (e.g., '2 gaps from Phase 3 to address in Phase 4')",
                },
            },
            "required": ["phaseId", "status"],
        },
        "annotations": {"readOnlyHint": False, "idempotentHint": True},
    },
    {
        "name": "get_status",
        "title": "Get Status",
        "description": (
            "Return a summary of all phase progress "
            "(not-started/in-progress/completed) and access counts."
        ),
        "input_schema": {"type": "object", "properties": {}},
        "annotations": {"readOnlyHint": True, "idempotentHint": True},
    },
]

_DEFINITIONS_BY_NAME = {d["name"]: d for d in TOOL_DEFINITIONS}


# --------------------------------------------------------------------------
# Argument validation
# --------------------------------------------------------------------------

def _humanize_error(error: jsonschema.ValidationError) -> str:
    path = ".".join(str(p) for p in error.absolute_path) or "(root)"
    if error.validator == "required":
        return f"Missing required argument: {error.message}"
    return f"Invalid value for '{path}': {error.message}"


def validate_arguments(tool_name: str, arguments: dict) -> None:
    """Raise ``InvalidToolArguments`` if *arguments* violate the tool schema."""
    schema = _DEFINITIONS_BY_NAME[tool_name]["input_schema"]
    validator = jsonschema.Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(arguments), key=lambda e: list(e.absolute_path))
    if errors:
        raise InvalidToolArguments(
            f"Invalid arguments for tool {tool_name}",
            {"errors": [_humanize_error(e) for e in errors]},
        )


# --------------------------------------------------------------------------
# Tool executors
# --------------------------------------------------------------------------

def execute_tool(tool_name: str, tool_input: dict | None, session: Any) -> dict:
    """Execute a tool call and return its result.

    The result always has a ``content`` text and either a ``structured``
    payload or, on failure, ``isError`` with an ``error`` dict carrying the
    boundary code.

    Parameters
    ----------
    tool_name : str
        The tool to execute.
    tool_input : dict
        The tool arguments.
    session : ProcessSession
        The process session that owns library and state.
    """
    executor = _EXECUTORS.get(tool_name)
    if executor is None:
        return _error_result(ForgeError(f"Unknown tool: {tool_name}"))
    params = dict(tool_input or {})
    try:
        validate_arguments(tool_name, params)
        text, structured = executor(params, session)
    except ForgeError as exc:
        return _error_result(exc)
    except Exception as exc:
        logger.exception("Tool execution failed: %s", tool_name)
        return _error_result(ForgeError(str(exc)))
    return {"content": text, "structured": structured}


def _error_result(error: ForgeError) -> dict:
    return {"content": error.message, "isError": True, "error": error.to_dict()}


def _exec_search_process(params: dict, session: Any) -> tuple[str, dict]:
    query = params["query"]
    max_results = params.get("maxResults", DEFAULT_MAX_RESULTS)
    hits = search_all_phases(session.library, query, max_results)
    return (
        format_search_results(query, hits),
        {"total": len(hits), "results": [h.to_dict() for h in hits]},
    )


def _exec_mark_progress(params: dict, session: Any) -> tuple[str, dict]:
    phase_id = int(params["phaseId"])
    entry = session.mark_progress(phase_id, params["status"], params.get("note"))
    status = entry.status.value
    return (
        f"Phase {phase_id} marked as '{status}'.",
        {
            "phaseId": phase_id,
            "status": status,
            "updatedAt": entry.updated_at.isoformat(),
        },
    )


def _exec_get_status(params: dict, session: Any) -> tuple[str, dict]:
    return (
        format_status_table(session.state, session.manifest),
        {"phases": phase_status_rows(session.state, session.manifest)},
    )


_EXECUTORS = {
    "search_process": _exec_search_process,
    "mark_progress": _exec_mark_progress,
    "get_status": _exec_get_status,
}
