"""
forge_app/services/dispatch.py -- JSON-lines request loop.

Each input line is one request::

    {"id": 1, "method": "resources/read", "params": {"uri": "process://phase/0"}}

and produces one output line with either ``result`` or ``error``.  The
state is flushed when the input stream closes.

Methods:
    resources/list  resources/templates/list  resources/read
    tools/list      tools/call
    prompts/list    prompts/get
"""

from __future__ import annotations

import json
import logging
from typing import Any, TextIO

from forge.errors import ForgeError, InvalidToolArguments
from forge_app.services.prompts import PROMPT_DEFINITIONS, get_prompt
from forge_app.services.resources import RESOURCE_TEMPLATES, list_resources, read_resource
from forge_app.services.tools import TOOL_DEFINITIONS, execute_tool

logger = logging.getLogger(__name__)

PARSE_ERROR = -32700
METHOD_NOT_FOUND = -32601


def _params(request: dict) -> dict:
    params = request.get("params") or {}
    if not isinstance(params, dict):
        raise InvalidToolArguments("params must be an object")
    return params


def _read(session, params):
    uri = params.get("uri")
    if not isinstance(uri, str):
        raise InvalidToolArguments("resources/read requires a 'uri' string")
    return {"contents": read_resource(session, uri)}


def _call_tool(session, params):
    return execute_tool(params.get("name", ""), params.get("arguments"), session)


_METHODS = {
    "resources/list": lambda session, params: {"resources": list_resources(session)},
    "resources/templates/list": lambda session, params: {"resourceTemplates": RESOURCE_TEMPLATES},
    "resources/read": _read,
    "tools/list": lambda session, params: {"tools": TOOL_DEFINITIONS},
    "tools/call": _call_tool,
    "prompts/list": lambda session, params: {"prompts": PROMPT_DEFINITIONS},
    "prompts/get": lambda session, params: get_prompt(params.get("name", ""), params.get("arguments")),
}


def handle_request(session, request: Any) -> dict:
    """Dispatch one decoded request and return the response dict."""
    if not isinstance(request, dict):
        return {"id": None, "error": {"code": PARSE_ERROR, "message": "Request must be a JSON object"}}

    request_id = request.get("id")
    method = request.get("method")
    handler = _METHODS.get(method)
    if handler is None:
        return {
            "id": request_id,
            "error": {"code": METHOD_NOT_FOUND, "message": f"Unknown method: {method}"},
        }

    try:
        result = handler(session, _params(request))
    except ForgeError as exc:
        return {"id": request_id, "error": exc.to_dict()}
    except Exception as exc:
        logger.exception("Request failed: %s", method)
        return {"id": request_id, "error": ForgeError(str(exc)).to_dict()}
    return {"id": request_id, "result": result}


def serve(session, stdin: TextIO, stdout: TextIO) -> int:
    """Answer requests from *stdin* until it closes; return the request count."""
    handled = 0
    try:
        for line in stdin:
            line = line.strip()
            if not line:
                continue
            try:
                request = json.loads(line)
            except json.JSONDecodeError as exc:
                response = {"id": None, "error": {"code": PARSE_ERROR, "message": str(exc)}}
            else:
                response = handle_request(session, request)
            stdout.write(json.dumps(response, ensure_ascii=False, default=str) + "\n")
            stdout.flush()
            handled += 1
    finally:
        session.shutdown()
    return handled

