"""
forge_app/main.py -- Command-line entry point.

Usage::

    skill-forge manifest
    skill-forge read process://phase/0/section/frontmatter
    skill-forge search frontmatter -n 10
    skill-forge mark 1 in-progress --note "drafting scope"
    skill-forge status
    skill-forge prompt create_skill --topic "release notes"
    skill-forge check
    skill-forge serve < requests.jsonl

Command output goes to stdout; logs go to stderr.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback

from forge import __version__
from forge.models.state import PhaseStatus

logger = logging.getLogger("forge_app")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTEGRITY = 2


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _global_exception_hook(exc_type, exc_value, exc_tb):
    """Last-resort handler for uncaught exceptions."""
    logger.critical(
        "Uncaught exception: %s",
        "".join(traceback.format_exception(exc_type, exc_value, exc_tb)),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skill-forge",
        description="Read, search and track progress through the skill creation process.",
    )
    parser.add_argument("--lang", help="Locale tag (en, ja). Overrides SKILL_FORGE_LANG.")
    parser.add_argument(
        "--persist", action=argparse.BooleanOptionalAction, default=None,
        help="Persist progress to state.json. Overrides SKILL_FORGE_PERSIST.",
    )
    parser.add_argument("--state-dir", help="Directory holding state.json.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    parser.add_argument("--json", action="store_true", help="Print structured JSON output.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("manifest", help="Print the manifest.")

    p_read = sub.add_parser("read", help="Read a process:// resource.")
    p_read.add_argument("uri")

    p_search = sub.add_parser("search", help="Search all phases.")
    p_search.add_argument("query")
    p_search.add_argument("-n", "--max-results", type=int, default=5)

    p_mark = sub.add_parser("mark", help="Record the status of a phase.")
    p_mark.add_argument("phase_id", type=int)
    p_mark.add_argument("status", choices=[s.value for s in PhaseStatus])
    p_mark.add_argument("--note", default=None)

    sub.add_parser("status", help="Show progress for every phase.")

    p_prompt = sub.add_parser("prompt", help="Render a prompt template.")
    p_prompt.add_argument("name")
    p_prompt.add_argument("--topic")

    sub.add_parser("check", help="Verify every manifest heading exists in its document.")
    sub.add_parser("serve", help="Answer JSON-lines requests on stdin.")
    return parser


def _print(data, as_json: bool) -> None:
    if as_json or not isinstance(data, str):
        print(json.dumps(data, indent=2, ensure_ascii=False, default=str))
    else:
        print(data)


def _run_tool(session, name: str, arguments: dict, as_json: bool) -> int:
    from forge_app.services.tools import execute_tool

    result = execute_tool(name, arguments, session)
    if result.get("isError"):
        _print({"error": result["error"]}, True)
        return EXIT_ERROR
    _print(result["structured"] if as_json else result["content"], as_json)
    return EXIT_OK


def run(args: argparse.Namespace, session) -> int:
    """Execute one parsed command against *session*."""
    from forge.errors import ForgeError, HeadingIntegrityError
    from forge_app.services.dispatch import serve
    from forge_app.services.prompts import get_prompt
    from forge_app.services.resources import read_resource

    try:
        if args.command == "manifest":
            _print(session.library.manifest_document(), True)
        elif args.command == "read":
            contents = read_resource(session, args.uri)
            if args.json:
                _print({"contents": contents}, True)
            else:
                print("\n\n".join(c["text"] for c in contents))
        elif args.command == "search":
            return _run_tool(
                session, "search_process",
                {"query": args.query, "maxResults": args.max_results}, args.json,
            )
        elif args.command == "mark":
            arguments = {"phaseId": args.phase_id, "status": args.status}
            if args.note is not None:
                arguments["note"] = args.note
            return _run_tool(session, "mark_progress", arguments, args.json)
        elif args.command == "status":
            return _run_tool(session, "get_status", {}, args.json)
        elif args.command == "prompt":
            arguments = {"topic": args.topic} if args.topic else {}
            prompt = get_prompt(args.name, arguments)
            if args.json:
                _print(prompt, True)
            else:
                print(prompt["messages"][0]["content"]["text"])
        elif args.command == "check":
            problems = session.library.check_integrity()
            if problems:
                _print({"missing": {str(k): v for k, v in problems.items()}}, True)
                return EXIT_INTEGRITY
            print(f"All section headings present ({session.library.locale}).")
        elif args.command == "serve":
            session.install_signal_handlers()
            serve(session, sys.stdin, sys.stdout)
    except HeadingIntegrityError as exc:
        _print({"error": exc.to_dict()}, True)
        return EXIT_INTEGRITY
    except ForgeError as exc:
        _print({"error": exc.to_dict()}, True)
        return EXIT_ERROR
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, open a session, run the command and flush state."""
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)
    sys.excepthook = _global_exception_hook

    from forge_app.config import Settings
    from forge_app.services.session import ProcessSession

    settings = Settings.from_env().override(
        locale=args.lang, persist=args.persist, state_dir=args.state_dir,
    )
    session = ProcessSession(settings)
    try:
        return run(args, session)
    finally:
        session.shutdown()


if __name__ == "__main__":
    sys.exit(main())
