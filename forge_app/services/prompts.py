"""
forge_app/services/prompts.py -- Prompt templates that start or resume a
skill creation session.
"""

from __future__ import annotations

from forge.errors import InvalidToolArguments, UnknownResource

PROMPT_DEFINITIONS: list[dict] = [
    {
        "name": "create_skill",
        "title": "Create Skill",
        "description": (
            "Guide the agent through the full skill creation process (Phase 0->8). "
            "Provide a topic and the agent will follow the structured workflow."
        ),
        "arguments": [
            {
                "name": "topic",
                "description": "The skill topic to create (e.g., 'React component design')",
                "required": True,
            },
        ],
    },
    {
        "name": "resume_skill",
        "title": "Resume Skill Creation",
        "description": (
            "Resume a skill creation session. Checks current progress and "
            "continues from where you left off."
        ),
        "arguments": [],
    },
]


def _create_skill(arguments: dict) -> str:
    topic = arguments.get("topic")
    if not topic:
        raise InvalidToolArguments("Prompt create_skill requires a 'topic' argument")
    return "\n".join([
        f'I want to create an Agent Skill for: "{topic}"',
        "",
        "Please follow the Skill Forge process:",
        "1. Read process://manifest to understand the full 9-phase workflow",
        "2. Start from Phase 0 to understand the SKILL.md specification",
        "3. Work through each phase sequentially (Phase 1->8)",
        "4. Use mark_progress to record your progress on each phase",
        "5. Use search_process if you need to find specific guidance",
        "6. Generate the final SKILL.md at Phase 6",
        "7. Deploy and validate in Phases 7-8",
        "",
        "Begin by reading the manifest.",
    ])


def _resume_skill(arguments: dict) -> str:
    return "\n".join([
        "I want to resume my skill creation session.",
        "",
        "Please:",
        "1. Call get_status to check my current progress",
        "2. Identify the next incomplete phase",
        "3. Read that phase's content and continue the workflow",
        "4. Use mark_progress as you complete each phase",
    ])


_BUILDERS = {
    "create_skill": _create_skill,
    "resume_skill": _resume_skill,
}


def get_prompt(name: str, arguments: dict | None = None) -> dict:
    """Return ``{"messages": [...]}`` with a single user message."""
    builder = _BUILDERS.get(name)
    if builder is None:
        raise UnknownResource(f"prompt:{name}")
    text = builder(arguments or {})
    return {"messages": [{"role": "user", "content": {"type": "text", "text": text}}]}
