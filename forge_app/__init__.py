"""
Skill Forge application layer: settings, session lifecycle, the process://
resource addressing, agent tools, prompts and the command-line entry point.
"""
