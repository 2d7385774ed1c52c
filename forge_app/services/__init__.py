"""
forge_app/services/ -- Boundary services around the process library.

    session     ProcessSession: owns library, store and state; shutdown flush
    resources   process:// addressing and reads (records accesses)
    tools       search_process, mark_progress, get_status
    prompts     create_skill, resume_skill
    dispatch    JSON-lines request handling for the ``serve`` command
"""
