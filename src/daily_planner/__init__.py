"""
daily-planner: flat-file personal task manager.

Components:
- tasks/: models, text codec, file store, task services, reminder daemon
- llm/: OpenAI-compatible chat client used by the `claude` command
- connectors/: outward notification (desktop / terminal)
- cli/: argument parsing, rendering, entrypoint
"""

__version__ = "0.1.0"
