"""gitprompt: a compact git status line for shell prompts."""

__version__ = "0.1.0"
