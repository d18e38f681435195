"""Allow running gitprompt with ``python -m gitprompt``."""

from gitprompt.cli import main

main()
