"""gitprompt exceptions.

Errors split into two families. Soft errors describe data that may
legitimately be absent (no upstream, no commits yet, an unreadable config
value) and are recovered close to where they are raised. Hard errors derive
from FatalRepositoryError and abort the process, since a truncated status
line is worse than none.
"""


class GitPromptError(Exception):
    """Base exception for gitprompt errors."""


# =============================================================================
# Soft Repository Errors
# =============================================================================


class ReferenceNotFoundError(GitPromptError, KeyError):
    """Raised when a reference cannot be resolved.

    Attributes:
        name: The reference name that failed to resolve.
    """

    def __init__(self, message: str, *, name: str | None = None) -> None:
        """Initialize with error message and reference context.

        Args:
            message: Human-readable error message.
            name: The reference name that failed to resolve.
        """
        super().__init__(message)
        self.name: str | None = name

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class UpstreamNotConfiguredError(ReferenceNotFoundError):
    """Raised when a branch has no configured upstream."""


class ConfigValueError(GitPromptError, KeyError):
    """Raised when a repository configuration value is missing or invalid.

    Attributes:
        key: The dotted configuration key.
    """

    def __init__(self, message: str, *, key: str) -> None:
        """Initialize with error message and key context.

        Args:
            message: Human-readable error message.
            key: The dotted configuration key.
        """
        super().__init__(message)
        self.key: str = key

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class AncestryError(GitPromptError):
    """Raised when ahead/behind counts cannot be computed."""


class ObjectReadError(GitPromptError, KeyError):
    """Raised when a git object is missing or cannot be parsed.

    Attributes:
        sha: Hex id of the object that failed to load.
    """

    def __init__(self, message: str, *, sha: str) -> None:
        """Initialize with error message and object context.

        Args:
            message: Human-readable error message.
            sha: Hex id of the object that failed to load.
        """
        super().__init__(message)
        self.sha: str = sha

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


# =============================================================================
# Fatal Repository Errors
# =============================================================================


class FatalRepositoryError(GitPromptError):
    """Base exception for failures that must abort the prompt."""


class StatusEnumerationError(FatalRepositoryError):
    """Raised when the working tree status cannot be gathered."""


class InvariantViolationError(FatalRepositoryError):
    """Raised when repository state contradicts a checked precondition."""


class ConfigOpenError(FatalRepositoryError):
    """Raised when the repository configuration cannot be opened."""


# =============================================================================
# Settings Exceptions
# =============================================================================


class ConfigError(GitPromptError):
    """Base exception for gitprompt settings errors."""


class ConfigLoadError(ConfigError):
    """Raised when settings cannot be loaded from the environment.

    Attributes:
        variable: The environment variable that failed validation, if known.
    """

    def __init__(self, message: str, *, variable: str | None = None) -> None:
        """Initialize with error message and variable context."""
        super().__init__(message)
        self.variable: str | None = variable
