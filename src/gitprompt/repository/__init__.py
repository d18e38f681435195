"""Repository access.

This package provides the read-only repository collaborator the status
queries consume.

Classes:
    GitRepository: GitPython-backed implementation.
    FakeRepository: In-memory implementation for tests.
    RepositoryProtocol: Runtime-checkable protocol for dependency injection.
    RepositoryConfig: Protocol for configuration readers.

Models:
    Reference: A raw or resolved reference.
    StatusEntry: Status flags for one path.

Example:
    >>> from gitprompt.repository import GitRepository
    >>> repo = GitRepository.discover()
    >>> if repo is not None:
    ...     with repo:
    ...         head = repo.head()
"""

from gitprompt.repository._fake import FakeConfig, FakeRepository
from gitprompt.repository._git import (
    GitConfig,
    GitRepository,
    map_fetch_refspec,
)
from gitprompt.repository._models import Reference, StatusEntry
from gitprompt.repository._protocol import RepositoryConfig, RepositoryProtocol

__all__ = [
    "FakeConfig",
    "FakeRepository",
    "GitConfig",
    "GitRepository",
    "Reference",
    "RepositoryConfig",
    "RepositoryProtocol",
    "StatusEntry",
    "map_fetch_refspec",
]
