"""Repository access for the integration engine.

The engine talks to version control only through the interfaces defined in
hotfix_sync.git.history. Two implementations ship with the package:

- GitRepository: a local Git working copy, via GitPython.
- InMemoryRepository: an in-process commit graph for tests and dry runs.

Example:
    >>> from hotfix_sync.git import GitRepository
    >>> repo = GitRepository()
    >>> repo.current_branch()
    'develop'

Error Handling:
    Repository errors inherit from GitRepositoryError and carry a hint.

    >>> from hotfix_sync.git import BranchNotFoundError
    >>> try:
    ...     repo.head_of("no-such-branch")
    ... except BranchNotFoundError as e:
    ...     print(e)
    Branch does not exist: no-such-branch

    Hint: Create or fetch it first, e.g. git branch no-such-branch origin/no-such-branch
"""

from hotfix_sync.git.exceptions import (
    BranchNotFoundError,
    GitRepositoryError,
    NotGitRepositoryError,
    WrongBranchError,
)
from hotfix_sync.git.history import HistoryAccessor, RepositoryBackend
from hotfix_sync.git.memory import InMemoryRepository
from hotfix_sync.git.models import CommitRef, MergeOutcome, MergeStrategy
from hotfix_sync.git.repository import GitRepository

__all__ = [
    # Interfaces
    "HistoryAccessor",
    "RepositoryBackend",
    # Implementations
    "GitRepository",
    "InMemoryRepository",
    # Models
    "CommitRef",
    "MergeOutcome",
    "MergeStrategy",
    # Exceptions
    "GitRepositoryError",
    "NotGitRepositoryError",
    "BranchNotFoundError",
    "WrongBranchError",
]
