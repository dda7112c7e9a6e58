"""Git repository exceptions.

This module defines the exception hierarchy for repository access and the
preconditions checked before an integration step. All exceptions inherit from
GitRepositoryError and include helpful error messages with hints for
resolution.

Example:
    >>> from hotfix_sync.git.exceptions import NotGitRepositoryError
    >>> raise NotGitRepositoryError("/tmp/not-a-repo")
    Traceback (most recent call last):
        ...
    NotGitRepositoryError: Not a Git repository: /tmp/not-a-repo

    Hint: Run hotfix-sync from inside the repository or pass --repo.
"""

from hotfix_sync.exceptions import GitOperationError


class GitRepositoryError(GitOperationError):
    """Base exception for repository and branch errors.

    Attributes:
        message: Error message
        hint: Optional hint for resolution
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        """Initialize exception.

        Args:
            message: Error message
            hint: Optional hint for resolution
        """
        super().__init__(message)
        self.message = message
        self.hint = hint

    def __str__(self) -> str:
        """Format error message with hint.

        Returns:
            Formatted error message with optional hint
        """
        if self.hint:
            return f"{self.message}\n\nHint: {self.hint}"
        return self.message


class NotGitRepositoryError(GitRepositoryError):
    """Raised when directory is not a Git repository.

    Attributes:
        path: Path to the directory that is not a Git repository
    """

    def __init__(self, path: str) -> None:
        """Initialize exception.

        Args:
            path: Path to the directory
        """
        super().__init__(
            message=f"Not a Git repository: {path}",
            hint="Run hotfix-sync from inside the repository or pass --repo.",
        )
        self.path = path


class BranchNotFoundError(GitRepositoryError):
    """Raised when a branch named on the command line does not exist.

    Attributes:
        branch: The missing branch name
    """

    def __init__(self, branch: str) -> None:
        """Initialize exception.

        Args:
            branch: The missing branch name
        """
        super().__init__(
            message=f"Branch does not exist: {branch}",
            hint=f"Create or fetch it first, e.g. git branch {branch} origin/{branch}",
        )
        self.branch = branch


class WrongBranchError(GitRepositoryError):
    """Raised when the checked-out branch is not the integration target.

    Attributes:
        expected: Branch that must be checked out
        actual: Branch that is checked out (None when HEAD is detached)
    """

    def __init__(self, expected: str, actual: str | None) -> None:
        """Initialize exception.

        Args:
            expected: Branch that must be checked out
            actual: Branch that is checked out
        """
        current = actual if actual is not None else "(detached HEAD)"
        super().__init__(
            message=f"Current branch is {current}, expected {expected}",
            hint=f"Switch with: git checkout {expected}",
        )
        self.expected = expected
        self.actual = actual
