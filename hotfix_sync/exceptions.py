"""Custom exception hierarchy for hotfix-sync.

This module defines a structured exception hierarchy that enables precise
error handling and operator-friendly messages throughout the integration
engine and its command-line front end.

Exception Hierarchy:
    HotfixSyncError (base)
    ├── ConfigurationError
    ├── GitOperationError
    │   ├── NotGitRepositoryError      (hotfix_sync.git.exceptions)
    │   ├── BranchNotFoundError        (hotfix_sync.git.exceptions)
    │   └── WrongBranchError           (hotfix_sync.git.exceptions)
    └── IntegrationError
        ├── NothingToIntegrateError
        ├── InternalInconsistencyError
        ├── IntegrationStateError
        └── UnresolvedConflictsError

Merge conflicts are deliberately absent: a conflicting merge suspends the
integration step and is reported as a result, not raised.

Example Usage:
    >>> from hotfix_sync.exceptions import ConfigurationError
    >>> try:
    ...     load_config(path)
    ... except FileNotFoundError as e:
    ...     raise ConfigurationError(f"Config file not found: {path}") from e
"""


class HotfixSyncError(Exception):
    """Base exception for all hotfix-sync errors.

    All custom exceptions inherit from this base class, allowing callers to
    catch every hotfix-sync specific error with a single except clause.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(HotfixSyncError):
    """Configuration-related errors.

    Raised when configuration files are invalid, missing, or contain
    incompatible settings.

    Examples:
        - Configuration file not found
        - Invalid YAML syntax
        - Invalid configuration values
    """

    pass


class GitOperationError(HotfixSyncError):
    """Git operation errors.

    Raised when a git command fails for a reason other than a merge
    conflict, or when repository state is invalid for the requested step.

    See hotfix_sync.git.exceptions for the more specific error types.

    Attributes:
        command: The git command that failed, if known
    """

    def __init__(self, message: str, command: str | None = None) -> None:
        """Initialize exception.

        Args:
            message: Error message
            command: The git command that failed
        """
        self.command = command
        full_message = message
        if command:
            full_message = f"{message} (command: {command})"
        super().__init__(full_message)
        # Preserve original message
        self.message = message


# =============================================================================
# Integration Errors
# =============================================================================


class IntegrationError(HotfixSyncError):
    """Base exception for failures of a single integration step.

    Carries the context of the step so that the operator can tell which
    commit and which branches were involved.

    Attributes:
        commit: Commit being integrated, if known
        from_branch: Source branch name, if known
        into_branch: Target branch name, if known
    """

    def __init__(
        self,
        message: str,
        commit: str | None = None,
        from_branch: str | None = None,
        into_branch: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            commit: Commit being integrated
            from_branch: Source branch name
            into_branch: Target branch name
        """
        self.commit = commit
        self.from_branch = from_branch
        self.into_branch = into_branch

        parts = []
        if commit:
            parts.append(f"commit: {commit}")
        if from_branch:
            parts.append(f"from: {from_branch}")
        if into_branch:
            parts.append(f"into: {into_branch}")

        full_message = f"{message} ({', '.join(parts)})" if parts else message
        super().__init__(full_message)
        self.message = message


class NothingToIntegrateError(IntegrationError):
    """Every commit of the source branch is already part of the target."""

    def __init__(self, from_branch: str, into_branch: str) -> None:
        """Initialize exception.

        Args:
            from_branch: Source branch name
            into_branch: Target branch name
        """
        super().__init__(f"Nothing to integrate from '{from_branch}' into '{into_branch}'")
        self.from_branch = from_branch
        self.into_branch = into_branch


class InternalInconsistencyError(IntegrationError):
    """The commit graph contradicts what the engine was promised.

    Raised, for example, when a message is composed for a commit that has no
    unintegrated commits relative to its base. The step is aborted rather
    than producing an empty message.
    """

    pass


class IntegrationStateError(IntegrationError):
    """A suspended integration is missing, stale, or blocks a new step."""

    pass


class UnresolvedConflictsError(IntegrationError):
    """Conflicted paths remain while trying to finalize a suspended merge.

    Attributes:
        paths: Paths still marked as unmerged
    """

    def __init__(self, paths: list[str], commit: str | None = None) -> None:
        """Initialize exception.

        Args:
            paths: Paths still marked as unmerged
            commit: Commit whose merge is suspended
        """
        super().__init__(
            f"Unresolved conflicts remain in {len(paths)} path(s): {', '.join(paths)}",
            commit=commit,
        )
        self.paths = paths
