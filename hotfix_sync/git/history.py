"""
Abstract base classes for repository access.

This module defines the two interfaces the integration engine depends on:

- HistoryAccessor: read-only view of the commit graph (first-parent ranges,
  message bodies, parents, abbreviations, branch heads).
- RepositoryBackend: a HistoryAccessor that can also perform the merge and
  commit operations an integration step requests.

The engine never owns commit objects; it only asks these interfaces about
them. GitRepository (hotfix_sync.git.repository) implements both against a
real repository with GitPython, and InMemoryRepository
(hotfix_sync.git.memory) implements both over an in-process commit graph.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from hotfix_sync.git.models import CommitRef, MergeOutcome, MergeStrategy


class HistoryAccessor(ABC):
    """Read-only access to the commit graph.

    Results must be stable for a fixed repository state. Implementations are
    not required to cache anything across calls.
    """

    @abstractmethod
    def commits_not_in(self, commit: CommitRef, base: CommitRef) -> list[CommitRef]:
        """List commits reachable from ``commit`` but not from ``base``.

        Only first-parent edges are followed when walking back from
        ``commit``.

        Args:
            commit: Commit to start walking from (included).
            base: Commit whose history is excluded (itself excluded).

        Returns:
            Commits ordered most recent first. Empty when ``commit`` is
            already reachable from ``base``.
        """
        pass

    @abstractmethod
    def body(self, commit: CommitRef) -> str:
        """Return the full message of ``commit`` without trailing newlines."""
        pass

    @abstractmethod
    def abbrev(self, commit: CommitRef) -> str:
        """Return the short display identifier of ``commit``.

        The abbreviation may grow as the repository grows, so callers should
        compute it when they need it instead of storing it.
        """
        pass

    @abstractmethod
    def parents(self, commit: CommitRef) -> list[CommitRef]:
        """Return the parents of ``commit`` in order (first parent first)."""
        pass

    @abstractmethod
    def head_of(self, branch: str) -> CommitRef:
        """Return the commit a local branch points to.

        Raises:
            BranchNotFoundError: If the branch does not exist.
        """
        pass

    @abstractmethod
    def branch_exists(self, name: str) -> bool:
        """Return True if a local branch called ``name`` exists."""
        pass

    @abstractmethod
    def current_branch(self) -> str | None:
        """Return the checked-out branch name, or None on a detached HEAD."""
        pass


class RepositoryBackend(HistoryAccessor):
    """History access plus the mutations an integration step requests.

    Mutations always act on the checked-out branch and working tree. The
    engine checks that the checked-out branch is the integration target
    before calling any of them.
    """

    @property
    @abstractmethod
    def state_dir(self) -> Path:
        """Directory where hotfix-sync may keep per-repository state."""
        pass

    @abstractmethod
    def merge_no_commit(self, commit: CommitRef, strategy: MergeStrategy | None = None) -> MergeOutcome:
        """Merge ``commit`` into the checked-out branch without committing.

        A merge commit is always prepared, even when a fast-forward would be
        possible, so that the finalized commit records ``commit`` as its
        second parent.

        Args:
            commit: Commit to merge.
            strategy: ``"ours"`` to record ancestry while keeping the current
                tree, or None for a normal merge.

        Returns:
            MergeOutcome listing conflicted paths (empty when clean).

        Raises:
            GitOperationError: If the merge fails for any reason other than
                content conflicts.
        """
        pass

    @abstractmethod
    def commit_merge(self, message: str) -> CommitRef:
        """Commit the in-progress merge with exactly ``message``.

        Returns:
            The new commit.
        """
        pass

    @abstractmethod
    def has_diff_to_first_parent(self, commit: CommitRef) -> bool:
        """Return True if ``commit`` changes any tracked file relative to its first parent."""
        pass

    @abstractmethod
    def unmerged_paths(self) -> list[str]:
        """Return paths still marked as conflicted in the index."""
        pass

    @abstractmethod
    def merge_in_progress(self) -> bool:
        """Return True while a merge has been started but not committed."""
        pass

    @abstractmethod
    def abort_merge(self) -> None:
        """Discard the in-progress merge and restore the pre-merge state."""
        pass
