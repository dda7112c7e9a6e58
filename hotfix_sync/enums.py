"""Enumerations for commit classification and integration actions."""

from enum import Enum


class MergeKind(str, Enum):
    """Classification of a commit by the first line of its message.

    Merge commits created by pull requests, ``git merge <sha>`` and
    ``git merge <branch>`` carry no authored content of their own; the
    content they bring in lives on their second parent.
    """

    PULL_REQUEST_MERGE = "pull-request-merge"
    COMMIT_MERGE = "commit-merge"
    BRANCH_MERGE = "branch-merge"
    PLAIN = "plain"

    def __str__(self) -> str:
        return self.value

    @property
    def is_merge(self) -> bool:
        """Return True for the kinds whose content lives on the second parent."""
        return self is not MergeKind.PLAIN


class IntegrationAction(str, Enum):
    """What an integration step does with the selected commit.

    - merge: apply the commit's changes to the target branch
    - skip: record the commit as merged while keeping the target's tree
    """

    MERGE = "merge"
    SKIP = "skip"

    def __str__(self) -> str:
        return self.value

    def message_prefix(self, abbrev: str, from_branch: str) -> str:
        """Build the subject-line prefix recording where a commit came from.

        Args:
            abbrev: Abbreviated identifier of the integrated commit
            from_branch: Name of the branch the commit was taken from

        Returns:
            ``"Merged '<abbrev>' from <branch>: "`` or
            ``"Skipped '<abbrev>' from <branch>: "``
        """
        verb = "Skipped" if self is IntegrationAction.SKIP else "Merged"
        return f"{verb} '{abbrev}' from {from_branch}: "
