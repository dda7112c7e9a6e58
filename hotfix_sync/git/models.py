"""Git data models.

This module defines the small value types exchanged between the integration
engine and the repository backend.

Example:
    >>> from hotfix_sync.git.models import MergeOutcome
    >>> outcome = MergeOutcome(commit="3f2a9c1d", strategy=None, conflicts=("app.py",))
    >>> outcome.has_conflicts
    True
"""

from dataclasses import dataclass, field
from typing import Literal

CommitRef = str
"""Full, stable commit identifier (a 40 character hex sha for git)."""

MergeStrategy = Literal["ours"]
"""Merge strategies the engine may request besides git's default."""


@dataclass(frozen=True)
class MergeOutcome:
    """Result of a merge requested without auto-commit.

    Attributes:
        commit: Commit that was merged
        strategy: Strategy passed to git, or None for the default
        conflicts: Paths left unmerged by the merge
    """

    commit: CommitRef
    strategy: MergeStrategy | None
    conflicts: tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_conflicts(self) -> bool:
        """Return True when the merge stopped on conflicts."""
        return bool(self.conflicts)
