"""In-memory repository backend.

InMemoryRepository keeps a small commit graph in process memory and
implements RepositoryBackend on top of it. It lets the integration engine be
exercised without a Git binary: commits carry a flat file tree, merges are
three-way per path, and conflicting paths must be resolved explicitly before
the merge can be committed.

Example:
    >>> repo = InMemoryRepository(state_dir="/tmp/hotfix-sync-state")
    >>> root = repo.commit("develop", "Initial commit", {"README": "hello"})
    >>> repo.create_branch("hotfix", root)
    >>> fix = repo.commit("hotfix", "Fix bug", {"app.py": "fixed"})
    >>> repo.commits_not_in(repo.head_of("hotfix"), repo.head_of("develop")) == [fix]
    True
"""

import hashlib
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path

from hotfix_sync.exceptions import GitOperationError
from hotfix_sync.git.exceptions import BranchNotFoundError
from hotfix_sync.git.history import RepositoryBackend
from hotfix_sync.git.models import CommitRef, MergeOutcome, MergeStrategy


@dataclass(frozen=True)
class MemoryCommit:
    """A commit of the in-memory graph.

    Attributes:
        sha: Full identifier
        message: Full commit message
        parents: Parent identifiers, first parent first
        tree: Mapping of path to file content
    """

    sha: CommitRef
    message: str
    parents: tuple[CommitRef, ...]
    tree: dict[str, str] = field(default_factory=dict, hash=False)


@dataclass
class _PendingMerge:
    commit: CommitRef
    tree: dict[str, str]
    conflicts: set[str]


class InMemoryRepository(RepositoryBackend):
    """RepositoryBackend over an in-process commit graph.

    Attributes:
        commits: All commits by identifier
        branches: Branch name to head commit
        mutations: Names of mutating operations performed, in order
    """

    ABBREV_LENGTH = 7

    def __init__(self, state_dir: str | Path) -> None:
        """Initialize an empty graph.

        Args:
            state_dir: Directory handed to the engine for pending-step state.
                The caller owns it; nothing is created or removed here.
        """
        self.commits: dict[CommitRef, MemoryCommit] = {}
        self.branches: dict[str, CommitRef] = {}
        self.mutations: list[str] = []
        self._head: str | None = None
        self._merge: _PendingMerge | None = None
        self._counter = 0
        self._state_dir = Path(state_dir)

    # ------------------------------------------------------------------
    # Graph construction helpers
    # ------------------------------------------------------------------

    def _new_sha(self, message: str) -> CommitRef:
        self._counter += 1
        return hashlib.sha1(f"{self._counter}\0{message}".encode()).hexdigest()

    def _store(self, message: str, parents: tuple[CommitRef, ...], tree: dict[str, str]) -> CommitRef:
        sha = self._new_sha(message)
        self.commits[sha] = MemoryCommit(sha=sha, message=message, parents=parents, tree=dict(tree))
        return sha

    def commit(self, branch: str, message: str, changes: dict[str, str] | None = None) -> CommitRef:
        """Create a commit on ``branch`` (creating the branch if needed).

        The first branch ever committed to becomes the checked-out branch.

        Args:
            branch: Branch to advance
            message: Full commit message
            changes: Files to add or overwrite in the parent's tree

        Returns:
            The new commit
        """
        parent = self.branches.get(branch)
        tree = dict(self.commits[parent].tree) if parent else {}
        tree.update(changes or {})
        sha = self._store(message, (parent,) if parent else (), tree)
        self.branches[branch] = sha
        if self._head is None:
            self._head = branch
        return sha

    def merge_commit(self, branch: str, other: CommitRef, message: str) -> CommitRef:
        """Create a merge commit on ``branch`` with ``other`` as second parent.

        Conflicting paths take the content of ``other``.
        """
        ours = self.branches[branch]
        tree, conflicts = self._three_way(ours, other)
        for path in conflicts:
            tree[path] = self.commits[other].tree[path]
        sha = self._store(message, (ours, other), tree)
        self.branches[branch] = sha
        return sha

    def create_branch(self, name: str, at: CommitRef) -> None:
        """Create or move branch ``name`` to ``at``."""
        self.branches[name] = at

    def checkout(self, branch: str | None) -> None:
        """Check out ``branch``; None detaches HEAD."""
        if branch is not None and branch not in self.branches:
            raise BranchNotFoundError(branch)
        self._head = branch

    def write_file(self, path: str, content: str) -> None:
        """Resolve a conflicted path of the in-progress merge with ``content``."""
        if self._merge is None:
            raise GitOperationError("No merge in progress")
        self._merge.tree[path] = content
        self._merge.conflicts.discard(path)

    def tree_of(self, commit: CommitRef) -> dict[str, str]:
        """Return a copy of the file tree of ``commit``."""
        return dict(self.commits[commit].tree)

    # ------------------------------------------------------------------
    # Graph algorithms
    # ------------------------------------------------------------------

    def _ancestors(self, commit: CommitRef) -> set[CommitRef]:
        seen: set[CommitRef] = set()
        queue = deque([commit])
        while queue:
            current = queue.popleft()
            if current in seen:
                continue
            seen.add(current)
            queue.extend(self.commits[current].parents)
        return seen

    def _merge_base(self, ours: CommitRef, theirs: CommitRef) -> CommitRef | None:
        theirs_ancestors = self._ancestors(theirs)
        queue = deque([ours])
        seen: set[CommitRef] = set()
        while queue:
            current = queue.popleft()
            if current in theirs_ancestors:
                return current
            if current in seen:
                continue
            seen.add(current)
            queue.extend(self.commits[current].parents)
        return None

    def _three_way(self, ours: CommitRef, theirs: CommitRef) -> tuple[dict[str, str], set[str]]:
        base = self._merge_base(ours, theirs)
        base_tree = self.commits[base].tree if base else {}
        ours_tree = self.commits[ours].tree
        theirs_tree = self.commits[theirs].tree

        merged: dict[str, str] = {}
        conflicts: set[str] = set()
        for path in sorted(set(base_tree) | set(ours_tree) | set(theirs_tree)):
            b, o, t = base_tree.get(path), ours_tree.get(path), theirs_tree.get(path)
            if o == t or b == t:
                result = o
            elif b == o:
                result = t
            else:
                conflicts.add(path)
                result = o
            if result is not None:
                merged[path] = result
        return merged, conflicts

    # ------------------------------------------------------------------
    # HistoryAccessor
    # ------------------------------------------------------------------

    def commits_not_in(self, commit: CommitRef, base: CommitRef) -> list[CommitRef]:
        excluded = self._ancestors(base)
        result: list[CommitRef] = []
        current: CommitRef | None = commit
        while current is not None and current not in excluded:
            result.append(current)
            parents = self.commits[current].parents
            current = parents[0] if parents else None
        return result

    def body(self, commit: CommitRef) -> str:
        return self.commits[commit].message.rstrip("\n")

    def abbrev(self, commit: CommitRef) -> str:
        return commit[: self.ABBREV_LENGTH]

    def parents(self, commit: CommitRef) -> list[CommitRef]:
        return list(self.commits[commit].parents)

    def head_of(self, branch: str) -> CommitRef:
        if branch not in self.branches:
            raise BranchNotFoundError(branch)
        return self.branches[branch]

    def branch_exists(self, name: str) -> bool:
        return name in self.branches

    def current_branch(self) -> str | None:
        return self._head

    # ------------------------------------------------------------------
    # RepositoryBackend
    # ------------------------------------------------------------------

    @property
    def state_dir(self) -> Path:
        return self._state_dir

    def _require_head(self) -> tuple[str, CommitRef]:
        if self._head is None:
            raise GitOperationError("HEAD is detached")
        return self._head, self.branches[self._head]

    def merge_no_commit(self, commit: CommitRef, strategy: MergeStrategy | None = None) -> MergeOutcome:
        if self._merge is not None:
            raise GitOperationError("A merge is already in progress", command="git merge")
        _, ours = self._require_head()
        self.mutations.append("merge_ours" if strategy == "ours" else "merge")

        if strategy == "ours":
            tree, conflicts = dict(self.commits[ours].tree), set()
        else:
            tree, conflicts = self._three_way(ours, commit)

        self._merge = _PendingMerge(commit=commit, tree=tree, conflicts=conflicts)
        return MergeOutcome(commit=commit, strategy=strategy, conflicts=tuple(sorted(conflicts)))

    def commit_merge(self, message: str) -> CommitRef:
        if self._merge is None:
            raise GitOperationError("No merge in progress", command="git commit")
        if self._merge.conflicts:
            raise GitOperationError("Unmerged paths remain", command="git commit")
        branch, ours = self._require_head()
        self.mutations.append("commit")

        sha = self._store(message, (ours, self._merge.commit), self._merge.tree)
        self.branches[branch] = sha
        self._merge = None
        return sha

    def has_diff_to_first_parent(self, commit: CommitRef) -> bool:
        node = self.commits[commit]
        if not node.parents:
            return bool(node.tree)
        return node.tree != self.commits[node.parents[0]].tree

    def unmerged_paths(self) -> list[str]:
        if self._merge is None:
            return []
        return sorted(self._merge.conflicts)

    def merge_in_progress(self) -> bool:
        return self._merge is not None

    def abort_merge(self) -> None:
        if self._merge is None:
            raise GitOperationError("No merge to abort", command="git merge --abort")
        self.mutations.append("abort")
        self._merge = None
