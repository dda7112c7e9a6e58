"""GitPython implementation of the repository backend.

This module provides GitRepository, the production RepositoryBackend. It
answers history questions with GitPython's object model and runs the few
porcelain commands an integration step needs (merge, commit, diff) through
GitPython's command wrapper.

Key Exports:
    GitRepository: RepositoryBackend backed by a local Git repository.

Example:
    >>> from hotfix_sync.git.repository import GitRepository
    >>> repo = GitRepository("/path/to/checkout")
    >>> base = repo.head_of("develop")
    >>> pending = repo.commits_not_in(repo.head_of("hotfix"), base)
    >>> print([repo.abbrev(c) for c in reversed(pending)])
    ['1a2b3c4', '5d6e7f8']

Thread Safety:
    GitRepository instances cache the git.Repo object internally. Use one
    instance per thread.

Dependencies:
    Requires GitPython (gitpython) package for repository access.
"""

from pathlib import Path
from typing import Any

try:
    import git
    from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError
except ImportError as e:
    raise ImportError("GitPython is required for repository access. Install it with: pip install gitpython") from e

import structlog

from hotfix_sync.exceptions import GitOperationError
from hotfix_sync.git.exceptions import BranchNotFoundError, NotGitRepositoryError
from hotfix_sync.git.history import RepositoryBackend
from hotfix_sync.git.models import CommitRef, MergeOutcome, MergeStrategy

log = structlog.get_logger(__name__)

STATE_DIRNAME = "hotfix-sync"


class GitRepository(RepositoryBackend):
    """RepositoryBackend for a local Git working copy.

    The git.Repo object is created lazily on first use so that a
    GitRepository can be constructed before the path is validated.

    Attributes:
        repo_path: Resolved path the repository was opened from.
    """

    def __init__(self, repo_path: str | Path = ".") -> None:
        """Initialize for a repository path.

        Args:
            repo_path: Any path inside the working copy. Parent directories
                are searched for the repository root.
        """
        self.repo_path = Path(repo_path).resolve()
        self._repo: git.Repo | None = None

    def _get_repo(self) -> git.Repo:
        """Get the Git repository object, initializing if needed.

        Raises:
            NotGitRepositoryError: If the path is not within a Git repository.
        """
        if self._repo is None:
            try:
                self._repo = git.Repo(self.repo_path, search_parent_directories=True)
            except (InvalidGitRepositoryError, NoSuchPathError) as e:
                raise NotGitRepositoryError(str(self.repo_path)) from e

        return self._repo

    def _run(self, command: str, *args: str, **kwargs: Any) -> str:
        """Run a git subcommand, translating failures to GitOperationError."""
        runner = getattr(self._get_repo().git, command)
        try:
            return runner(*args, **kwargs)
        except GitCommandError as e:
            stderr = (e.stderr or "").strip()
            raise GitOperationError(
                f"git {command} failed: {stderr or e.status}",
                command=" ".join(["git", command, *args]),
            ) from e

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def commits_not_in(self, commit: CommitRef, base: CommitRef) -> list[CommitRef]:
        repo = self._get_repo()
        try:
            return [c.hexsha for c in repo.iter_commits(f"{base}..{commit}", first_parent=True)]
        except GitCommandError as e:
            raise GitOperationError(
                f"Cannot list commits of {commit} missing from {base}",
                command=f"git rev-list --first-parent {base}..{commit}",
            ) from e

    def body(self, commit: CommitRef) -> str:
        message = self._get_repo().commit(commit).message
        if isinstance(message, bytes):
            message = message.decode("utf-8", errors="replace")
        return message.rstrip("\n")

    def abbrev(self, commit: CommitRef) -> str:
        return self._run("rev_parse", "--short", commit)

    def parents(self, commit: CommitRef) -> list[CommitRef]:
        return [p.hexsha for p in self._get_repo().commit(commit).parents]

    def head_of(self, branch: str) -> CommitRef:
        if not self.branch_exists(branch):
            raise BranchNotFoundError(branch)
        return self._get_repo().commit(f"refs/heads/{branch}").hexsha

    def branch_exists(self, name: str) -> bool:
        try:
            self._get_repo().git.rev_parse("--verify", "--quiet", f"refs/heads/{name}")
        except GitCommandError:
            log.debug("branch_not_found", branch=name)
            return False
        return True

    def current_branch(self) -> str | None:
        try:
            return self._get_repo().active_branch.name
        except TypeError:
            # Detached HEAD
            return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    @property
    def state_dir(self) -> Path:
        return Path(self._get_repo().git_dir) / STATE_DIRNAME

    def merge_no_commit(self, commit: CommitRef, strategy: MergeStrategy | None = None) -> MergeOutcome:
        args = ["--no-commit", "--no-ff"]
        if strategy is not None:
            args.extend(["--strategy", strategy])
        args.append(commit)

        log.info("git_merge_started", commit=commit, strategy=strategy or "default")
        try:
            self._get_repo().git.merge(*args)
        except GitCommandError as e:
            conflicts = self.unmerged_paths()
            if not conflicts:
                stderr = (e.stderr or "").strip()
                raise GitOperationError(
                    f"git merge failed: {stderr or e.status}",
                    command=" ".join(["git", "merge", *args]),
                ) from e
            log.info("git_merge_conflicts", commit=commit, paths=conflicts)
            return MergeOutcome(commit=commit, strategy=strategy, conflicts=tuple(conflicts))

        return MergeOutcome(commit=commit, strategy=strategy)

    def commit_merge(self, message: str) -> CommitRef:
        # verbatim cleanup keeps blank lines and comment-like lines intact
        self._run("commit", "--cleanup=verbatim", "-m", message)
        return self._get_repo().head.commit.hexsha

    def has_diff_to_first_parent(self, commit: CommitRef) -> bool:
        changed = self._run("diff", "--name-only", f"{commit}^1", commit)
        return bool(changed.strip())

    def unmerged_paths(self) -> list[str]:
        output = self._run("diff", "--name-only", "--diff-filter=U")
        paths: list[str] = []
        for line in output.splitlines():
            if line and line not in paths:
                paths.append(line)
        return paths

    def merge_in_progress(self) -> bool:
        return (Path(self._get_repo().git_dir) / "MERGE_HEAD").exists()

    def abort_merge(self) -> None:
        log.info("git_merge_aborted")
        self._run("merge", "--abort")
