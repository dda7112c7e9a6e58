"""
Integration orchestrator.

This module provides IntegrationOrchestrator, which drives one integration
step end to end:

1. Capture the head of the target branch as the base of the step.
2. Decide whether the commit is skipped or merged.
3. Compose the message against the captured base.
4. Ask the repository for a merge without auto-commit: the "ours" strategy
   for a skip, a normal merge otherwise.
5. Finalize the merge commit with the composed message, or suspend the step
   when the merge stops on conflicts.

Suspension Model:
    A conflicting merge is not an error. ``integrate`` returns a Suspended
    result and stores a PendingIntegration holding the composed message.
    Once the operator has resolved the conflicts, ``resume`` commits the
    merge with that stored message. Nothing is resolved automatically.

Example:
    >>> orchestrator = IntegrationOrchestrator(GitRepository("."))
    >>> orchestrator.check_preconditions("hotfix", "develop")
    >>> commit = orchestrator.next_commit("hotfix", "develop")
    >>> result = orchestrator.integrate(commit, "hotfix", "develop")
    >>> if isinstance(result, Suspended):
    ...     # resolve conflicts, git add, then
    ...     result = orchestrator.resume()
"""

from dataclasses import dataclass
from typing import Any

import structlog

from hotfix_sync.engine.composer import MessageComposer
from hotfix_sync.engine.skip import BRANCH_SPECIFIC_TAG, SkipDecision
from hotfix_sync.engine.state_manager import StateManager
from hotfix_sync.enums import IntegrationAction
from hotfix_sync.exceptions import GitOperationError, IntegrationStateError, UnresolvedConflictsError
from hotfix_sync.git.exceptions import BranchNotFoundError, WrongBranchError
from hotfix_sync.git.history import RepositoryBackend
from hotfix_sync.git.models import CommitRef
from hotfix_sync.models.domain import (
    Completed,
    IntegrationRequest,
    IntegrationResult,
    PendingIntegration,
    Suspended,
)

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class IntegrationPlan:
    """Everything decided about a step before the repository is touched.

    Attributes:
        request: The request being planned
        base: Head of the target branch captured at planning time
        action: Merge or skip
        abbrev: Abbreviated identifier of the commit
        message: Rendered commit message
    """

    request: IntegrationRequest
    base: CommitRef
    action: IntegrationAction
    abbrev: str
    message: str


class IntegrationOrchestrator:
    """Drive integration steps against a repository backend.

    Attributes:
        repository: Backend used for history queries and mutations
        state: Storage for the suspended step, if any
        composer: Message composer bound to the repository
        skip_decision: Skip decision bound to the composer
    """

    def __init__(
        self,
        repository: RepositoryBackend,
        state: StateManager | None = None,
        skip_tag: str = BRANCH_SPECIFIC_TAG,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            repository: Backend for history queries and mutations.
            state: State manager for suspended steps. Defaults to one rooted
                at the repository's state directory.
            skip_tag: Message line that marks a change as branch-specific.
        """
        self.repository = repository
        self.state = state if state is not None else StateManager(repository.state_dir)
        self.composer = MessageComposer(repository)
        self.skip_decision = SkipDecision(self.composer, tag=skip_tag)

    # ------------------------------------------------------------------
    # Selection and preconditions
    # ------------------------------------------------------------------

    def next_commit(self, from_branch: str, into_branch: str) -> CommitRef | None:
        """Return the oldest commit of ``from_branch`` not yet in ``into_branch``.

        Only the first-parent history of ``from_branch`` is considered.

        Returns:
            The commit to integrate next, or None if there is nothing to do.
        """
        pending = self.repository.commits_not_in(
            self.repository.head_of(from_branch),
            self.repository.head_of(into_branch),
        )
        if not pending:
            log.info("nothing_to_integrate", from_branch=from_branch, into_branch=into_branch)
            return None
        log.debug("next_commit_selected", commit=pending[-1], remaining=len(pending))
        return pending[-1]

    def check_preconditions(self, from_branch: str, into_branch: str, require_idle: bool = True) -> None:
        """Verify the repository is ready for a step from ``from_branch`` into ``into_branch``.

        Args:
            from_branch: Source branch name
            into_branch: Target branch name
            require_idle: Also refuse while a suspended step is pending

        Raises:
            BranchNotFoundError: If either branch does not exist.
            WrongBranchError: If ``into_branch`` is not checked out.
            IntegrationStateError: If a suspended step is still pending.
        """
        for branch in (from_branch, into_branch):
            if not self.repository.branch_exists(branch):
                raise BranchNotFoundError(branch)
        self._require_checked_out(into_branch)
        if require_idle:
            self._require_no_pending()

    def _require_checked_out(self, branch: str) -> None:
        current = self.repository.current_branch()
        if current != branch:
            raise WrongBranchError(expected=branch, actual=current)

    def _require_no_pending(self) -> None:
        pending = self.state.load()
        if pending is not None:
            raise IntegrationStateError(
                "A suspended integration is pending; run 'hotfix-sync continue' or 'hotfix-sync abort'",
                commit=pending.abbrev,
                from_branch=pending.from_branch,
                into_branch=pending.into_branch,
            )

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def plan(self, request: IntegrationRequest) -> IntegrationPlan:
        """Decide and compose a step without touching the repository.

        The base is captured once here and used for both the skip decision
        and the message, so a plan stays valid after the merge moves the
        target branch.
        """
        base = self.repository.head_of(request.into_branch)
        skip = self.skip_decision.should_skip(
            request.commit,
            base,
            force_skip=request.force_skip,
            force_merge=request.force_merge,
        )
        action = IntegrationAction.SKIP if skip else IntegrationAction.MERGE
        abbrev = self.repository.abbrev(request.commit)
        prefix = action.message_prefix(abbrev, request.from_branch)
        message = self.composer.compose(prefix, request.commit, base).render()

        log.debug(
            "integration_planned",
            commit=request.commit,
            base=base,
            action=str(action),
            from_branch=request.from_branch,
            into_branch=request.into_branch,
        )
        return IntegrationPlan(request=request, base=base, action=action, abbrev=abbrev, message=message)

    def show(
        self,
        commit: CommitRef,
        from_branch: str,
        into_branch: str,
        force_skip: bool = False,
        force_merge: bool = False,
    ) -> str:
        """Return the message ``integrate`` would finalize, without mutating anything."""
        request = IntegrationRequest(commit, from_branch, into_branch, force_skip, force_merge)
        return self.plan(request).message

    # ------------------------------------------------------------------
    # Integration
    # ------------------------------------------------------------------

    def integrate(
        self,
        commit: CommitRef,
        from_branch: str,
        into_branch: str,
        force_skip: bool = False,
        force_merge: bool = False,
    ) -> IntegrationResult:
        """Integrate ``commit`` from ``from_branch`` into the checked-out ``into_branch``.

        Args:
            commit: Commit to integrate
            from_branch: Branch the commit was selected from
            into_branch: Target branch; must be checked out
            force_skip: Skip regardless of the commit's message
            force_merge: Merge regardless of the commit's message

        Returns:
            Completed when a commit was created, Suspended when the merge
            stopped on conflicts.

        Raises:
            ValueError: If both force flags are set.
            WrongBranchError: If ``into_branch`` is not checked out.
            IntegrationStateError: If a suspended step is still pending.
            InternalInconsistencyError: If the message cannot be composed.
            GitOperationError: If a git operation fails.
        """
        request = IntegrationRequest(commit, from_branch, into_branch, force_skip, force_merge)
        self._require_checked_out(into_branch)
        self._require_no_pending()

        plan = self.plan(request)
        bound = log.bind(commit=plan.abbrev, from_branch=from_branch, into_branch=into_branch)

        if plan.action is IntegrationAction.SKIP:
            return self._skip(plan, bound)
        return self._merge(plan, bound)

    def _skip(self, plan: IntegrationPlan, bound: Any) -> Completed:
        outcome = self.repository.merge_no_commit(plan.request.commit, strategy="ours")
        if outcome.has_conflicts:
            raise GitOperationError(
                f"Merge with the ours strategy reported conflicts: {', '.join(outcome.conflicts)}",
                command="git merge --no-commit --no-ff --strategy ours",
            )

        new_commit = self._finalize(plan, bound)
        invariant_ok = not self.repository.has_diff_to_first_parent(new_commit)
        if not invariant_ok:
            bound.warning("skip_invariant_violated", new_commit=new_commit)
        bound.info("integration_skipped", new_commit=new_commit)

        return Completed(
            commit=new_commit,
            message=plan.message,
            action=IntegrationAction.SKIP,
            skip_invariant_ok=invariant_ok,
        )

    def _merge(self, plan: IntegrationPlan, bound: Any) -> IntegrationResult:
        outcome = self.repository.merge_no_commit(plan.request.commit)

        if outcome.has_conflicts:
            token = self._pending_token(plan, list(outcome.conflicts))
            self.state.save(token)
            bound.info("integration_suspended", conflicts=list(outcome.conflicts))
            return Suspended(token=token, conflicts=outcome.conflicts)

        new_commit = self._finalize(plan, bound)
        bound.info("integration_merged", new_commit=new_commit)
        return Completed(commit=new_commit, message=plan.message, action=IntegrationAction.MERGE)

    def _pending_token(self, plan: IntegrationPlan, conflicts: list[str]) -> PendingIntegration:
        return PendingIntegration(
            commit=plan.request.commit,
            abbrev=plan.abbrev,
            from_branch=plan.request.from_branch,
            into_branch=plan.request.into_branch,
            base=plan.base,
            action=plan.action,
            message=plan.message,
            conflicts=conflicts,
        )

    def _finalize(self, plan: IntegrationPlan, bound: Any) -> CommitRef:
        """Commit the prepared merge with the planned message.

        If the commit fails, the step is stored as pending before the error
        propagates, so ``resume`` can retry with the same message and
        ``abort`` can discard the prepared merge.
        """
        try:
            return self.repository.commit_merge(plan.message)
        except GitOperationError:
            self.state.save(self._pending_token(plan, []))
            bound.warning("integration_commit_failed", action=str(plan.action))
            raise

    # ------------------------------------------------------------------
    # Suspension
    # ------------------------------------------------------------------

    def pending(self) -> PendingIntegration | None:
        """Return the suspended step, if any."""
        return self.state.load()

    def resume(self, token: PendingIntegration | None = None) -> Completed:
        """Finalize a suspended step once its conflicts are resolved.

        Args:
            token: The suspended step. Defaults to the stored one.

        Returns:
            The completed step, committed with the message stored at
            suspension time.

        Raises:
            IntegrationStateError: If there is no suspended step, its target
                branch is not checked out, or no merge is in progress.
            UnresolvedConflictsError: If conflicted paths remain.
        """
        pending = token if token is not None else self.state.load()
        if pending is None:
            raise IntegrationStateError("No suspended integration to continue")

        current = self.repository.current_branch()
        if current != pending.into_branch:
            raise IntegrationStateError(
                f"Suspended integration targets {pending.into_branch} but {current} is checked out",
                commit=pending.abbrev,
            )
        if not self.repository.merge_in_progress():
            raise IntegrationStateError(
                "No merge in progress; run 'hotfix-sync abort' to discard the suspended integration",
                commit=pending.abbrev,
            )

        unresolved = self.repository.unmerged_paths()
        if unresolved:
            raise UnresolvedConflictsError(unresolved, commit=pending.abbrev)

        new_commit = self.repository.commit_merge(pending.message)
        self.state.clear()

        invariant_ok = True
        if pending.action is IntegrationAction.SKIP:
            invariant_ok = not self.repository.has_diff_to_first_parent(new_commit)
            if not invariant_ok:
                log.warning("skip_invariant_violated", commit=pending.abbrev, new_commit=new_commit)

        log.info(
            "integration_resumed",
            commit=pending.abbrev,
            new_commit=new_commit,
            from_branch=pending.from_branch,
            into_branch=pending.into_branch,
        )
        return Completed(
            commit=new_commit,
            message=pending.message,
            action=pending.action,
            skip_invariant_ok=invariant_ok,
        )

    def abort(self) -> PendingIntegration | None:
        """Discard the suspended step and its in-progress merge.

        Returns:
            The discarded step, or None if nothing was pending.
        """
        pending = self.state.load()
        if pending is None:
            return None
        if self.repository.merge_in_progress():
            self.repository.abort_merge()
        self.state.clear()
        log.info("integration_aborted", commit=pending.abbrev)
        return pending
