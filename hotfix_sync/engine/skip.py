"""Skip decision for integration steps.

A commit is skipped (recorded as merged without taking its changes) when the
operator forces it, or when the unprefixed composed message for the commit
contains a line that is exactly the branch-specific tag. Composing first
means the tag is found wherever the authored change ends up, including behind
pull-request merges and inside fast-forwarded spans.
"""

import structlog

from hotfix_sync.engine.composer import MessageComposer
from hotfix_sync.git.models import CommitRef

log = structlog.get_logger(__name__)

BRANCH_SPECIFIC_TAG = "@branch-specific"


class SkipDecision:
    """Decide whether an integration step skips or merges a commit.

    Attributes:
        composer: Composer used to derive the unprefixed message
        tag: Line that marks a change as specific to its source branch
    """

    def __init__(self, composer: MessageComposer, tag: str = BRANCH_SPECIFIC_TAG) -> None:
        self.composer = composer
        self.tag = tag

    def should_skip(
        self,
        commit: CommitRef,
        base: CommitRef,
        force_skip: bool = False,
        force_merge: bool = False,
    ) -> bool:
        """Return True if ``commit`` should be skipped.

        Precedence, first match wins:
            1. force_skip: skip
            2. force_merge: merge
            3. a line of the composed message equals the tag: skip
            4. otherwise: merge

        Args:
            commit: Commit being integrated
            base: Head of the target branch before the integration
            force_skip: Skip regardless of the message
            force_merge: Merge regardless of the message

        Raises:
            InternalInconsistencyError: Propagated from message composition.
        """
        if force_skip:
            return True
        if force_merge:
            return False

        message = self.composer.compose("", commit, base)
        tagged = self.tag in message.lines()
        if tagged:
            log.info("branch_specific_tag_found", commit=commit, tag=self.tag)
        return tagged
