"""
Composition of integration commit messages.

The message for an integration step records where the integrated change came
from and carries the authored text of that change. MessageComposer derives it
from the commit graph:

- Merge commits (pull-request, commit and branch merges) are unwrapped by
  descending into their second parent, where the authored change lives.
  Nested merges of these kinds unwrap the same way.
- A commit that is the only change missing from the base contributes its own
  message: the first line joins the prefix, the remaining lines follow
  unchanged.
- A commit that stands for several missing commits (a fast-forwarded span)
  lists their abbreviations in the subject and gets one labeled section per
  commit, oldest first.

Example:
    >>> composer = MessageComposer(repo)
    >>> message = composer.compose("Merged '1a2b3c4' from hotfix: ", commit, base)
    >>> print(message.render())
    Merged '1a2b3c4' from hotfix: Fix crash on empty input
"""

import structlog

from hotfix_sync.engine.classifier import classify_body
from hotfix_sync.exceptions import InternalInconsistencyError
from hotfix_sync.git.history import HistoryAccessor
from hotfix_sync.git.models import CommitRef
from hotfix_sync.models.domain import ComposedMessage, MessageSection

log = structlog.get_logger(__name__)


class MessageComposer:
    """Derive integration commit messages from the commit graph.

    Attributes:
        history: Read access to the commit graph
    """

    def __init__(self, history: HistoryAccessor) -> None:
        self.history = history

    def compose(self, prefix: str, commit: CommitRef, base: CommitRef) -> ComposedMessage:
        """Compose the message for integrating ``commit`` on top of ``base``.

        Args:
            prefix: Text placed before the subject (may be empty)
            commit: Commit being integrated
            base: Head of the target branch before the integration

        Returns:
            The composed message.

        Raises:
            InternalInconsistencyError: If ``commit`` has no commits missing
                from ``base``, or a merge commit has no second parent.
        """
        body = self.history.body(commit)
        kind = classify_body(body)

        if kind.is_merge:
            parents = self.history.parents(commit)
            if len(parents) < 2:
                raise InternalInconsistencyError(
                    f"Commit message says {kind} but commit has no second parent",
                    commit=commit,
                )
            log.debug("compose_unwrap_merge", commit=commit, kind=str(kind), into=parents[1])
            return self.compose(prefix, parents[1], base)

        not_integrated = self.history.commits_not_in(commit, base)

        if not not_integrated:
            raise InternalInconsistencyError(f"No commits missing from base {base}", commit=commit)

        if len(not_integrated) == 1:
            first_line, _, rest = body.partition("\n")
            sections = (MessageSection(label=None, text=rest),) if rest else ()
            return ComposedMessage(subject_line=prefix + first_line, body_sections=sections)

        chronological = list(reversed(not_integrated))
        abbrevs = [self.history.abbrev(c) for c in chronological]
        log.debug("compose_span", commit=commit, count=len(chronological))

        sections = tuple(
            MessageSection(label=f"Commit '{abbrev}'", text=self.history.body(c))
            for abbrev, c in zip(abbrevs, chronological, strict=True)
        )
        return ComposedMessage(subject_line=prefix + ",".join(abbrevs), body_sections=sections)
