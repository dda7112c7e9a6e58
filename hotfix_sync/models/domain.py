"""
Domain models for the integration engine.

This module contains the value types an integration step works with: the
request describing what to integrate, the composed commit message, the
tagged result of a step, and the record persisted while a step is suspended
on merge conflicts.

Example:
    Rendering a composed message::

        message = ComposedMessage(
            subject_line="Merged '1a2b3c4' from hotfix: Fix crash on empty input",
            body_sections=(MessageSection(label=None, text="\\nGuard against None."),),
        )
        print(message.render())
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from pydantic import BaseModel, Field

from hotfix_sync.enums import IntegrationAction
from hotfix_sync.git.models import CommitRef


@dataclass(frozen=True)
class IntegrationRequest:
    """A request to integrate one commit from one branch into another.

    Attributes:
        commit: Commit to integrate
        from_branch: Branch the commit was selected from
        into_branch: Branch that receives the commit (must be checked out)
        force_skip: Skip regardless of the commit's message
        force_merge: Merge regardless of the commit's message

    Raises:
        ValueError: If both force flags are set.
    """

    commit: CommitRef
    from_branch: str
    into_branch: str
    force_skip: bool = False
    force_merge: bool = False

    def __post_init__(self) -> None:
        if self.force_skip and self.force_merge:
            raise ValueError("force_skip and force_merge are mutually exclusive")


@dataclass(frozen=True)
class MessageSection:
    """One section of a composed message body.

    Attributes:
        label: Heading line such as ``Commit '1a2b3c4'``, or None
        text: Section text, preserved verbatim
    """

    label: str | None
    text: str


@dataclass(frozen=True)
class ComposedMessage:
    """A commit message derived for one integration step.

    Never persisted by the engine itself; the backend stores the rendered
    text as the message of the integration commit.

    Attributes:
        subject_line: First line of the message
        body_sections: Sections in chronological order
    """

    subject_line: str
    body_sections: tuple[MessageSection, ...] = ()

    def render(self) -> str:
        """Render the message as commit message text.

        An unlabeled section is appended directly below the subject, so the
        remaining lines of a single commit's message keep their original
        layout. Labeled sections are separated from the subject and from each
        other by a blank line.
        """
        if not self.body_sections:
            return self.subject_line

        if all(section.label is None for section in self.body_sections):
            return "\n".join([self.subject_line, *(section.text for section in self.body_sections)])

        blocks = []
        for section in self.body_sections:
            blocks.append(section.text if section.label is None else f"{section.label}\n{section.text}")
        return f"{self.subject_line}\n\n" + "\n\n".join(blocks)

    def lines(self) -> list[str]:
        """Return the rendered message split into lines."""
        return self.render().splitlines()


@dataclass(frozen=True)
class Completed:
    """An integration step that produced a commit.

    Attributes:
        commit: The new commit on the target branch
        message: Message the commit was finalized with
        action: Whether the source commit was merged or skipped
        skip_invariant_ok: False when a skip commit unexpectedly changed files
    """

    commit: CommitRef
    message: str
    action: IntegrationAction
    skip_invariant_ok: bool = True


@dataclass(frozen=True)
class Suspended:
    """An integration step waiting for conflicts to be resolved.

    Attributes:
        token: Persisted record needed to finalize the step
        conflicts: Paths the operator must resolve
    """

    token: "PendingIntegration"
    conflicts: tuple[str, ...] = field(default_factory=tuple)


IntegrationResult = Completed | Suspended


class PendingIntegration(BaseModel):
    """Resume token for an integration step suspended on merge conflicts.

    The fully composed message is stored so that the commit finalized after
    resolution carries exactly the text computed before the merge moved
    anything.
    """

    commit: CommitRef = Field(..., description="Commit being integrated")
    abbrev: str = Field(..., description="Abbreviated commit identifier at suspension time")
    from_branch: str = Field(..., description="Source branch name")
    into_branch: str = Field(..., description="Target branch name")
    base: CommitRef = Field(..., description="Head of the target branch before the merge")
    action: IntegrationAction = Field(default=IntegrationAction.MERGE, description="Integration action")
    message: str = Field(..., description="Message to finalize the merge with")
    conflicts: list[str] = Field(default_factory=list, description="Paths conflicted at suspension")
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
