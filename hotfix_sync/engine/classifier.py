"""Classification of commit messages.

Merge commits produced by hosting services and by ``git merge`` are
recognized from the literal text git and the services put at the start of
the message. Matching is exact and anchored at the first character of the
message; leading whitespace or different capitalization is not a match.
"""

from hotfix_sync.enums import MergeKind

PULL_REQUEST_MERGE_PREFIX = "Merge pull request #"
COMMIT_MERGE_PREFIX = "Merge commit '"
BRANCH_MERGE_PREFIX = "Merge branch '"

_PREFIXES: tuple[tuple[str, MergeKind], ...] = (
    (PULL_REQUEST_MERGE_PREFIX, MergeKind.PULL_REQUEST_MERGE),
    (COMMIT_MERGE_PREFIX, MergeKind.COMMIT_MERGE),
    (BRANCH_MERGE_PREFIX, MergeKind.BRANCH_MERGE),
)


def classify_body(body: str) -> MergeKind:
    """Classify a commit message.

    Args:
        body: Full commit message

    Returns:
        The merge kind whose prefix starts the message, or MergeKind.PLAIN.

    Example:
        >>> classify_body("Merge pull request #12 from org/fix-login")
        <MergeKind.PULL_REQUEST_MERGE: 'pull-request-merge'>
        >>> classify_body("Fix login")
        <MergeKind.PLAIN: 'plain'>
    """
    for prefix, kind in _PREFIXES:
        if body.startswith(prefix):
            return kind
    return MergeKind.PLAIN
