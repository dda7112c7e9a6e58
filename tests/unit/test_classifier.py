"""Tests for commit message classification."""

import pytest

from hotfix_sync.engine.classifier import (
    BRANCH_MERGE_PREFIX,
    COMMIT_MERGE_PREFIX,
    PULL_REQUEST_MERGE_PREFIX,
    classify_body,
)
from hotfix_sync.enums import MergeKind


def test_prefix_constants_are_exact():
    """The recognized prefixes match what git and hosting services write."""
    assert PULL_REQUEST_MERGE_PREFIX == "Merge pull request #"
    assert COMMIT_MERGE_PREFIX == "Merge commit '"
    assert BRANCH_MERGE_PREFIX == "Merge branch '"


@pytest.mark.parametrize(
    "body,expected",
    [
        ("Merge pull request #42 from org/fix-login\n\nFix login", MergeKind.PULL_REQUEST_MERGE),
        ("Merge commit '3f2a9c1d' into develop", MergeKind.COMMIT_MERGE),
        ("Merge branch 'hotfix/1.2' into release", MergeKind.BRANCH_MERGE),
        ("Fix login redirect", MergeKind.PLAIN),
        ("", MergeKind.PLAIN),
    ],
)
def test_classify_body(body, expected):
    """Each prefix maps to its merge kind; anything else is plain."""
    assert classify_body(body) is expected


@pytest.mark.parametrize(
    "body",
    [
        " Merge pull request #42 from org/fix",
        "merge branch 'hotfix'",
        "Merge pull request 42 from org/fix",
        "Merge branch \"hotfix\"",
        "Merge remote-tracking branch 'origin/hotfix'",
        "Fix typo\n\nMerge branch 'hotfix'",
    ],
)
def test_near_misses_are_plain(body):
    """Matching is literal and anchored at the start of the message."""
    assert classify_body(body) is MergeKind.PLAIN


def test_merge_kind_is_merge():
    """Only the three merge kinds unwrap."""
    assert MergeKind.PULL_REQUEST_MERGE.is_merge
    assert MergeKind.COMMIT_MERGE.is_merge
    assert MergeKind.BRANCH_MERGE.is_merge
    assert not MergeKind.PLAIN.is_merge
