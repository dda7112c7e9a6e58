"""Tests for the skip decision."""

import pytest

from hotfix_sync.engine.composer import MessageComposer
from hotfix_sync.engine.skip import BRANCH_SPECIFIC_TAG, SkipDecision
from hotfix_sync.exceptions import InternalInconsistencyError
from hotfix_sync.git.memory import InMemoryRepository


@pytest.fixture
def decision(composer: MessageComposer) -> SkipDecision:
    return SkipDecision(composer)


def test_default_tag():
    assert BRANCH_SPECIFIC_TAG == "@branch-specific"


class TestPrecedence:
    """Force flags take precedence over the message."""

    def test_untagged_commit_merges(self, repo: InMemoryRepository, decision: SkipDecision):
        commit = repo.commit("hotfix", "Fix bug")
        assert decision.should_skip(commit, repo.head_of("develop")) is False

    def test_force_skip_on_untagged_commit(self, repo: InMemoryRepository, decision: SkipDecision):
        commit = repo.commit("hotfix", "Fix bug")
        assert decision.should_skip(commit, repo.head_of("develop"), force_skip=True) is True

    def test_force_merge_on_tagged_commit(self, repo: InMemoryRepository, decision: SkipDecision):
        commit = repo.commit("hotfix", "Bump version\n\n@branch-specific")
        assert decision.should_skip(commit, repo.head_of("develop"), force_merge=True) is False

    def test_force_skip_wins_over_force_merge(self, repo: InMemoryRepository, decision: SkipDecision):
        commit = repo.commit("hotfix", "Fix bug")
        assert decision.should_skip(commit, repo.head_of("develop"), force_skip=True, force_merge=True) is True

    def test_force_flags_do_not_compose(self, repo: InMemoryRepository, decision: SkipDecision):
        """A forced decision never looks at the message, even one that cannot be composed."""
        base = repo.head_of("develop")

        assert decision.should_skip(base, base, force_skip=True) is True
        assert decision.should_skip(base, base, force_merge=True) is False
        with pytest.raises(InternalInconsistencyError):
            decision.should_skip(base, base)


class TestTagDetection:
    """The tag must be a whole line of the composed message."""

    @pytest.mark.parametrize(
        "body",
        [
            "Bump version to 1.2.1\n\n@branch-specific",
            "Bump version to 1.2.1\n@branch-specific\nOnly relevant on the release line.",
            "@branch-specific",
        ],
    )
    def test_tag_line_skips(self, repo: InMemoryRepository, decision: SkipDecision, body):
        commit = repo.commit("hotfix", body)
        assert decision.should_skip(commit, repo.head_of("develop")) is True

    @pytest.mark.parametrize(
        "body",
        [
            "Bump version\n\nThis is @branch-specific for now",
            "Bump version\n\n @branch-specific",
            "Bump version\n\n@branch-specific.",
            "Bump version\n\n@Branch-Specific",
        ],
    )
    def test_partial_matches_merge(self, repo: InMemoryRepository, decision: SkipDecision, body):
        commit = repo.commit("hotfix", body)
        assert decision.should_skip(commit, repo.head_of("develop")) is False

    def test_tag_inside_span(self, repo: InMemoryRepository, decision: SkipDecision):
        repo.commit("hotfix", "Fix bug")
        repo.commit("hotfix", "Pin dependency\n\n@branch-specific")
        tip = repo.commit("hotfix", "Fix another bug")

        assert decision.should_skip(tip, repo.head_of("develop")) is True

    def test_tag_behind_pull_request_merge(self, repo: InMemoryRepository, decision: SkipDecision):
        repo.create_branch("pin", repo.head_of("develop"))
        pin = repo.commit("pin", "Pin dependency\n\n@branch-specific")
        merge = repo.merge_commit("hotfix", pin, "Merge pull request #9 from org/pin")

        assert decision.should_skip(merge, repo.head_of("develop")) is True

    def test_tag_only_in_merge_message_is_ignored(self, repo: InMemoryRepository, decision: SkipDecision):
        """The merge commit's own text is replaced by the change it brings in."""
        repo.create_branch("fix", repo.head_of("develop"))
        fix = repo.commit("fix", "Fix bug")
        merge = repo.merge_commit("hotfix", fix, "Merge branch 'fix' into hotfix\n\n@branch-specific")

        assert decision.should_skip(merge, repo.head_of("develop")) is False

    def test_custom_tag(self, repo: InMemoryRepository, composer: MessageComposer):
        commit = repo.commit("hotfix", "Release notes\n\n[release-only]")
        base = repo.head_of("develop")

        assert SkipDecision(composer, tag="[release-only]").should_skip(commit, base) is True
        assert SkipDecision(composer).should_skip(commit, base) is False
