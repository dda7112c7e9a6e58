"""Tests for integration message composition."""

import pytest

from hotfix_sync.engine.composer import MessageComposer
from hotfix_sync.exceptions import InternalInconsistencyError
from hotfix_sync.git.memory import InMemoryRepository
from hotfix_sync.models.domain import MessageSection

PREFIX = "Merged 'abc1234' from hotfix: "


class TestSingleCommit:
    """A commit that is the only change missing from the base."""

    def test_subject_is_prefix_plus_first_line(self, repo: InMemoryRepository, composer: MessageComposer):
        commit = repo.commit("hotfix", "Fix bug")

        message = composer.compose(PREFIX, commit, repo.head_of("develop"))

        assert message.subject_line == PREFIX + "Fix bug"
        assert message.body_sections == ()
        assert message.render() == PREFIX + "Fix bug"

    def test_remaining_lines_preserved_verbatim(self, repo: InMemoryRepository, composer: MessageComposer):
        body = "Fix crash on empty input\n\nGuard against None.\n  - indented detail\n\n\nTrailer: yes"
        commit = repo.commit("hotfix", body)

        message = composer.compose(PREFIX, commit, repo.head_of("develop"))

        assert message.subject_line == PREFIX + "Fix crash on empty input"
        assert message.body_sections == (
            MessageSection(label=None, text="\nGuard against None.\n  - indented detail\n\n\nTrailer: yes"),
        )
        assert message.render() == PREFIX + body

    def test_empty_prefix(self, repo: InMemoryRepository, composer: MessageComposer):
        commit = repo.commit("hotfix", "Fix bug\n\nDetails")

        message = composer.compose("", commit, repo.head_of("develop"))

        assert message.render() == "Fix bug\n\nDetails"


class TestSpan:
    """A commit standing for several commits missing from the base."""

    def test_three_commits_listed_oldest_first(self, repo: InMemoryRepository, composer: MessageComposer):
        c1 = repo.commit("hotfix", "First fix\n\nbody one")
        c2 = repo.commit("hotfix", "Second fix")
        c3 = repo.commit("hotfix", "Third fix\n\nbody three")

        message = composer.compose(PREFIX, c3, repo.head_of("develop"))

        a1, a2, a3 = (repo.abbrev(c) for c in (c1, c2, c3))
        assert message.subject_line == f"{PREFIX}{a1},{a2},{a3}"
        assert [s.label for s in message.body_sections] == [
            f"Commit '{a1}'",
            f"Commit '{a2}'",
            f"Commit '{a3}'",
        ]
        assert [s.text for s in message.body_sections] == [
            "First fix\n\nbody one",
            "Second fix",
            "Third fix\n\nbody three",
        ]

    def test_rendered_span(self, repo: InMemoryRepository, composer: MessageComposer):
        c1 = repo.commit("hotfix", "First fix")
        c2 = repo.commit("hotfix", "Second fix\n\ndetails")
        a1, a2 = repo.abbrev(c1), repo.abbrev(c2)

        rendered = composer.compose(PREFIX, c2, repo.head_of("develop")).render()

        assert rendered == (
            f"{PREFIX}{a1},{a2}\n"
            "\n"
            f"Commit '{a1}'\n"
            "First fix\n"
            "\n"
            f"Commit '{a2}'\n"
            "Second fix\n"
            "\n"
            "details"
        )

    def test_span_stops_at_base(self, repo: InMemoryRepository, composer: MessageComposer):
        """Commits already reachable from the base are not listed."""
        c1 = repo.commit("hotfix", "Already integrated")
        repo.merge_commit("develop", c1, "Merged 'c1' from hotfix: Already integrated")
        c2 = repo.commit("hotfix", "New fix")

        message = composer.compose(PREFIX, c2, repo.head_of("develop"))

        assert message.subject_line == PREFIX + "New fix"


class TestMergeUnwrapping:
    """Merge commits are replaced by their second parent."""

    @pytest.mark.parametrize(
        "merge_message",
        [
            "Merge pull request #12 from org/fix-login\n\nFix login redirect",
            "Merge commit '0123abc' into hotfix",
            "Merge branch 'fix-login' into hotfix",
        ],
    )
    def test_unwraps_to_second_parent(self, repo: InMemoryRepository, composer: MessageComposer, merge_message):
        root = repo.head_of("develop")
        repo.create_branch("fix-login", root)
        fix = repo.commit("fix-login", "Fix login redirect\n\nUse the stored return URL.", {"login.py": "fixed\n"})
        merge = repo.merge_commit("hotfix", fix, merge_message)
        base = repo.head_of("develop")

        assert composer.compose(PREFIX, merge, base) == composer.compose(PREFIX, fix, base)
        assert composer.compose(PREFIX, merge, base).render() == (
            PREFIX + "Fix login redirect\n\nUse the stored return URL."
        )

    def test_nested_merges_are_transparent(self, repo: InMemoryRepository, composer: MessageComposer):
        root = repo.head_of("develop")
        repo.create_branch("topic", root)
        repo.create_branch("feature", root)
        fix = repo.commit("topic", "Fix nested bug")
        inner = repo.merge_commit("feature", fix, "Merge branch 'topic' into feature")
        middle = repo.merge_commit("hotfix", inner, "Merge commit 'deadbee' into hotfix")
        repo.create_branch("release", root)
        outer = repo.merge_commit("release", middle, "Merge pull request #7 from org/feature")
        base = repo.head_of("develop")

        assert composer.compose(PREFIX, outer, base).render() == PREFIX + "Fix nested bug"

    def test_unwraps_into_span(self, repo: InMemoryRepository, composer: MessageComposer):
        """A pull request bringing several commits lists each of them."""
        root = repo.head_of("develop")
        repo.create_branch("feature", root)
        f1 = repo.commit("feature", "Part one")
        f2 = repo.commit("feature", "Part two")
        merge = repo.merge_commit("hotfix", f2, "Merge pull request #3 from org/feature")

        message = composer.compose(PREFIX, merge, repo.head_of("develop"))

        assert message.subject_line == f"{PREFIX}{repo.abbrev(f1)},{repo.abbrev(f2)}"
        assert [s.text for s in message.body_sections] == ["Part one", "Part two"]

    def test_merge_message_without_second_parent(self, repo: InMemoryRepository, composer: MessageComposer):
        commit = repo.commit("hotfix", "Merge branch 'oops' written by hand")

        with pytest.raises(InternalInconsistencyError) as exc_info:
            composer.compose(PREFIX, commit, repo.head_of("develop"))

        assert "second parent" in str(exc_info.value)


def test_nothing_missing_from_base_is_inconsistent(repo: InMemoryRepository, composer: MessageComposer):
    """Composing for a commit already in the base aborts instead of returning an empty message."""
    base = repo.head_of("develop")

    with pytest.raises(InternalInconsistencyError) as exc_info:
        composer.compose(PREFIX, base, base)

    assert exc_info.value.commit == base
