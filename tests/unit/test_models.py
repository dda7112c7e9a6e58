"""Tests for domain models and enums."""

from datetime import datetime

import pytest

from hotfix_sync.enums import IntegrationAction
from hotfix_sync.models.domain import (
    Completed,
    ComposedMessage,
    IntegrationRequest,
    MessageSection,
    PendingIntegration,
    Suspended,
)


class TestIntegrationRequest:
    def test_defaults(self):
        request = IntegrationRequest("abc", "hotfix", "develop")

        assert request.force_skip is False
        assert request.force_merge is False

    @pytest.mark.parametrize("force_skip,force_merge", [(True, False), (False, True)])
    def test_single_force_flag(self, force_skip, force_merge):
        IntegrationRequest("abc", "hotfix", "develop", force_skip=force_skip, force_merge=force_merge)

    def test_both_force_flags_rejected(self):
        with pytest.raises(ValueError, match="mutually exclusive"):
            IntegrationRequest("abc", "hotfix", "develop", force_skip=True, force_merge=True)


class TestComposedMessage:
    def test_subject_only(self):
        assert ComposedMessage(subject_line="Merged 'abc' from hotfix: Fix").render() == "Merged 'abc' from hotfix: Fix"

    def test_unlabeled_section_follows_subject(self):
        message = ComposedMessage(
            subject_line="Subject",
            body_sections=(MessageSection(label=None, text="\nBody line\n\nMore"),),
        )

        assert message.render() == "Subject\n\nBody line\n\nMore"
        assert message.lines() == ["Subject", "", "Body line", "", "More"]

    def test_labeled_sections(self):
        message = ComposedMessage(
            subject_line="P: a,b",
            body_sections=(
                MessageSection(label="Commit 'a'", text="First"),
                MessageSection(label="Commit 'b'", text="Second\n\nDetail"),
            ),
        )

        assert message.render() == "P: a,b\n\nCommit 'a'\nFirst\n\nCommit 'b'\nSecond\n\nDetail"

    def test_is_hashable(self):
        message = ComposedMessage(subject_line="S", body_sections=(MessageSection(None, "x"),))
        assert hash(message) == hash(ComposedMessage(subject_line="S", body_sections=(MessageSection(None, "x"),)))


class TestIntegrationAction:
    def test_merge_prefix(self):
        assert IntegrationAction.MERGE.message_prefix("abc1234", "hotfix") == "Merged 'abc1234' from hotfix: "

    def test_skip_prefix(self):
        assert IntegrationAction.SKIP.message_prefix("abc1234", "release/1.2") == "Skipped 'abc1234' from release/1.2: "

    def test_str(self):
        assert str(IntegrationAction.SKIP) == "skip"
        assert IntegrationAction("merge") is IntegrationAction.MERGE


class TestResults:
    def test_completed_defaults(self):
        result = Completed(commit="abc", message="m", action=IntegrationAction.MERGE)
        assert result.skip_invariant_ok is True

    def test_suspended_carries_token(self):
        token = PendingIntegration(
            commit="abc",
            abbrev="abc",
            from_branch="hotfix",
            into_branch="develop",
            base="def",
            message="m",
        )
        result = Suspended(token=token, conflicts=("app.py",))

        assert result.token.action is IntegrationAction.MERGE
        assert result.token.conflicts == []
        assert isinstance(result.token.created_at, datetime)
        assert result.token.created_at.tzinfo is not None
