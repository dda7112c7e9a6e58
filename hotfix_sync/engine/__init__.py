"""Integration decision and message composition engine."""

from hotfix_sync.engine.classifier import (
    BRANCH_MERGE_PREFIX,
    COMMIT_MERGE_PREFIX,
    PULL_REQUEST_MERGE_PREFIX,
    classify_body,
)
from hotfix_sync.engine.composer import MessageComposer
from hotfix_sync.engine.orchestrator import IntegrationOrchestrator, IntegrationPlan
from hotfix_sync.engine.skip import BRANCH_SPECIFIC_TAG, SkipDecision
from hotfix_sync.engine.state_manager import StateManager

__all__ = [
    "BRANCH_MERGE_PREFIX",
    "BRANCH_SPECIFIC_TAG",
    "COMMIT_MERGE_PREFIX",
    "PULL_REQUEST_MERGE_PREFIX",
    "IntegrationOrchestrator",
    "IntegrationPlan",
    "MessageComposer",
    "SkipDecision",
    "StateManager",
    "classify_body",
]
