"""Domain models for hotfix-sync."""

from hotfix_sync.models.domain import (
    ComposedMessage,
    Completed,
    IntegrationRequest,
    IntegrationResult,
    MessageSection,
    PendingIntegration,
    Suspended,
)

__all__ = [
    "ComposedMessage",
    "Completed",
    "IntegrationRequest",
    "IntegrationResult",
    "MessageSection",
    "PendingIntegration",
    "Suspended",
]
