"""
Persistence of suspended integration steps.

When a merge stops on conflicts the integration step is suspended and control
returns to the operator. StateManager keeps the resume token on disk so that
a later ``hotfix-sync continue`` (or a scripted caller) can finalize the step
with exactly the message computed before the merge started.

State File Structure:
    A single JSON file ``pending.json`` in the state directory (by default
    ``<git-dir>/hotfix-sync/``)::

        {
            "commit": "3f2a9c1d...",
            "abbrev": "3f2a9c1",
            "from_branch": "hotfix",
            "into_branch": "develop",
            "base": "9e8d7c6b...",
            "action": "merge",
            "message": "Merged '3f2a9c1' from hotfix: Fix crash",
            "conflicts": ["app.py"],
            "created_at": "2026-10-19T10:30:00Z"
        }

Example:
    >>> state = StateManager(repo.state_dir)
    >>> state.save(pending)
    >>> state.load().commit == pending.commit
    True
    >>> state.clear()
"""

from pathlib import Path

import structlog
from pydantic import ValidationError

from hotfix_sync.exceptions import IntegrationStateError
from hotfix_sync.models.domain import PendingIntegration

log = structlog.get_logger(__name__)

PENDING_FILENAME = "pending.json"


class StateManager:
    """Store and retrieve the pending integration of one repository.

    Attributes:
        state_dir: Directory holding the state file.
    """

    def __init__(self, state_dir: str | Path) -> None:
        """Initialize the state manager with a storage directory.

        The directory is created on first save, not here, so that read-only
        commands never write to the repository.

        Args:
            state_dir: Directory for the state file.
        """
        self.state_dir = Path(state_dir)

    @property
    def pending_path(self) -> Path:
        """Path of the pending-integration file."""
        return self.state_dir / PENDING_FILENAME

    def load(self) -> PendingIntegration | None:
        """Load the pending integration, or None if there is none.

        Raises:
            IntegrationStateError: If the state file exists but is unreadable.
        """
        path = self.pending_path
        if not path.exists():
            return None

        try:
            return PendingIntegration.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            raise IntegrationStateError(f"Cannot read pending integration state from {path}: {e}") from e

    def save(self, pending: PendingIntegration) -> None:
        """Atomically write the pending integration.

        State is written to a .tmp file first, then renamed over the target.
        """
        self.state_dir.mkdir(parents=True, exist_ok=True)
        path = self.pending_path
        tmp_path = path.with_suffix(".tmp")

        tmp_path.write_text(pending.model_dump_json(indent=2), encoding="utf-8")
        # Atomic rename - safe on POSIX when same filesystem
        tmp_path.replace(path)
        log.debug("pending_integration_saved", path=str(path), commit=pending.commit)

    def clear(self) -> None:
        """Remove the pending integration, if any."""
        self.pending_path.unlink(missing_ok=True)
        log.debug("pending_integration_cleared", path=str(self.pending_path))
