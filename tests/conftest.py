"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest
import structlog

from hotfix_sync.engine.composer import MessageComposer
from hotfix_sync.engine.orchestrator import IntegrationOrchestrator
from hotfix_sync.engine.state_manager import StateManager
from hotfix_sync.git.memory import InMemoryRepository


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo logging configuration done by CLI invocations."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def temp_state_dir(tmp_path: Path) -> Path:
    """Temporary state directory (not created)."""
    return tmp_path / "state"


@pytest.fixture
def repo(temp_state_dir: Path) -> InMemoryRepository:
    """In-memory repository with develop checked out and hotfix branched from it."""
    repository = InMemoryRepository(state_dir=temp_state_dir)
    root = repository.commit("develop", "Initial commit", {"README.md": "# Project\n", "app.py": "v1\n"})
    repository.create_branch("hotfix", root)
    return repository


@pytest.fixture
def composer(repo: InMemoryRepository) -> MessageComposer:
    """MessageComposer over the in-memory repository."""
    return MessageComposer(repo)


@pytest.fixture
def state_manager(temp_state_dir: Path) -> StateManager:
    """StateManager rooted at the temporary state directory."""
    return StateManager(temp_state_dir)


@pytest.fixture
def orchestrator(repo: InMemoryRepository, state_manager: StateManager) -> IntegrationOrchestrator:
    """IntegrationOrchestrator over the in-memory repository."""
    return IntegrationOrchestrator(repo, state=state_manager)


@pytest.fixture
def conflicting_repo(repo: InMemoryRepository) -> InMemoryRepository:
    """Repository where the next hotfix commit conflicts with develop."""
    repo.commit("hotfix", "Fix crash in app\n\nGuard against empty input.", {"app.py": "v1-hotfix\n"})
    repo.commit("develop", "Rework app", {"app.py": "v2\n"})
    return repo
