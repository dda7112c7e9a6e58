"""Unit tests for the in-memory repository backend."""

from pathlib import Path

from hotfix_sync.engine.orchestrator import IntegrationOrchestrator
from hotfix_sync.git.memory import InMemoryRepository


class TestStateDir:
    def test_uses_given_directory(self, tmp_path: Path):
        repository = InMemoryRepository(state_dir=tmp_path / "state")

        assert repository.state_dir == tmp_path / "state"
        assert not (tmp_path / "state").exists()

    def test_accepts_string_path(self, tmp_path: Path):
        repository = InMemoryRepository(str(tmp_path))

        assert repository.state_dir == tmp_path

    def test_pending_step_is_stored_under_given_directory(self, tmp_path: Path):
        repository = InMemoryRepository(state_dir=tmp_path / "state")
        root = repository.commit("develop", "Initial commit", {"app.py": "v1\n"})
        repository.create_branch("hotfix", root)
        commit = repository.commit("hotfix", "Fix crash", {"app.py": "v1-hotfix\n"})
        repository.commit("develop", "Rework app", {"app.py": "v2\n"})
        orchestrator = IntegrationOrchestrator(repository)

        orchestrator.integrate(commit, "hotfix", "develop")

        assert orchestrator.state.pending_path.parent == tmp_path / "state"
        assert orchestrator.state.pending_path.exists()
