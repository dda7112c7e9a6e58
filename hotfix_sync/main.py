"""CLI entry point for hotfix-sync."""

import sys
from pathlib import Path

import click
import structlog

from hotfix_sync.config.settings import IntegratorSettings
from hotfix_sync.engine.orchestrator import IntegrationOrchestrator
from hotfix_sync.engine.state_manager import StateManager
from hotfix_sync.enums import IntegrationAction
from hotfix_sync.exceptions import HotfixSyncError, NothingToIntegrateError, UnresolvedConflictsError
from hotfix_sync.git.history import RepositoryBackend
from hotfix_sync.git.models import CommitRef
from hotfix_sync.git.repository import GitRepository
from hotfix_sync.models.domain import Completed, PendingIntegration, Suspended
from hotfix_sync.utils.logging_config import configure_logging

log = structlog.get_logger(__name__)

EXIT_FAILURE = 1
EXIT_SUSPENDED = 3


@click.group(no_args_is_help=True)
@click.option("--repo", "repo_path", default=".", type=click.Path(file_okay=False), help="Path to the repository")
@click.option("--config", "config_path", default=None, type=click.Path(dir_okay=False), help="Configuration file")
@click.option("--log-level", default=None, help="Logging level (overrides configuration)")
@click.option("--log-format", type=click.Choice(["console", "json"]), default=None, help="Log output format")
@click.pass_context
def cli(
    ctx: click.Context,
    repo_path: str,
    config_path: str | None,
    log_level: str | None,
    log_format: str | None,
) -> None:
    """hotfix-sync: integrate hotfix commits into a development branch, one at a time.

    Each step takes the oldest commit of FROM_BRANCH that INTO_BRANCH does not
    contain yet and merges it, or skips it when its message carries the
    branch-specific tag on a line of its own.
    """
    ctx.ensure_object(dict)

    try:
        settings = ctx.obj.get("settings") or IntegratorSettings.load(config_path, repo_root=Path(repo_path))
    except HotfixSyncError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_FAILURE)

    configure_logging(log_level or settings.logging.level, log_format or settings.logging.format)  # type: ignore[arg-type]

    try:
        repository: RepositoryBackend = ctx.obj.get("repository") or GitRepository(repo_path)
        orchestrator = _build_orchestrator(repository, settings)
    except HotfixSyncError as e:
        click.echo(f"Error: {e}", err=True)
        log.debug("repository_open_error", exc_info=True)
        sys.exit(EXIT_FAILURE)

    ctx.obj["settings"] = settings
    ctx.obj["repository"] = repository
    ctx.obj["orchestrator"] = orchestrator


def _build_orchestrator(repository: RepositoryBackend, settings: IntegratorSettings) -> IntegrationOrchestrator:
    state = StateManager(settings.state_dir) if settings.state_dir else None
    return IntegrationOrchestrator(repository, state=state, skip_tag=settings.skip_tag)


def _require_next_commit(orchestrator: IntegrationOrchestrator, from_branch: str, into_branch: str) -> CommitRef:
    commit = orchestrator.next_commit(from_branch, into_branch)
    if commit is None:
        raise NothingToIntegrateError(from_branch, into_branch)
    return commit


def _first_line(message: str) -> str:
    return message.split("\n", 1)[0]


def _report_completed(repository: RepositoryBackend, result: Completed) -> None:
    click.echo(f"[{repository.abbrev(result.commit)}] {_first_line(result.message)}")
    if not result.skip_invariant_ok:
        click.echo(
            "Warning: the skip commit changes files relative to its first parent; check earlier history.",
            err=True,
        )


def _report_suspended(pending: PendingIntegration) -> None:
    click.echo(f"Merge of '{pending.abbrev}' from {pending.from_branch} stopped on conflicts:", err=True)
    for path in pending.conflicts:
        click.echo(f"  {path}", err=True)
    click.echo("Resolve them, stage the files with 'git add', then run 'hotfix-sync continue'.", err=True)


def _wait_for_resolution(orchestrator: IntegrationOrchestrator, pending: PendingIntegration) -> Completed:
    """Block until the operator confirms the conflicts are resolved.

    Declining leaves the integration suspended and exits with EXIT_SUSPENDED.
    """
    while True:
        if not click.confirm("Conflicts resolved and staged?", default=True, err=True):
            click.echo("Integration left suspended; run 'hotfix-sync continue' when ready.", err=True)
            sys.exit(EXIT_SUSPENDED)
        try:
            return orchestrator.resume(pending)
        except UnresolvedConflictsError as e:
            click.echo(f"Error: {e}", err=True)


def _integration_step(
    ctx: click.Context,
    from_branch: str,
    into_branch: str,
    force_skip: bool = False,
    force_merge: bool = False,
    wait: bool | None = None,
) -> None:
    orchestrator: IntegrationOrchestrator = ctx.obj["orchestrator"]
    settings: IntegratorSettings = ctx.obj["settings"]

    try:
        orchestrator.check_preconditions(from_branch, into_branch)
        commit = _require_next_commit(orchestrator, from_branch, into_branch)

        result = orchestrator.integrate(commit, from_branch, into_branch, force_skip, force_merge)

        if isinstance(result, Suspended):
            _report_suspended(result.token)
            if not (settings.wait_for_resolution if wait is None else wait):
                sys.exit(EXIT_SUSPENDED)
            result = _wait_for_resolution(orchestrator, result.token)

        _report_completed(orchestrator.repository, result)
    except HotfixSyncError as e:
        click.echo(f"Error: {e}", err=True)
        log.debug("integration_step_error", exc_info=True)
        sys.exit(EXIT_FAILURE)
    except (KeyboardInterrupt, click.Abort):
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)
    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        log.error("integration_step_unexpected", exc_info=True)
        sys.exit(EXIT_FAILURE)


_wait_option = click.option(
    "--wait/--no-wait",
    default=None,
    help="On conflicts, wait for resolution instead of exiting",
)


@cli.command()
@click.argument("from_branch")
@click.argument("into_branch")
@_wait_option
@click.pass_context
def apply(ctx: click.Context, from_branch: str, into_branch: str, wait: bool | None) -> None:
    """Merge or skip the next commit, depending on its message."""
    _integration_step(ctx, from_branch, into_branch, wait=wait)


@cli.command()
@click.argument("from_branch")
@click.argument("into_branch")
@click.pass_context
def skip(ctx: click.Context, from_branch: str, into_branch: str) -> None:
    """Skip the next commit: record it as merged without its changes."""
    _integration_step(ctx, from_branch, into_branch, force_skip=True)


@cli.command()
@click.argument("from_branch")
@click.argument("into_branch")
@_wait_option
@click.pass_context
def merge(ctx: click.Context, from_branch: str, into_branch: str, wait: bool | None) -> None:
    """Merge the next commit, even if it is tagged as branch-specific."""
    _integration_step(ctx, from_branch, into_branch, force_merge=True, wait=wait)


@cli.command()
@click.argument("from_branch")
@click.argument("into_branch")
@click.pass_context
def show(ctx: click.Context, from_branch: str, into_branch: str) -> None:
    """Print the message 'apply' would use for the next commit, changing nothing."""
    orchestrator: IntegrationOrchestrator = ctx.obj["orchestrator"]

    try:
        orchestrator.check_preconditions(from_branch, into_branch, require_idle=False)
        commit = _require_next_commit(orchestrator, from_branch, into_branch)
        click.echo(orchestrator.show(commit, from_branch, into_branch))
    except HotfixSyncError as e:
        click.echo(f"Error: {e}", err=True)
        log.debug("show_error", exc_info=True)
        sys.exit(EXIT_FAILURE)
    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        log.error("show_unexpected", exc_info=True)
        sys.exit(EXIT_FAILURE)


@cli.command("continue")
@click.pass_context
def continue_command(ctx: click.Context) -> None:
    """Finalize an integration suspended on merge conflicts."""
    orchestrator: IntegrationOrchestrator = ctx.obj["orchestrator"]

    try:
        result = orchestrator.resume()
    except HotfixSyncError as e:
        click.echo(f"Error: {e}", err=True)
        log.debug("continue_error", exc_info=True)
        sys.exit(EXIT_FAILURE)

    _report_completed(orchestrator.repository, result)


@cli.command()
@click.pass_context
def abort(ctx: click.Context) -> None:
    """Abandon an integration suspended on merge conflicts."""
    orchestrator: IntegrationOrchestrator = ctx.obj["orchestrator"]

    try:
        pending = orchestrator.abort()
    except HotfixSyncError as e:
        click.echo(f"Error: {e}", err=True)
        log.debug("abort_error", exc_info=True)
        sys.exit(EXIT_FAILURE)

    if pending is None:
        click.echo("No suspended integration.", err=True)
        sys.exit(EXIT_FAILURE)
    click.echo(f"Aborted integration of '{pending.abbrev}' from {pending.from_branch}.")


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the integration suspended on merge conflicts, if any."""
    orchestrator: IntegrationOrchestrator = ctx.obj["orchestrator"]

    try:
        pending = orchestrator.pending()
    except HotfixSyncError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_FAILURE)

    if pending is None:
        click.echo("No suspended integration.")
        return

    verb = "Skipping" if pending.action is IntegrationAction.SKIP else "Merging"
    click.echo(f"{verb} '{pending.abbrev}' from {pending.from_branch} into {pending.into_branch}")
    click.echo(f"Suspended at: {pending.created_at.isoformat()}")
    if pending.conflicts:
        click.echo("Conflicted paths:")
        for path in pending.conflicts:
            click.echo(f"  {path}")
    click.echo("")
    click.echo(pending.message)


if __name__ == "__main__":
    cli()
