"""bgit CLI entrypoint.

Command-line interface for bgit, a safety-first wrapper around git.
"""

from __future__ import annotations

import functools
import logging
import sys
from pathlib import Path

import click
import tomli_w

from bgit.adapters.config.toml_config_provider import TomlConfigProvider
from bgit.adapters.console.click_output import ClickEchoHandler, ClickOutput
from bgit.adapters.git_cmd.git_adapter import GitAdapter
from bgit.core.commands.base import CommandEnvironment, ConfirmCallback, UseCase
from bgit.core.commands.branch import BranchRequest, BranchUseCase
from bgit.core.commands.merge import MergeRequest, MergeUseCase
from bgit.core.commands.nuke import NukeRequest, NukeUseCase
from bgit.core.commands.report import (
    CheckUseCase,
    LogUseCase,
    RemoteUseCase,
    ReportRequest,
    StatusUseCase,
    WhereUseCase,
)
from bgit.core.commands.ship import ShipRequest, ShipUseCase
from bgit.core.commands.undo import UndoRequest, UndoUseCase
from bgit.core.errors import BgitCliError
from bgit.core.inspector import RepositoryInspector
from bgit.core.plan import PlanRunner
from bgit.core.progress import progress_context
from bgit.domain.config import BgitConfig, ExecutionConfig
from bgit.domain.entities import ExitCode
from bgit.domain.exceptions import BgitError
from bgit.ports.config import ConfigProvider
from bgit.shared.config_io import (
    config_to_data,
    get_global_config_path,
    get_local_config_path,
    save_config,
)
from bgit.version import __version__

LOG_FORMAT = "[bgit] %(message)s"


class BgitCommand(click.Command):
    """Command whose usage errors exit with 1 instead of click's 2."""

    def make_context(self, *args, **kwargs):
        try:
            return super().make_context(*args, **kwargs)
        except click.UsageError as e:
            e.exit_code = ExitCode.INVALID_USAGE
            raise


class BgitGroup(click.Group):
    """Group with the same usage-error exit code, including unknown commands."""

    command_class = BgitCommand
    group_class = type

    def make_context(self, *args, **kwargs):
        try:
            return super().make_context(*args, **kwargs)
        except click.UsageError as e:
            e.exit_code = ExitCode.INVALID_USAGE
            raise

    def resolve_command(self, ctx, args):
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            e.exit_code = ExitCode.INVALID_USAGE
            raise


def handle_cli_errors(command_name: str):
    """Decorator to handle common CLI errors.

    BgitCliError exceptions are re-raised to use their built-in formatting,
    domain errors keep their exit code, and anything else becomes a
    generic failure (with a traceback in verbose mode).

    Args:
        command_name: Name of the command for error messages.

    Returns:
        Decorated function with error handling.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except (BgitCliError, click.exceptions.Exit, click.Abort):
                raise
            except BgitError as e:
                raise BgitCliError(
                    e.message, hint=e.hint, detail=e.detail, exit_code=e.exit_code
                ) from e
            except Exception as e:
                ctx = click.get_current_context()
                if ctx.obj.get("verbose", False):
                    import traceback

                    traceback.print_exc()
                raise BgitCliError(
                    f"Unexpected error in {command_name}: {e}",
                    hint="Run with --verbose for more details",
                ) from e

        return wrapper

    return decorator


def _configure_logging(verbose: bool) -> None:
    """Route the bgit logger through click, replacing any earlier handler."""
    logger = logging.getLogger("bgit")
    for handler in list(logger.handlers):
        if isinstance(handler, ClickEchoHandler):
            logger.removeHandler(handler)
    handler = ClickEchoHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


def _set_verbose(ctx: click.Context, param: click.Parameter, value: bool) -> bool:
    if value:
        ctx.ensure_object(dict)["verbose"] = True
    return value


verbose_option = click.option(
    "--verbose",
    "-v",
    is_flag=True,
    expose_value=False,
    callback=_set_verbose,
    help="Trace every mutating git command.",
)

dry_run_option = click.option(
    "--dry-run",
    is_flag=True,
    help="Print the git commands that would run without running them.",
)

yes_option = click.option(
    "--yes",
    "-y",
    is_flag=True,
    help="Skip the confirmation prompt.",
)


def _load_settings(
    cwd: Path, provider: ConfigProvider | None = None
) -> tuple[BgitConfig, Path | None]:
    """Load persistent settings for the repository containing cwd, if any.

    Args:
        cwd: Directory bgit was invoked from.
        provider: Settings source; defaults to the TOML file cascade.

    Returns:
        Tuple of (settings, git_dir). git_dir is None outside a repository.
    """
    inspector = RepositoryInspector(GitAdapter(ExecutionConfig(cwd=cwd)), cwd)
    git_dir = inspector.git_dir()
    provider = provider or TomlConfigProvider()
    return provider.load(git_dir), git_dir


def _confirm_callback(settings: BgitConfig, yes: bool) -> ConfirmCallback | None:
    """Pick the confirmation callback for destructive commands.

    Returns None when no prompt should be shown.
    """
    if yes:
        return None
    policy = settings.safety.confirm
    if policy == "never":
        return None
    if policy == "tty" and not sys.stdin.isatty():
        return None
    return lambda prompt: click.confirm(prompt, default=False)


def _run_use_case(
    ctx: click.Context,
    use_case_cls: type[UseCase],
    request,
    *,
    dry_run: bool = False,
    yes: bool = False,
) -> None:
    """Build the environment, run one use case and report its ExitSignal.

    Raises:
        BgitCliError: If the use case terminates with a non-zero exit code.
    """
    obj = ctx.ensure_object(dict)
    cwd = Path.cwd()
    settings, _ = _load_settings(cwd)
    verbose = obj.get("verbose", False) or settings.output.verbose
    _configure_logging(verbose)

    config = ExecutionConfig(verbose=verbose, dry_run=dry_run, cwd=cwd)
    output = ClickOutput()
    vcs = GitAdapter(config, output)

    quiet = obj.get("quiet", False) or not settings.output.progress
    with progress_context(quiet_mode=quiet) as progress:
        env = CommandEnvironment(
            config=config,
            vcs=vcs,
            output=output,
            settings=settings,
            runner=PlanRunner(vcs, dry_run=dry_run, progress=progress),
            confirm=_confirm_callback(settings, yes),
        )
        signal = use_case_cls(env).execute(request)

    for line in signal.lines:
        click.echo(line)
    if not signal.success:
        raise BgitCliError.from_signal(signal)


@click.group(cls=BgitGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="bgit")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    envvar="BGIT_VERBOSE",
    help="Trace every mutating git command and log internal steps.",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress progress bars.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool) -> None:
    """bgit - git without the foot-guns.

    Ship work with one command, switch branches safely, merge only what is
    shipped, and undo or nuke with a dry run first.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    _configure_logging(verbose)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


@cli.command()
@click.option("--message", "-m", type=str, default=None, help="Commit message.")
@dry_run_option
@verbose_option
@click.pass_context
@handle_cli_errors("ship")
def ship(ctx: click.Context, message: str | None, dry_run: bool) -> None:
    """Pull, stage everything, commit and push the current branch.

    Without -m a message like "main: 1 file changed (2024-01-01 12:00:00)"
    is generated.
    """
    _run_use_case(ctx, ShipUseCase, ShipRequest(message=message), dry_run=dry_run)


@cli.command()
@click.argument("name", type=str)
@dry_run_option
@verbose_option
@click.pass_context
@handle_cli_errors("branch")
def branch(ctx: click.Context, name: str, dry_run: bool) -> None:
    """Switch to NAME, tracking or creating and publishing it as needed."""
    _run_use_case(ctx, BranchUseCase, BranchRequest(name=name), dry_run=dry_run)


@cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("tokens", nargs=-1, type=click.UNPROCESSED)
@verbose_option
@click.pass_context
@handle_cli_errors("merge")
def merge(ctx: click.Context, tokens: tuple[str, ...]) -> None:
    """Merge a shipped branch into another: bgit merge SOURCE -> DESTINATION.

    Both branches must be fully shipped. The merge always creates a merge
    commit and the destination is pushed afterwards.
    """
    _run_use_case(ctx, MergeUseCase, MergeRequest(tokens=tokens))


@cli.command()
@dry_run_option
@yes_option
@verbose_option
@click.pass_context
@handle_cli_errors("undo")
def undo(ctx: click.Context, dry_run: bool, yes: bool) -> None:
    """Remove the latest commit locally and on origin."""
    _run_use_case(ctx, UndoUseCase, UndoRequest(), dry_run=dry_run, yes=yes)


@cli.command()
@dry_run_option
@yes_option
@verbose_option
@click.pass_context
@handle_cli_errors("nuke")
def nuke(ctx: click.Context, dry_run: bool, yes: bool) -> None:
    """Make the local repository an exact copy of origin.

    Discards uncommitted changes, untracked and ignored files, local-only
    branches and unpushed commits.
    """
    _run_use_case(ctx, NukeUseCase, NukeRequest(), dry_run=dry_run, yes=yes)


@cli.command()
@verbose_option
@click.pass_context
@handle_cli_errors("status")
def status(ctx: click.Context) -> None:
    """Show branch, upstream, working tree state and sync status."""
    _run_use_case(ctx, StatusUseCase, ReportRequest())


@cli.command()
@click.option(
    "--limit",
    "-n",
    type=click.IntRange(min=1),
    default=None,
    help="Number of commits to show (default: from config).",
)
@verbose_option
@click.pass_context
@handle_cli_errors("log")
def log(ctx: click.Context, limit: int | None) -> None:
    """Show recent commits, one per line."""
    _run_use_case(ctx, LogUseCase, ReportRequest(limit=limit))


@cli.command()
@verbose_option
@click.pass_context
@handle_cli_errors("where")
def where(ctx: click.Context) -> None:
    """Show the repository root, branch and current directory."""
    _run_use_case(ctx, WhereUseCase, ReportRequest())


@cli.command()
@verbose_option
@click.pass_context
@handle_cli_errors("remote")
def remote(ctx: click.Context) -> None:
    """Show origin's URL, default branch and known branches."""
    _run_use_case(ctx, RemoteUseCase, ReportRequest())


@cli.command()
@verbose_option
@click.pass_context
@handle_cli_errors("check")
def check(ctx: click.Context) -> None:
    """Report whether 'bgit ship' would succeed, without changing anything."""
    _run_use_case(ctx, CheckUseCase, ReportRequest())


@cli.command(name="help")
@verbose_option
@click.pass_context
def help_command(ctx: click.Context) -> None:
    """Show this message."""
    click.echo(ctx.parent.get_help())


@cli.command()
@verbose_option
def version() -> None:
    """Show the bgit version."""
    click.echo(f"bgit {__version__}")


@cli.group()
def config() -> None:
    """Inspect and create bgit configuration files."""


@config.command(name="show")
@verbose_option
@handle_cli_errors("config show")
def config_show() -> None:
    """Show the effective configuration and where it was loaded from."""
    settings, git_dir = _load_settings(Path.cwd())
    global_path = get_global_config_path()
    click.echo(f"# global: {global_path}{'' if global_path.exists() else ' (not found)'}")
    if git_dir is not None:
        local_path = get_local_config_path(git_dir)
        click.echo(f"# local: {local_path}{'' if local_path.exists() else ' (not found)'}")
    click.echo(tomli_w.dumps(config_to_data(settings)).rstrip())


@config.command(name="init")
@click.option(
    "--force",
    "-f",
    is_flag=True,
    help="Overwrite an existing repository config file.",
)
@verbose_option
@handle_cli_errors("config init")
def config_init(force: bool) -> None:
    """Write a repository-local config file with the default settings.

    The file lives inside the git directory, so it is never shipped.
    """
    _, git_dir = _load_settings(Path.cwd())
    if git_dir is None:
        raise BgitCliError(
            f"Not a git repository: {Path.cwd()}",
            hint="Run bgit from inside a git working tree",
            exit_code=ExitCode.NOT_A_REPOSITORY,
        )

    path = get_local_config_path(git_dir)
    if path.exists() and not force:
        raise BgitCliError(
            f"Config file already exists: {path}",
            hint="Use --force to overwrite it",
        )
    save_config(BgitConfig.default(), path)
    click.echo(f"Wrote {path}")


def main() -> int:
    """Main entrypoint for the CLI."""
    try:
        cli(obj={})
        return 0
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
